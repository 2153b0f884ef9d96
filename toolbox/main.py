import copy
import importlib
import logging
import logging.config
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from fastapi.staticfiles import StaticFiles
from uvicorn.config import LOGGING_CONFIG

from toolbox.deps import get_desktop, reset_singletons

# Optional routers that may not ship in every deployment.
_OPTIONAL_ROUTERS = {"router_notifications"}


def _load_router_module(name: str):
    full_name = f"{__package__}.{name}" if __package__ else name
    try:
        return importlib.import_module(full_name)
    except ModuleNotFoundError as exc:
        if exc.name == full_name and name in _OPTIONAL_ROUTERS:
            logging.getLogger(__name__).info("Optional router '%s' not available", name)
            return None
        raise


LOGGING = copy.deepcopy(LOGGING_CONFIG)
LOGGING["formatters"]["default"]["fmt"] = "%(asctime)s %(levelprefix)s [%(name)s] %(message)s"
LOGGING["formatters"]["default"]["datefmt"] = "%Y-%m-%d %H:%M:%S"
LOGGING["formatters"]["access"]["fmt"] = (
    '%(asctime)s %(levelprefix)s %(client_addr)s - "%(request_line)s" %(status_code)s'
)
LOGGING["formatters"]["access"]["datefmt"] = "%Y-%m-%d %H:%M:%S"
# route our own loggers through uvicorn's default handler
LOGGING["loggers"]["toolbox"] = {"handlers": ["default"], "level": "INFO", "propagate": False}

logging.config.dictConfig(LOGGING)

UI_DIR = Path(__file__).parent / "ui"

app = FastAPI(title="Toolbox Desktop", default_response_class=ORJSONResponse)
app.add_middleware(GZipMiddleware, minimum_size=512)


@app.on_event("startup")
async def _load_desktop():
    desktop = get_desktop()
    logging.getLogger(__name__).info("Desktop ready with %d apps", len(desktop.apps))


@app.on_event("shutdown")
async def _release_desktop():
    # drops any pointer capture left by an unfinished gesture
    reset_singletons()


for module_name in [
    "router_home",
    "router_settings",
    "router_notifications",
]:
    module = _load_router_module(module_name)
    if module is None:
        continue
    router = getattr(module, "router", None)
    if router is None:
        raise RuntimeError(f"Module {module_name} does not define a 'router'")
    app.include_router(router)

# Static
app.mount("/static", StaticFiles(directory=str(UI_DIR / "static")), name="static")
