# toolbox/router_home.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel, Field

from .deps import get_desktop, get_preferences
from .layout.controller import GestureInProgress, UnknownIcon
from .preferences import Preferences
from .services.desktop import Desktop

router = APIRouter(tags=["home"])
templates = Jinja2Templates(directory=str(Path(__file__).parent / "ui" / "templates"))


class ViewportUpdate(BaseModel):
    width: int = Field(gt=0)
    height: int = Field(gt=0)


class EditMode(BaseModel):
    editing: bool


class PointerDown(BaseModel):
    id: str
    x: float
    y: float
    target: Literal["body", "handle"] = "body"


class PointerMove(BaseModel):
    x: float
    y: float


@router.get("/", response_class=HTMLResponse)
def home_ui(
    request: Request,
    desktop: Desktop = Depends(get_desktop),
    prefs: Preferences = Depends(get_preferences),
):
    return templates.TemplateResponse(
        request,
        "index.html",
        {"apps": desktop.apps, "editing": desktop.controller.editing, "root_attrs": prefs.apply()},
    )


# ---------- Layout ----------


@router.get("/dashboard/layout")
def get_layout(desktop: Desktop = Depends(get_desktop)):
    return desktop.as_payload()


@router.post("/dashboard/layout")
def set_layout(payload: dict[str, Any] = Body(...), desktop: Desktop = Depends(get_desktop)):
    apps = payload.get("apps")
    if not isinstance(apps, list):
        raise HTTPException(status_code=400, detail='Expected {"apps": [...]}')
    desktop.replace_layout(apps)
    return {"ok": True, **desktop.as_payload()}


@router.post("/dashboard/layout/reset")
def reset_layout(desktop: Desktop = Depends(get_desktop)):
    desktop.reset_layout()
    return {"ok": True, **desktop.as_payload()}


@router.post("/dashboard/viewport")
def set_viewport(update: ViewportUpdate, desktop: Desktop = Depends(get_desktop)):
    desktop.set_viewport(update.width, update.height)
    return {"ok": True, "viewport": {"width": desktop.bounds.width, "height": desktop.bounds.height}}


@router.post("/dashboard/edit")
def set_edit_mode(update: EditMode, desktop: Desktop = Depends(get_desktop)):
    desktop.set_editing(update.editing)
    return {"ok": True, "editing": desktop.controller.editing}


# ---------- Gestures ----------


@router.post("/dashboard/pointer/down")
def pointer_down(event: PointerDown, desktop: Desktop = Depends(get_desktop)):
    try:
        started = desktop.pointer_down(event.id, event.x, event.y, event.target)
    except UnknownIcon:
        raise HTTPException(status_code=404, detail=f"Unknown app {event.id!r}")
    except GestureInProgress as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"ok": started, "gesture": desktop.controller.state.name}


@router.post("/dashboard/pointer/move")
def pointer_move(event: PointerMove, desktop: Desktop = Depends(get_desktop)):
    app = desktop.pointer_move(event.x, event.y)
    return {"ok": app is not None, "app": app.to_dict() if app else None}


@router.post("/dashboard/pointer/up")
def pointer_up(desktop: Desktop = Depends(get_desktop)):
    committed = desktop.pointer_up()
    return {"ok": committed is not None, **desktop.as_payload()}


@router.post("/dashboard/pointer/cancel")
def pointer_cancel(desktop: Desktop = Depends(get_desktop)):
    desktop.cancel_gesture()
    return {"ok": True, "gesture": desktop.controller.state.name}


@router.get("/dashboard/apps/{app_id}/open")
def open_app(app_id: str, desktop: Desktop = Depends(get_desktop)):
    try:
        path = desktop.open(app_id)
    except UnknownIcon:
        raise HTTPException(status_code=404, detail=f"Unknown app {app_id!r}")
    if path is None:
        raise HTTPException(status_code=409, detail="Desktop is in edit mode")
    return {"path": path}
