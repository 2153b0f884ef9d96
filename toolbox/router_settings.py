# toolbox/router_settings.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel

from .deps import get_desktop, get_notifications, get_preferences, get_store
from .preferences import Preferences
from .services.desktop import Desktop
from .services.notifications import NotificationChannel
from .storage.backup import (
    BackupFormatError,
    backup_filename,
    clear_data,
    export_data,
    import_data,
    storage_stats,
)
from .storage.kv import KeyValueStore, StorageUnavailable

log = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["settings"])
templates = Jinja2Templates(directory=str(Path(__file__).parent / "ui" / "templates"))


class PreferencesUpdate(BaseModel):
    theme: Optional[str] = None
    color_theme: Optional[str] = None
    background_image: Optional[str] = None
    background_position: Optional[str] = None
    background_zoom: Optional[int] = None
    compact_mode: Optional[bool] = None


@router.get("", response_class=HTMLResponse)
@router.get("/", response_class=HTMLResponse)
def settings_page(
    request: Request,
    kv: KeyValueStore = Depends(get_store),
    prefs: Preferences = Depends(get_preferences),
):
    return templates.TemplateResponse(
        request,
        "settings.html",
        {"stats": storage_stats(kv), "root_attrs": prefs.apply()},
    )


# ---------- Backup ----------


@router.get("/stats")
def get_stats(kv: KeyValueStore = Depends(get_store)):
    return storage_stats(kv)


@router.get("/export")
def export_backup(kv: KeyValueStore = Depends(get_store)):
    data = export_data(kv)
    if data is None:
        raise HTTPException(status_code=404, detail="Nothing to export")
    return JSONResponse(
        data,
        headers={"Content-Disposition": f'attachment; filename="{backup_filename()}"'},
    )


@router.post("/import")
def import_backup(
    payload: Any = Body(...),
    kv: KeyValueStore = Depends(get_store),
    desktop: Desktop = Depends(get_desktop),
    prefs: Preferences = Depends(get_preferences),
    notifications: NotificationChannel = Depends(get_notifications),
):
    try:
        count = import_data(kv, payload)
    except BackupFormatError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageUnavailable as e:
        log.exception("backup import failed")
        raise HTTPException(status_code=507, detail=str(e))
    finally:
        # entries written before a failure are live on disk
        desktop.reload()
        prefs.init()
    notifications.show(f"{count} entrée(s) importée(s)", "success")
    return {"ok": True, "imported": count}


@router.post("/clear")
def clear_backup(
    kv: KeyValueStore = Depends(get_store),
    desktop: Desktop = Depends(get_desktop),
    prefs: Preferences = Depends(get_preferences),
    notifications: NotificationChannel = Depends(get_notifications),
):
    try:
        removed = clear_data(kv)
    except StorageUnavailable as e:
        log.exception("storage clear failed")
        raise HTTPException(status_code=507, detail=str(e))
    finally:
        desktop.reload()
        prefs.init()
    notifications.show("Toutes les données ont été effacées", "info")
    return {"ok": True, "removed": removed}


# ---------- Preferences ----------


@router.get("/preferences")
def get_prefs(prefs: Preferences = Depends(get_preferences)):
    return {"preferences": prefs.as_dict(), "attributes": prefs.apply()}


@router.post("/preferences")
def set_prefs(update: PreferencesUpdate, prefs: Preferences = Depends(get_preferences)):
    try:
        prefs.update(**update.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True, "preferences": prefs.as_dict(), "attributes": prefs.apply()}
