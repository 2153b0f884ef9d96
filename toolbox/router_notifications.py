# toolbox/router_notifications.py
from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from .deps import get_notifications
from .services.notifications import NotificationChannel

router = APIRouter(prefix="/notifications", tags=["notifications"])


class ToastIn(BaseModel):
    message: str = Field(min_length=1)
    type: Literal["success", "error", "warning", "info"] = "info"
    duration_ms: int = Field(default=5000, ge=0)


@router.get("")
def list_toasts(channel: NotificationChannel = Depends(get_notifications)):
    return {"toasts": [t.to_dict() for t in channel.active()], "requests": channel.requests.count}


@router.post("")
def post_toast(toast: ToastIn, channel: NotificationChannel = Depends(get_notifications)):
    t = channel.show(toast.message, toast.type, toast.duration_ms)
    return {"ok": True, "toast": t.to_dict()}


@router.delete("/{toast_id}")
def dismiss_toast(toast_id: str, channel: NotificationChannel = Depends(get_notifications)):
    if not channel.dismiss(toast_id):
        raise HTTPException(status_code=404, detail="Unknown toast")
    return {"ok": True}


# ---------- Request counter ----------


@router.get("/requests")
def request_count(channel: NotificationChannel = Depends(get_notifications)):
    return {"count": channel.requests.count}


@router.post("/requests")
def request_increment(channel: NotificationChannel = Depends(get_notifications)):
    return {"count": channel.requests.increment()}


@router.post("/requests/reset")
def request_reset(channel: NotificationChannel = Depends(get_notifications)):
    channel.requests.reset()
    return {"count": 0}
