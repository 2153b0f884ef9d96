# toolbox/storage/backup.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from ..config import settings
from .kv import KeyValueStore

BACKUP_VERSION = "1.0"

# Every key the apps write. The AniList access token is deliberately absent:
# it is never stored server-side.
STORAGE_KEYS: list[str] = [
    # AniList
    "anilist_theme",
    "anilist_color_theme",
    "anilist_background_image",
    "anilist_background_image_position",
    "anilist_background_image_zoom",
    "anilist_user",
    "anilist_username",
    "anilist_saved_users",
    "anilist_user_filters",
    "anilist_filter_presets",
    "anilist_compact_mode",
    "anilist_last_visit",
    # Calculator
    "calculator_notes",
    "calculator_view_mode",
    "calculator_windows",
    # Weather
    "meteo-cities",
]


def storage_keys() -> list[str]:
    """App keys plus the desktop layout key, which is configurable."""
    return [*STORAGE_KEYS, settings.layout_key]


class BackupFormatError(ValueError):
    pass


def _format_size(chars: int) -> str:
    if chars > 1024 * 1024:
        return f"{chars / (1024 * 1024):.2f} MB"
    return f"{chars / 1024:.2f} KB"


def storage_stats(kv: KeyValueStore) -> dict[str, Any]:
    """Total keys, keys belonging to the apps, approximate size (key + value chars)."""
    total_size = 0
    used = 0
    known = storage_keys()
    keys = kv.keys()
    for key, value in kv.items():
        total_size += len(key) + len(value)
        if key in known:
            used += 1
    return {"total": len(keys), "used": used, "size": _format_size(total_size)}


def export_data(kv: KeyValueStore, now: Optional[datetime] = None) -> Optional[dict[str, Any]]:
    """Snapshot of the known keys, or None when none of them holds a value."""
    data: dict[str, str] = {}
    for key in storage_keys():
        value = kv.get_item(key)
        if value is not None:
            data[key] = value
    if not data:
        return None
    now = now or datetime.now(timezone.utc)
    return {
        "version": BACKUP_VERSION,
        "exportDate": now.isoformat().replace("+00:00", "Z"),
        "data": data,
    }


def backup_filename(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return f"toolbox-backup-{now.date().isoformat()}.json"


def import_data(kv: KeyValueStore, payload: Any) -> int:
    """
    Write the backup's known string entries over the current ones.
    Unknown keys and non-string values are skipped. Returns the count written.
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("data"), dict):
        raise BackupFormatError('Invalid backup: expected an object with a "data" object')
    known = storage_keys()
    imported = 0
    for key, value in payload["data"].items():
        if key in known and isinstance(value, str):
            kv.set_item(key, value)
            imported += 1
    return imported


def clear_data(kv: KeyValueStore) -> int:
    removed = 0
    for key in storage_keys():
        if kv.remove_item(key):
            removed += 1
    return removed
