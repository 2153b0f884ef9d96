# toolbox/deps.py
from __future__ import annotations

import threading

from .config import settings
from .preferences import Preferences
from .services.desktop import Desktop
from .services.notifications import NotificationChannel
from .storage.kv import KeyValueStore

_lock = threading.Lock()
_store_singleton: KeyValueStore | None = None
_desktop_singleton: Desktop | None = None
_prefs_singleton: Preferences | None = None
_notifications_singleton: NotificationChannel | None = None


def get_store() -> KeyValueStore:
    """FastAPI dependency: the shared key-value store under settings.data_dir."""
    global _store_singleton
    with _lock:
        if _store_singleton is None:
            _store_singleton = KeyValueStore(settings.storage_path)
        return _store_singleton


def get_desktop() -> Desktop:
    global _desktop_singleton
    store = get_store()
    with _lock:
        if _desktop_singleton is None:
            _desktop_singleton = Desktop(store, settings)
        return _desktop_singleton


def get_preferences() -> Preferences:
    global _prefs_singleton
    store = get_store()
    with _lock:
        if _prefs_singleton is None:
            _prefs_singleton = Preferences(store).init()
        return _prefs_singleton


def get_notifications() -> NotificationChannel:
    global _notifications_singleton
    with _lock:
        if _notifications_singleton is None:
            _notifications_singleton = NotificationChannel(history=settings.toast_history)
        return _notifications_singleton


def reset_singletons() -> None:
    """Drop every shared instance; the next call rebuilds from current settings."""
    global _store_singleton, _desktop_singleton, _prefs_singleton, _notifications_singleton
    with _lock:
        if _desktop_singleton is not None:
            _desktop_singleton.close()
        _store_singleton = None
        _desktop_singleton = None
        _prefs_singleton = None
        _notifications_singleton = None
