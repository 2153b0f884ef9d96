# toolbox/layout/store.py
from __future__ import annotations

import json
import logging
from typing import Any, Callable, Optional

from ..storage.kv import KeyValueStore, StorageUnavailable
from .models import AppIcon, Layout

logger = logging.getLogger(__name__)

LAYOUT_KEY = "toolbox-layout"


class LayoutStore:
    """
    Loads and saves the desktop layout under a single storage key.

    Stored value: {"apps": [AppIcon, ...]}. A bare JSON array is read as the
    apps list written by the earlier schema. Anything unreadable falls back
    to `default_factory()`.
    """

    def __init__(
        self,
        kv: KeyValueStore,
        default_factory: Callable[[], Layout],
        key: str = LAYOUT_KEY,
    ):
        self.kv = kv
        self.key = key
        self.default_factory = default_factory

    def _decode(self, raw: str) -> Optional[Layout]:
        try:
            data: Any = json.loads(raw)
        except ValueError as e:
            logger.warning("Stored layout under %r is not valid JSON (%s); using defaults", self.key, e)
            return None

        if isinstance(data, dict):
            apps = data.get("apps")
        elif isinstance(data, list):
            apps = data  # legacy bare array
        else:
            apps = None
        if not isinstance(apps, list):
            logger.warning("Stored layout under %r has no apps list; using defaults", self.key)
            return None

        known = {a.id: a for a in self.default_factory()}
        out: Layout = []
        seen: set[str] = set()
        for entry in apps:
            ident = entry.get("id") if isinstance(entry, dict) else None
            icon = AppIcon.from_dict(entry, fallback=known.get(ident) if isinstance(ident, str) else None)
            if icon is None or icon.id in seen:
                continue
            seen.add(icon.id)
            out.append(icon)
        return out

    def load(self) -> Layout:
        raw = self.kv.get_item(self.key)
        if raw is None:
            return self.default_factory()
        layout = self._decode(raw)
        if layout is None:
            return self.default_factory()
        return layout

    def save(self, layout: Layout) -> bool:
        """Persist the layout. Returns False when storage refused the write."""
        payload = json.dumps({"apps": [a.to_dict() for a in layout]}, ensure_ascii=False)
        try:
            self.kv.set_item(self.key, payload)
        except StorageUnavailable as e:
            logger.warning("Layout not saved: %s", e)
            return False
        return True

    def reset(self) -> Layout:
        try:
            self.kv.remove_item(self.key)
        except StorageUnavailable as e:
            logger.warning("Layout not cleared: %s", e)
        return self.default_factory()
