# toolbox/preferences.py
from __future__ import annotations

import logging
import threading
from dataclasses import asdict, dataclass
from typing import Any, Optional

from .storage.kv import KeyValueStore, StorageUnavailable

logger = logging.getLogger(__name__)

THEME_KEY = "anilist_theme"
COLOR_THEME_KEY = "anilist_color_theme"
BACKGROUND_KEY = "anilist_background_image"
BACKGROUND_POSITION_KEY = "anilist_background_image_position"
BACKGROUND_ZOOM_KEY = "anilist_background_image_zoom"
COMPACT_KEY = "anilist_compact_mode"

THEMES = {"light", "dark"}
COLOR_THEMES = {"default", "blue", "green", "purple", "orange", "pink", "red"}


@dataclass
class PreferenceValues:
    theme: str = "dark"
    color_theme: str = "default"
    background_image: Optional[str] = None
    background_position: str = "center"
    background_zoom: int = 100  # percent
    compact_mode: bool = False


class Preferences:
    """
    Process-wide UI preferences.

    init() hydrates from storage (invalid or absent values fall back to the
    defaults), update() validates + stores, apply() returns the attributes the
    templates put on the document root.
    """

    def __init__(self, kv: KeyValueStore):
        self.kv = kv
        self.values = PreferenceValues()
        self._lock = threading.Lock()

    def init(self) -> "Preferences":
        v = PreferenceValues()
        theme = self.kv.get_item(THEME_KEY)
        if theme in THEMES:
            v.theme = theme
        color = self.kv.get_item(COLOR_THEME_KEY)
        if color in COLOR_THEMES:
            v.color_theme = color
        bg = self.kv.get_item(BACKGROUND_KEY)
        v.background_image = bg or None
        pos = self.kv.get_item(BACKGROUND_POSITION_KEY)
        if pos:
            v.background_position = pos
        v.background_zoom = _parse_zoom(self.kv.get_item(BACKGROUND_ZOOM_KEY), v.background_zoom)
        v.compact_mode = self.kv.get_item(COMPACT_KEY) == "true"
        with self._lock:
            self.values = v
        return self

    def update(self, **changes: Any) -> PreferenceValues:
        """Validate and persist changed fields. Raises ValueError on bad input."""
        writes: dict[str, Optional[str]] = {}
        with self._lock:
            v = PreferenceValues(**asdict(self.values))
            if changes.get("theme") is not None:
                if changes["theme"] not in THEMES:
                    raise ValueError(f"unknown theme {changes['theme']!r}")
                v.theme = changes["theme"]
                writes[THEME_KEY] = v.theme
            if changes.get("color_theme") is not None:
                if changes["color_theme"] not in COLOR_THEMES:
                    raise ValueError(f"unknown color theme {changes['color_theme']!r}")
                v.color_theme = changes["color_theme"]
                writes[COLOR_THEME_KEY] = v.color_theme
            if "background_image" in changes:
                v.background_image = changes["background_image"] or None
                writes[BACKGROUND_KEY] = v.background_image
            if changes.get("background_position"):
                v.background_position = str(changes["background_position"])
                writes[BACKGROUND_POSITION_KEY] = v.background_position
            if changes.get("background_zoom") is not None:
                zoom = int(changes["background_zoom"])
                if not 10 <= zoom <= 500:
                    raise ValueError("background_zoom must be between 10 and 500")
                v.background_zoom = zoom
                writes[BACKGROUND_ZOOM_KEY] = str(zoom)
            if changes.get("compact_mode") is not None:
                v.compact_mode = bool(changes["compact_mode"])
                writes[COMPACT_KEY] = "true" if v.compact_mode else "false"
            self.values = v

        for key, value in writes.items():
            try:
                if value is None:
                    self.kv.remove_item(key)
                else:
                    self.kv.set_item(key, value)
            except StorageUnavailable as e:
                # the in-memory value still applies for this process
                logger.warning("Preference %s not saved: %s", key, e)
        return v

    def apply(self) -> dict[str, str]:
        v = self.values
        attrs = {
            "data-theme": v.theme,
            "data-color-theme": v.color_theme,
            "data-compact": "true" if v.compact_mode else "false",
        }
        if v.background_image:
            attrs["style"] = (
                f"background-image:url('{v.background_image}');"
                f"background-position:{v.background_position};"
                f"background-size:{v.background_zoom}%"
            )
        return attrs

    def as_dict(self) -> dict[str, Any]:
        return asdict(self.values)


def _parse_zoom(raw: Optional[str], default: int) -> int:
    if not raw:
        return default
    try:
        zoom = int(float(raw))
    except ValueError:
        return default
    return zoom if 10 <= zoom <= 500 else default
