# toolbox/layout/models.py
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Optional


@dataclass
class AppIcon:
    id: str
    name: str
    path: str  # navigation target, e.g. "/meteo"
    icon: str  # glyph
    color: str  # hex, e.g. "#667eea"
    x: int = 0
    y: int = 0
    size: int = 100

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Any, fallback: Optional["AppIcon"] = None) -> Optional["AppIcon"]:
        """
        Lenient parse of a persisted entry. Returns None for entries that have
        no usable id. Missing text fields come from `fallback` when given.
        """
        if not isinstance(data, dict):
            return None
        ident = data.get("id")
        if not isinstance(ident, str) or not ident.strip():
            return None

        def _text(key: str, default: str) -> str:
            v = data.get(key)
            return v if isinstance(v, str) else default

        def _int(key: str, default: int) -> int:
            v = data.get(key)
            if isinstance(v, bool):
                return default
            try:
                return int(round(float(v)))
            except (TypeError, ValueError, OverflowError):
                return default

        fb = fallback or cls(id=ident, name=ident, path="/", icon="", color="#64748b")
        return cls(
            id=ident,
            name=_text("name", fb.name),
            path=_text("path", fb.path),
            icon=_text("icon", fb.icon),
            color=_text("color", fb.color),
            x=_int("x", fb.x),
            y=_int("y", fb.y),
            size=_int("size", fb.size),
        )


Layout = list[AppIcon]
