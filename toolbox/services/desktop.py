# toolbox/services/desktop.py
from __future__ import annotations

import logging
import threading
from typing import Any, Optional

from ..config import Settings, settings
from ..layout.controller import DragResizeController, Target
from ..layout.geometry import Bounds, clamp_size, compute_default_layout
from ..layout.merge import merge_layouts
from ..layout.models import AppIcon, Layout
from ..layout.store import LayoutStore
from ..storage.kv import KeyValueStore

logger = logging.getLogger(__name__)


class Desktop:
    """
    The launcher's layout session: storage, canonical defaults, container
    bounds and the drag/resize controller, wired together.

    Load (or defaults) -> merge with current defaults -> gestures mutate the
    in-memory layout -> saved once each gesture ends.
    """

    def __init__(self, kv: KeyValueStore, cfg: Settings = settings, viewport: Optional[tuple[int, int]] = None):
        self.cfg = cfg
        self._lock = threading.RLock()
        width, height = viewport or (cfg.viewport_width, cfg.viewport_height)
        self.bounds = Bounds(
            width=int(width),
            height=int(height),
            header_band=cfg.header_band,
            margin=cfg.bottom_margin,
            grid_unit=cfg.grid_unit,
        )
        self.store = LayoutStore(kv, self.defaults, key=cfg.layout_key)
        self.controller = DragResizeController(
            [],
            self.bounds,
            min_size=cfg.min_icon_size,
            max_size=cfg.max_icon_size,
            grid_unit=cfg.grid_unit,
            on_commit=self._persist,
        )
        self.reload()

    # -------- layout lifecycle --------
    def defaults(self) -> Layout:
        return compute_default_layout(
            self.bounds.width,
            item_size=self.cfg.item_size,
            spacing=self.cfg.spacing,
            grid_unit=self.cfg.grid_unit,
        )

    def reload(self) -> Layout:
        """Re-read storage, e.g. after a backup import."""
        with self._lock:
            self.controller.cancel()
            self.controller.layout = merge_layouts(self.store.load(), self.defaults())
            return self.apps

    def _persist(self, layout: Layout) -> None:
        if self.store.save(layout):
            logger.debug("Layout saved (%d apps)", len(layout))

    @property
    def apps(self) -> Layout:
        return list(self.controller.layout)

    def as_payload(self) -> dict[str, Any]:
        return {
            "apps": [a.to_dict() for a in self.controller.layout],
            "editing": self.controller.editing,
            "gesture": self.controller.state.name,
            "viewport": {"width": self.bounds.width, "height": self.bounds.height},
        }

    def replace_layout(self, items: list[Any]) -> Layout:
        """
        Take a layout sent by the client: unknown shapes and duplicate ids are
        dropped, geometry is snapped into bounds, missing defaults are added.
        """
        with self._lock:
            self.controller.cancel()
            known = {a.id: a for a in self.defaults()}
            cleaned: Layout = []
            seen: set[str] = set()
            for raw in items:
                ident = raw.get("id") if isinstance(raw, dict) else None
                app = AppIcon.from_dict(raw, fallback=known.get(ident) if isinstance(ident, str) else None)
                if app is None or app.id in seen:
                    continue
                seen.add(app.id)
                app.size = clamp_size(app.size, self.cfg.min_icon_size, self.cfg.max_icon_size, self.cfg.grid_unit)
                app.x, app.y = self.bounds.clamp_position(app.x, app.y, app.size)
                cleaned.append(app)
            layout = merge_layouts(cleaned, known.values())
            self.controller.layout = layout
            self._persist(layout)
            return self.apps

    def reset_layout(self) -> Layout:
        with self._lock:
            self.controller.cancel()
            self.controller.layout = self.store.reset()
            return self.apps

    def set_viewport(self, width: int, height: int) -> None:
        """
        Update the drag bounds. While nothing has been saved yet the default
        grid is laid out again for the new width.
        """
        with self._lock:
            self.bounds.width = max(0, int(width))
            self.bounds.height = max(0, int(height))
            if not self.controller.active and self.store.kv.get_item(self.store.key) is None:
                self.controller.layout = merge_layouts(self.store.load(), self.defaults())

    # -------- interaction --------
    def set_editing(self, editing: bool) -> None:
        with self._lock:
            self.controller.set_editing(editing)

    def pointer_down(self, icon_id: str, x: float, y: float, target: Target = "body") -> bool:
        with self._lock:
            return self.controller.pointer_down(icon_id, x, y, target)

    def pointer_move(self, x: float, y: float) -> Optional[AppIcon]:
        with self._lock:
            return self.controller.pointer_move(x, y)

    def pointer_up(self) -> Optional[Layout]:
        with self._lock:
            return self.controller.pointer_up()

    def cancel_gesture(self) -> None:
        with self._lock:
            self.controller.cancel()

    def open(self, icon_id: str) -> Optional[str]:
        with self._lock:
            return self.controller.activate(icon_id)

    def close(self) -> None:
        self.controller.close()
