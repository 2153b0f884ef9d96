# toolbox/layout/geometry.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from .defaults import DEFAULT_APPS
from .models import AppIcon, Layout

GRID_UNIT = 20
ITEM_SIZE = 100
SPACING = 120
MIN_SIZE = 60
MAX_SIZE = 150
HEADER_BAND = 80
BOTTOM_MARGIN = 20

# Top-left of the first icon, before grid alignment.
_ORIGIN_X = 50
_ORIGIN_Y = 100


def snap_to_grid(value: float, grid_unit: int = GRID_UNIT) -> int:
    """Nearest multiple of grid_unit; halves round up like the browser's Math.round."""
    return int(math.floor(value / grid_unit + 0.5)) * grid_unit


def clamp(value: float, low: float, high: float) -> float:
    if high < low:
        high = low
    return max(low, min(high, value))


def clamp_size(
    size: float,
    min_size: int = MIN_SIZE,
    max_size: int = MAX_SIZE,
    grid_unit: int = GRID_UNIT,
) -> int:
    """
    Snap a clamped size. The range is applied again after snapping because
    a bound that is not a grid multiple (150) would otherwise snap past it.
    """
    snapped = snap_to_grid(clamp(size, min_size, max_size), grid_unit)
    return int(clamp(snapped, min_size, max_size))


@dataclass
class Bounds:
    """Container the icons live in, in the same units as the pointer."""

    width: int
    height: int
    header_band: int = HEADER_BAND
    margin: int = BOTTOM_MARGIN
    grid_unit: int = GRID_UNIT

    def x_range(self, size: int) -> tuple[int, int]:
        return 0, max(0, self.width - size)

    def y_range(self, size: int) -> tuple[int, int]:
        return self.header_band, max(self.header_band, self.height - size - self.margin)

    def clamp_position(self, x: float, y: float, size: int) -> tuple[int, int]:
        """Clamp into the box, snap, then keep the snapped value inside the box."""
        x_lo, x_hi = self.x_range(size)
        y_lo, y_hi = self.y_range(size)
        sx = snap_to_grid(clamp(x, x_lo, x_hi), self.grid_unit)
        sy = snap_to_grid(clamp(y, y_lo, y_hi), self.grid_unit)
        return int(clamp(sx, x_lo, x_hi)), int(clamp(sy, y_lo, y_hi))


def grid_columns(viewport_width: float, spacing: int = SPACING) -> int:
    """Number of icon columns that fit; never less than one."""
    if spacing <= 0:
        return 1
    return max(1, int(math.floor(viewport_width / spacing)))


def compute_default_layout(
    viewport_width: float,
    item_size: int = ITEM_SIZE,
    spacing: int = SPACING,
    grid_unit: int = GRID_UNIT,
    apps: Optional[Iterable[dict[str, Any]]] = None,
) -> Layout:
    """Place the canonical apps row-major on a grid sized from the viewport."""
    cols = grid_columns(viewport_width, spacing)
    start_x = (_ORIGIN_X // grid_unit) * grid_unit
    start_y = (_ORIGIN_Y // grid_unit) * grid_unit

    out: Layout = []
    for i, app in enumerate(DEFAULT_APPS if apps is None else apps):
        col = i % cols
        row = i // cols
        out.append(
            AppIcon(
                id=app["id"],
                name=app["name"],
                path=app["path"],
                icon=app["icon"],
                color=app["color"],
                x=start_x + col * spacing,
                y=start_y + row * spacing,
                size=item_size,
            )
        )
    return out
