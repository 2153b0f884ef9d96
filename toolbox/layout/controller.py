# toolbox/layout/controller.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Literal, Optional, Union

from .geometry import GRID_UNIT, MAX_SIZE, MIN_SIZE, Bounds, clamp_size
from .models import AppIcon, Layout

logger = logging.getLogger(__name__)

Target = Literal["body", "handle"]


class UnknownIcon(KeyError):
    pass


class GestureInProgress(RuntimeError):
    pass


# ──────────────────────────────────────────────────────────────────────────────
# States
# ──────────────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class Idle:
    name: str = "idle"


@dataclass(frozen=True)
class Dragging:
    icon_id: str
    offset_x: float  # pointer minus icon top-left at gesture start
    offset_y: float
    name: str = "dragging"


@dataclass(frozen=True)
class Resizing:
    icon_id: str
    start_x: float
    start_y: float
    start_size: int
    name: str = "resizing"


State = Union[Idle, Dragging, Resizing]
IDLE = Idle()


class PointerCapture:
    """
    Move/up handlers attached for the lifetime of one gesture.

    The controller creates one on pointer-down and releases it on every exit
    path (pointer-up, cancel, close). Events reaching a released capture are
    dropped.
    """

    def __init__(self, on_move: Callable[[float, float], Optional[AppIcon]], on_up: Callable[[], Optional[Layout]]):
        self._on_move = on_move
        self._on_up = on_up
        self.attached = True

    def move(self, x: float, y: float) -> Optional[AppIcon]:
        if not self.attached:
            return None
        return self._on_move(x, y)

    def up(self) -> Optional[Layout]:
        if not self.attached:
            return None
        return self._on_up()

    def release(self) -> None:
        self.attached = False


class DragResizeController:
    """
    Pointer-driven move/resize of desktop icons.

    Idle -> Dragging on pointer-down over an icon body, Idle -> Resizing on
    pointer-down over its resize handle; both only while editing. Moves update
    the in-memory layout; pointer-up returns to Idle and hands the layout to
    `on_commit` so the owner can persist it. At most one gesture runs at a time.
    """

    def __init__(
        self,
        layout: Layout,
        bounds: Bounds,
        *,
        min_size: int = MIN_SIZE,
        max_size: int = MAX_SIZE,
        grid_unit: int = GRID_UNIT,
        on_commit: Optional[Callable[[Layout], None]] = None,
    ):
        self.layout = layout
        self.bounds = bounds
        self.min_size = min_size
        self.max_size = max_size
        self.grid_unit = grid_unit
        self.on_commit = on_commit
        self._editing = False
        self._state: State = IDLE
        self._capture: Optional[PointerCapture] = None

    # ---- introspection ----
    @property
    def state(self) -> State:
        return self._state

    @property
    def active(self) -> bool:
        return not isinstance(self._state, Idle)

    @property
    def capture(self) -> Optional[PointerCapture]:
        return self._capture

    @property
    def editing(self) -> bool:
        return self._editing

    def set_editing(self, editing: bool) -> None:
        """Leaving edit mode ends a running gesture as a pointer-up would."""
        editing = bool(editing)
        if not editing and self.active:
            self.pointer_up()
        self._editing = editing

    def find(self, icon_id: str) -> AppIcon:
        for app in self.layout:
            if app.id == icon_id:
                return app
        raise UnknownIcon(icon_id)

    # ---- transitions ----
    def pointer_down(self, icon_id: str, x: float, y: float, target: Target = "body") -> bool:
        """Start a gesture. Returns False when not editing."""
        if not self._editing:
            return False
        if self.active:
            raise GestureInProgress(f"a {self._state.name} gesture is already running")
        app = self.find(icon_id)

        if target == "handle":
            self._state = Resizing(icon_id=app.id, start_x=x, start_y=y, start_size=app.size)
        elif target == "body":
            self._state = Dragging(icon_id=app.id, offset_x=x - app.x, offset_y=y - app.y)
        else:
            raise ValueError(f"unknown pointer target {target!r}")

        self._capture = PointerCapture(self._handle_move, self._handle_up)
        logger.debug("gesture start: %s", self._state)
        return True

    def pointer_move(self, x: float, y: float) -> Optional[AppIcon]:
        """Route a move through the active capture; ignored while idle."""
        if self._capture is None:
            return None
        return self._capture.move(x, y)

    def pointer_up(self) -> Optional[Layout]:
        if self._capture is None:
            return None
        return self._capture.up()

    def cancel(self) -> None:
        """Drop the gesture without committing; geometry reached so far stays in memory."""
        self._release()

    def close(self) -> None:
        self._release()

    def __enter__(self) -> "DragResizeController":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # ---- capture handlers ----
    def _handle_move(self, x: float, y: float) -> Optional[AppIcon]:
        state = self._state
        if isinstance(state, Dragging):
            app = self.find(state.icon_id)
            app.x, app.y = self.bounds.clamp_position(x - state.offset_x, y - state.offset_y, app.size)
            return app
        if isinstance(state, Resizing):
            app = self.find(state.icon_id)
            # uniform scaling: the larger axis delta wins
            delta = max(x - state.start_x, y - state.start_y)
            app.size = clamp_size(state.start_size + delta, self.min_size, self.max_size, self.grid_unit)
            return app
        return None

    def _handle_up(self) -> Optional[Layout]:
        self._release()
        if self.on_commit is not None:
            self.on_commit(self.layout)
        return self.layout

    def _release(self) -> None:
        if self._capture is not None:
            self._capture.release()
            self._capture = None
        self._state = IDLE

    # ---- non-edit interaction ----
    def activate(self, icon_id: str) -> Optional[str]:
        """Navigation target of an icon; None while editing."""
        app = self.find(icon_id)
        if self._editing:
            return None
        return app.path
