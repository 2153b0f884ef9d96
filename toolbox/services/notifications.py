# toolbox/services/notifications.py
from __future__ import annotations

import logging
import threading
import time
import uuid
from collections import deque
from contextlib import contextmanager
from dataclasses import asdict, dataclass
from typing import Any, Callable, Iterator, Literal, Optional

logger = logging.getLogger(__name__)

ToastType = Literal["success", "error", "warning", "info"]
TOAST_TYPES = {"success", "error", "warning", "info"}


@dataclass
class Toast:
    id: str
    message: str
    type: str = "info"
    duration_ms: int = 5000  # 0 = sticky
    created: float = 0.0

    def expired(self, now: float) -> bool:
        return self.duration_ms > 0 and now >= self.created + self.duration_ms / 1000.0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class RequestCounter:
    """Counts outgoing API requests made on behalf of the UI."""

    def __init__(self):
        self._lock = threading.Lock()
        self._count = 0

    @property
    def count(self) -> int:
        with self._lock:
            return self._count

    def increment(self) -> int:
        with self._lock:
            self._count += 1
            logger.debug("Request count incremented: %d", self._count)
            return self._count

    def reset(self) -> None:
        with self._lock:
            self._count = 0

    @contextmanager
    def measure(self, action: str) -> Iterator[dict[str, Any]]:
        """Log how many requests an action made and how long it took."""
        stats: dict[str, Any] = {"action": action, "requests": 0, "elapsed_ms": 0}
        start_count = self.count
        start = time.monotonic()
        ok = False
        try:
            yield stats
            ok = True
        finally:
            stats["requests"] = self.count - start_count
            stats["elapsed_ms"] = int((time.monotonic() - start) * 1000)
            logger.info(
                "Action %r %s - %d requests in %dms",
                action,
                "completed" if ok else "failed",
                stats["requests"],
                stats["elapsed_ms"],
            )


class NotificationChannel:
    """
    Toasts published by services and routers, consumed by whoever subscribed.

    Owned by one provider (see deps.get_notifications) and handed to callers
    explicitly; keeps a bounded history so polling clients can catch up.
    """

    def __init__(self, history: int = 50, clock: Callable[[], float] = time.time):
        self._lock = threading.Lock()
        self._toasts: deque[Toast] = deque(maxlen=max(1, history))
        self._subscribers: list[Callable[[Toast], None]] = []
        self._clock = clock
        self.requests = RequestCounter()

    def subscribe(self, callback: Callable[[Toast], None]) -> Callable[[], None]:
        with self._lock:
            self._subscribers.append(callback)

        def _unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return _unsubscribe

    def show(self, message: str, type: str = "info", duration_ms: int = 5000) -> Toast:
        if type not in TOAST_TYPES:
            raise ValueError(f"unknown toast type {type!r}")
        toast = Toast(
            id=f"toast-{uuid.uuid4().hex[:12]}",
            message=message,
            type=type,
            duration_ms=max(0, int(duration_ms)),
            created=self._clock(),
        )
        with self._lock:
            self._toasts.append(toast)
            subscribers = list(self._subscribers)
        logger.info("[toast] %s: %s", type.upper(), message)
        for cb in subscribers:
            try:
                cb(toast)
            except Exception:
                logger.exception("Toast subscriber failed")
        return toast

    def dismiss(self, toast_id: str) -> bool:
        with self._lock:
            for t in self._toasts:
                if t.id == toast_id:
                    self._toasts.remove(t)
                    return True
        return False

    def active(self, now: Optional[float] = None) -> list[Toast]:
        now = self._clock() if now is None else now
        with self._lock:
            for t in [t for t in self._toasts if t.expired(now)]:
                self._toasts.remove(t)
            return list(self._toasts)
