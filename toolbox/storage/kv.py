# toolbox/storage/kv.py
from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import Iterator, Optional

logger = logging.getLogger(__name__)


class StorageUnavailable(OSError):
    """Raised when the backing file cannot be written (disk full, read-only...)."""


class KeyValueStore:
    """
    Durable string -> string map persisted as a single JSON object on disk.

    Mirrors the browser localStorage contract: values are opaque strings,
    callers own their encoding. Reads fail open (an unreadable file is an
    empty store); writes raise StorageUnavailable.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._lock = threading.RLock()
        self._items: dict[str, str] = {}
        self._load()

    # -------- persistence --------
    def _load(self) -> None:
        if not self.path.exists():
            return
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except Exception as e:
            logger.warning("Ignoring unreadable storage file %s: %s", self.path, e)
            return
        if not isinstance(raw, dict):
            logger.warning("Ignoring storage file %s: not a JSON object", self.path)
            return
        self._items = {str(k): v for k, v in raw.items() if isinstance(v, str)}

    def _flush(self, items: dict[str, str]) -> None:
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(items, indent=2, ensure_ascii=False), encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError as e:
            raise StorageUnavailable(f"cannot write {self.path}: {e}") from e

    # -------- API --------
    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            updated = dict(self._items)
            updated[key] = str(value)
            self._flush(updated)
            self._items = updated

    def remove_item(self, key: str) -> bool:
        with self._lock:
            if key not in self._items:
                return False
            updated = dict(self._items)
            updated.pop(key)
            self._flush(updated)
            self._items = updated
            return True

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._items)

    def items(self) -> Iterator[tuple[str, str]]:
        with self._lock:
            return iter(list(self._items.items()))

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
