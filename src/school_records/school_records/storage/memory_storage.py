from __future__ import annotations

import copy
import threading
from contextlib import contextmanager
from typing import Any, Iterator, Optional, Sequence

from .backend import StorageBackend


class MemoryStorage(StorageBackend):
    """Process-local storage; lost on exit. Used by tests and the memory backend."""

    def __init__(self, initial: Optional[dict[str, list[dict[str, Any]]]] = None):
        self._data: dict[str, list[dict[str, Any]]] = copy.deepcopy(initial or {})
        self._locks: dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    def read(self, collection: str) -> Optional[list[dict[str, Any]]]:
        records = self._data.get(collection)
        return copy.deepcopy(records) if records is not None else None

    def write(self, collection: str, records: Sequence[dict[str, Any]]) -> None:
        self._data[collection] = copy.deepcopy(list(records))

    def remove(self, collection: str) -> None:
        self._data.pop(collection, None)

    def collections(self) -> list[str]:
        return sorted(self._data)

    @contextmanager
    def lock(self, collection: str) -> Iterator[None]:
        with self._locks_guard:
            lock = self._locks.setdefault(collection, threading.RLock())
        with lock:
            yield
