from __future__ import annotations

import random
import string
import threading
import time
from typing import Iterable, Protocol

from ..core.constants import SEQUENCE_PREFIX
from ..core.exceptions import PersistenceError
from ..storage.backend import StorageBackend

_BASE36 = string.digits + string.ascii_lowercase


class IdGenerator(Protocol):
    def next_id(self, collection: str, existing_ids: set[str]) -> str:
        """Return an id not present in existing_ids.

        Called with the collection lock held.
        """

        raise NotImplementedError


class SequenceIdGenerator(IdGenerator):
    """Per-collection counter ("1", "2", ...) persisted beside the data.

    Each collection keeps its counter in its own reserved collection
    (``_seq_<name>``), so a damaged counter only blocks creates in the
    collection it belongs to.  The counter never moves backwards, so ids of
    deleted records are not handed out again. It also starts above any
    numeric id already stored, which covers data written before the counter
    existed.
    """

    def __init__(self, storage: StorageBackend, *, prefix: str = SEQUENCE_PREFIX):
        self._storage = storage
        self._prefix = prefix
        self._lock = threading.Lock()

    def counter_name(self, collection: str) -> str:
        return f"{self._prefix}{collection}"

    def _stored_value(self, collection: str) -> int:
        name = self.counter_name(collection)
        rows = self._storage.read(name)
        if not rows:
            return 0
        row = rows[0]
        if (
            len(rows) != 1
            or not isinstance(row, dict)
            or row.get("id") != collection
            or isinstance(row.get("value"), bool)
            or not isinstance(row.get("value"), int)
            or row["value"] < 0
        ):
            raise PersistenceError(f"Corrupt sequence counter for {collection}", collection=name)
        return row["value"]

    @staticmethod
    def _max_numeric(ids: Iterable[str]) -> int:
        best = 0
        for value in ids:
            if value.isdigit():
                best = max(best, int(value))
        return best

    def next_id(self, collection: str, existing_ids: set[str]) -> str:
        with self._lock:
            value = max(self._stored_value(collection), self._max_numeric(existing_ids)) + 1
            self._storage.write(self.counter_name(collection), [{"id": collection, "value": value}])
            return str(value)


class TokenIdGenerator(IdGenerator):
    """Time-based token: "<epoch millis>_<9 random base36 chars>"."""

    def __init__(self, *, rng: random.Random | None = None, clock=time.time):
        self._rng = rng or random.SystemRandom()
        self._clock = clock

    def _token(self) -> str:
        suffix = "".join(self._rng.choice(_BASE36) for _ in range(9))
        return f"{int(self._clock() * 1000)}_{suffix}"

    def next_id(self, collection: str, existing_ids: set[str]) -> str:
        candidate = self._token()
        while candidate in existing_ids:
            candidate = self._token()
        return candidate
