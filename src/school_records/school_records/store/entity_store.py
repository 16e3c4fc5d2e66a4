"""Generic collection-oriented CRUD and query surface.

Every domain service talks to storage through an ``EntityStore``.  Records
are plain ``dict`` objects with a mandatory string ``id``; everything else
about their shape belongs to the caller.

Each collection has its own re-entrant lock and every public operation runs
under it, together with the storage backend's lock for that collection, so a
read-modify-write cycle is never interleaved with another one, even from a
second store or process on the same medium.  Callers that derive values
from ``count`` before a ``create`` (human readable sequence numbers) wrap
both calls in ``store.locked(name)``.

Query operations scan the live collection on every call; there is no cache
or secondary index to go stale.
"""

from __future__ import annotations

import copy
import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Iterable, Iterator, Mapping, Optional, Sequence

from ..common.datetime_utils import isoformat_utc
from ..core.exceptions import ConflictError, NotFoundError, PersistenceError, ValidationError
from ..storage.backend import StorageBackend
from .id_generators import IdGenerator, SequenceIdGenerator

logger = logging.getLogger(__name__)

Record = dict[str, Any]
Predicate = Callable[[Record], bool]


class EntityStore:
    def __init__(
        self,
        storage: StorageBackend,
        *,
        id_generator: Optional[IdGenerator] = None,
        timestamps: bool = True,
        clock: Callable[[], str] = isoformat_utc,
    ):
        self._storage = storage
        self._ids = id_generator or SequenceIdGenerator(storage)
        self._timestamps = bool(timestamps)
        self._clock = clock
        self._locks: dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()
        # Hold depth per collection; only touched by the thread owning that lock.
        self._depth: dict[str, int] = {}

    @property
    def storage(self) -> StorageBackend:
        return self._storage

    # -- locking -----------------------------------------------------------

    def _lock_for(self, collection: str) -> threading.RLock:
        with self._locks_guard:
            lock = self._locks.get(collection)
            if lock is None:
                lock = threading.RLock()
                self._locks[collection] = lock
            return lock

    @contextmanager
    def locked(self, collection: str) -> Iterator[None]:
        """Hold the collection lock across several store calls.

        The outermost hold also takes the backend lock, which excludes other
        stores (other threads or processes) working on the same medium.
        Nested holds in the same thread only re-enter the local lock.
        """
        name = self._check_name(collection)
        with self._lock_for(name):
            depth = self._depth.get(name, 0)
            self._depth[name] = depth + 1
            try:
                if depth:
                    yield
                else:
                    with self._storage.lock(name):
                        yield
            finally:
                self._depth[name] = depth

    # -- internals ---------------------------------------------------------

    @staticmethod
    def _check_name(collection: str) -> str:
        if not isinstance(collection, str) or not collection.strip():
            raise ValidationError("Collection name is required")
        return collection

    def _load(self, collection: str) -> list[Record]:
        records = self._storage.read(collection)
        if records is None:
            return []
        for item in records:
            if not isinstance(item, dict) or not isinstance(item.get("id"), str):
                raise PersistenceError(f"Corrupt record in {collection}", collection=collection)
        return records

    def _save(self, collection: str, records: list[Record]) -> None:
        try:
            self._storage.write(collection, records)
        except PersistenceError:
            logger.error("Error saving %s", collection)
            raise

    @staticmethod
    def _index_of(records: Sequence[Record], record_id: str) -> int:
        for i, item in enumerate(records):
            if item["id"] == record_id:
                return i
        return -1

    def _assign_id(self, collection: str, data: Mapping[str, Any], existing_ids: set[str]) -> str:
        given = data.get("id")
        if given is not None and str(given) != "":
            record_id = str(given)
            if record_id in existing_ids:
                raise ConflictError(f"{collection} with ID {record_id} already exists")
            return record_id
        return self._ids.next_id(collection, existing_ids)

    # -- reads -------------------------------------------------------------

    def get_all(self, collection: str) -> list[Record]:
        with self.locked(collection):
            return self._load(collection)

    def get_by_id(self, collection: str, record_id: str) -> Record:
        with self.locked(collection):
            records = self._load(collection)
            i = self._index_of(records, str(record_id))
            if i == -1:
                logger.debug("%s with ID %s not found", collection, record_id)
                raise NotFoundError(collection, str(record_id))
            return records[i]

    def query(self, collection: str, predicate: Predicate) -> list[Record]:
        with self.locked(collection):
            return [r for r in self._load(collection) if predicate(r)]

    def find_one(self, collection: str, predicate: Predicate) -> Optional[Record]:
        with self.locked(collection):
            for r in self._load(collection):
                if predicate(r):
                    return r
            return None

    def count(self, collection: str, predicate: Optional[Predicate] = None) -> int:
        with self.locked(collection):
            records = self._load(collection)
            if predicate is None:
                return len(records)
            return sum(1 for r in records if predicate(r))

    def has_data(self, collection: str) -> bool:
        return self.count(collection) > 0

    # -- writes ------------------------------------------------------------

    def create(self, collection: str, data: Mapping[str, Any]) -> Record:
        with self.locked(collection):
            records = self._load(collection)
            existing_ids = {r["id"] for r in records}

            record: Record = dict(data)
            record["id"] = self._assign_id(collection, data, existing_ids)
            if self._timestamps:
                stamp = self._clock()
                record["createdAt"] = stamp
                record["updatedAt"] = stamp

            records.append(record)
            self._save(collection, records)
            logger.debug("Created %s %s", collection, record["id"])
            return copy.deepcopy(record)

    def update(self, collection: str, record_id: str, fields: Mapping[str, Any]) -> Record:
        record_id = str(record_id)
        with self.locked(collection):
            records = self._load(collection)
            i = self._index_of(records, record_id)
            if i == -1:
                logger.warning("Update failed: %s with ID %s not found", collection, record_id)
                raise NotFoundError(collection, record_id)

            merged = {**records[i], **fields, "id": record_id}
            if self._timestamps:
                merged["updatedAt"] = self._clock()
            records[i] = merged

            self._save(collection, records)
            logger.debug("Updated %s %s", collection, record_id)
            return copy.deepcopy(merged)

    def delete(self, collection: str, record_id: str) -> None:
        """Remove one record. A missing id always raises NotFoundError."""
        record_id = str(record_id)
        with self.locked(collection):
            records = self._load(collection)
            remaining = [r for r in records if r["id"] != record_id]
            if len(remaining) == len(records):
                logger.warning("Delete failed: %s with ID %s not found", collection, record_id)
                raise NotFoundError(collection, record_id)
            self._save(collection, remaining)
            logger.debug("Deleted %s %s", collection, record_id)

    def delete_many(self, collection: str, record_ids: Iterable[str]) -> int:
        """Remove every listed id that exists; returns how many were removed."""
        wanted = {str(i) for i in record_ids}
        with self.locked(collection):
            records = self._load(collection)
            remaining = [r for r in records if r["id"] not in wanted]
            removed = len(records) - len(remaining)
            if removed:
                self._save(collection, remaining)
            return removed

    def save_all(self, collection: str, records: Iterable[Mapping[str, Any]]) -> list[Record]:
        """Replace the whole collection. Records without an id get one."""
        with self.locked(collection):
            out: list[Record] = []
            seen: set[str] = set()
            for data in records:
                record = dict(data)
                record["id"] = self._assign_id(collection, data, seen)
                seen.add(record["id"])
                out.append(record)
            self._save(collection, out)
            return copy.deepcopy(out)

    def init_default_data(self, collection: str, records: Iterable[Mapping[str, Any]]) -> bool:
        """Seed a collection only when it is empty. Returns True if seeded."""
        with self.locked(collection):
            if self._load(collection):
                return False
            self.save_all(collection, records)
            return True

    def clear(self, collection: str) -> None:
        with self.locked(collection):
            self._storage.remove(collection)

    def clear_all(self) -> None:
        for name in self._storage.collections():
            with self.locked(name):
                self._storage.remove(name)
