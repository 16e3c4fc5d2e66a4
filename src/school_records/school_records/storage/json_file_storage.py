"""One JSON file per collection.

Files are named ``<prefix><collection>.json`` (the prefix mirrors the
``sms_`` namespace the browser build used for its local-storage keys).
Writes go to a temporary file in the same directory which then replaces the
target, so a crash mid-write leaves the previous version intact.  Because
every collection lives in its own file, a corrupt file only breaks
operations on that collection.

Cross-process exclusion uses an advisory ``flock`` on a hidden
``.<prefix><collection>.lock`` file beside the data (POSIX hosts).
"""

from __future__ import annotations

import fcntl
import json
import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional, Sequence

from ..core.constants import DEFAULT_STORAGE_PREFIX
from ..core.exceptions import PersistenceError
from .backend import StorageBackend

logger = logging.getLogger(__name__)


class JsonFileStorage(StorageBackend):
    def __init__(self, directory: str | os.PathLike, *, prefix: str = DEFAULT_STORAGE_PREFIX):
        self._dir = Path(directory)
        self._prefix = prefix
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError(f"Cannot create data directory {self._dir}: {e}") from e

    @property
    def directory(self) -> Path:
        return self._dir

    def _path(self, collection: str) -> Path:
        if not collection or "/" in collection or "\\" in collection or collection.startswith("."):
            raise PersistenceError(f"Invalid collection name: {collection!r}", collection=collection)
        return self._dir / f"{self._prefix}{collection}.json"

    def read(self, collection: str) -> Optional[list[dict[str, Any]]]:
        path = self._path(collection)
        if not path.exists():
            return None
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except ValueError as e:
            # JSONDecodeError and UnicodeDecodeError both land here.
            logger.error("Corrupt data file for %s: %s", collection, e)
            raise PersistenceError(f"Corrupt data for {collection}: {e}", collection=collection) from e
        except OSError as e:
            raise PersistenceError(f"Cannot read {collection}: {e}", collection=collection) from e

        if not isinstance(data, list):
            raise PersistenceError(f"Corrupt data for {collection}: expected a list", collection=collection)
        return data

    def write(self, collection: str, records: Sequence[dict[str, Any]]) -> None:
        path = self._path(collection)
        try:
            payload = json.dumps(list(records), ensure_ascii=False, allow_nan=False)
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"{collection} records are not JSON-serializable: {e}", collection=collection) from e

        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=self._dir)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except OSError as e:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise PersistenceError(f"Cannot write {collection}: {e}", collection=collection) from e

    def remove(self, collection: str) -> None:
        try:
            self._path(collection).unlink(missing_ok=True)
        except OSError as e:
            raise PersistenceError(f"Cannot remove {collection}: {e}", collection=collection) from e

    def collections(self) -> list[str]:
        names = []
        for p in self._dir.glob(f"{self._prefix}*.json"):
            names.append(p.name[len(self._prefix):-len(".json")])
        return sorted(names)

    @contextmanager
    def lock(self, collection: str) -> Iterator[None]:
        lock_path = self._dir / f".{self._path(collection).stem}.lock"
        try:
            fd = os.open(lock_path, os.O_RDWR | os.O_CREAT, 0o644)
        except OSError as e:
            raise PersistenceError(f"Cannot open lock file for {collection}: {e}", collection=collection) from e

        try:
            try:
                fcntl.flock(fd, fcntl.LOCK_EX)
            except OSError as e:
                raise PersistenceError(f"Cannot lock {collection}: {e}", collection=collection) from e
            try:
                yield
            finally:
                fcntl.flock(fd, fcntl.LOCK_UN)
        finally:
            os.close(fd)
