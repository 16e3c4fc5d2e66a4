"""MySQL-backed storage: one row per collection holding its JSON document.

Each collection is stored and replaced as a unit, which keeps a corrupt
document from affecting any other collection.  Exclusion between processes
uses MySQL named locks (``GET_LOCK``), one per collection, held on their own
connection for the length of a read-modify-write cycle.
"""

from __future__ import annotations

import hashlib
import json
import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional, Sequence

from ..core.constants import DEFAULT_LOCK_TIMEOUT_SECONDS, DEFAULT_MYSQL_TABLE
from ..core.exceptions import PersistenceError
from ..database.bootstrap import validate_table_name
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .backend import StorageBackend

logger = logging.getLogger(__name__)


class MySQLStorage(StorageBackend):
    def __init__(self, conn_factory, *, table: str = DEFAULT_MYSQL_TABLE, lock_timeout: int = DEFAULT_LOCK_TIMEOUT_SECONDS):
        self._conn_factory = conn_factory
        self._table = validate_table_name(table)
        self._lock_timeout = int(lock_timeout)

    def lock_name(self, collection: str) -> str:
        name = f"{self._table}.{collection}"
        # MySQL caps lock names at 64 characters.
        if len(name) > 64:
            name = f"{self._table[:20]}.{hashlib.sha1(collection.encode('utf-8')).hexdigest()}"
        return name

    def read(self, collection: str) -> Optional[list[dict[str, Any]]]:
        with db_cursor(self._conn_factory, collection=collection) as (_, cur):
            cur.execute(f"SELECT data FROM {self._table} WHERE name=%s", (collection,))
            row = fetchone(cur)

        if not row:
            return None
        try:
            data = json.loads(row["data"])
        except (TypeError, ValueError) as e:
            logger.error("Corrupt document for %s: %s", collection, e)
            raise PersistenceError(f"Corrupt data for {collection}: {e}", collection=collection) from e
        if not isinstance(data, list):
            raise PersistenceError(f"Corrupt data for {collection}: expected a list", collection=collection)
        return data

    def write(self, collection: str, records: Sequence[dict[str, Any]]) -> None:
        try:
            payload = json.dumps(list(records), ensure_ascii=False, allow_nan=False)
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"{collection} records are not JSON-serializable: {e}", collection=collection) from e

        with db_cursor(self._conn_factory, collection=collection) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO {self._table}(name, data)
                VALUES(%s,%s)
                ON DUPLICATE KEY UPDATE data=VALUES(data)
                """,
                (collection, payload),
            )

    def remove(self, collection: str) -> None:
        with db_cursor(self._conn_factory, collection=collection) as (_, cur):
            cur.execute(f"DELETE FROM {self._table} WHERE name=%s", (collection,))

    def collections(self) -> list[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT name FROM {self._table} ORDER BY name")
            return [str(r["name"]) for r in fetchall(cur)]

    @contextmanager
    def lock(self, collection: str) -> Iterator[None]:
        name = self.lock_name(collection)
        with db_cursor(self._conn_factory, collection=collection) as (_, cur):
            cur.execute("SELECT GET_LOCK(%s, %s) AS acquired", (name, self._lock_timeout))
            row = fetchone(cur)
            if not row or row["acquired"] != 1:
                raise PersistenceError(
                    f"Timed out after {self._lock_timeout}s waiting for lock on {collection}",
                    collection=collection,
                )
            try:
                yield
            finally:
                cur.execute("SELECT RELEASE_LOCK(%s) AS released", (name,))
                fetchone(cur)
