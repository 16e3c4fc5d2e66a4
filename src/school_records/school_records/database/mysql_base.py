from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Tuple

import mysql.connector

from ..core.exceptions import PersistenceError

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory, *, dictionary: bool = True, collection: Optional[str] = None) -> Iterator[Tuple[Any, Any]]:
    """Yield (conn, cursor); commit on success, roll back on any error.

    Driver errors come out as PersistenceError tagged with `collection`, so
    callers above the storage layer never see mysql.connector types.
    """
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        logger.error("MySQL connection failed: %s", e)
        raise PersistenceError(f"Cannot connect to MySQL: {e}", collection=collection) from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as e:
        conn.rollback()
        logger.error("MySQL error (collection=%s): %s", collection, e)
        raise PersistenceError(f"MySQL error: {e}", collection=collection) from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])
