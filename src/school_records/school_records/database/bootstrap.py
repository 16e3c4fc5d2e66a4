from __future__ import annotations

import logging
import re

from ..core.constants import DEFAULT_MYSQL_TABLE
from .mysql_base import db_cursor, fetchall

logger = logging.getLogger(__name__)

_TABLE_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]{0,63}$")

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS {table} (
    name VARCHAR(191) NOT NULL PRIMARY KEY,
    data LONGTEXT NOT NULL,
    updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP
) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4
"""


def validate_table_name(table: str) -> str:
    # Table names are interpolated into SQL, so only plain identifiers pass.
    if not _TABLE_NAME_RE.match(table or ""):
        raise ValueError(f"Invalid table name: {table!r}")
    return table


def apply_schema(conn_factory, *, table: str = DEFAULT_MYSQL_TABLE) -> None:
    """Create the collections table if missing (idempotent)."""
    table = validate_table_name(table)
    with db_cursor(conn_factory) as (_, cur):
        cur.execute(SCHEMA_SQL.format(table=table))
    logger.info("Schema ready (table=%s)", table)


def list_tables(conn_factory) -> list[str]:
    with db_cursor(conn_factory, dictionary=False) as (_, cur):
        cur.execute("SHOW TABLES")
        return [str(r[0]) for r in fetchall(cur)]
