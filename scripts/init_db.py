from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.school_records.school_records.database.bootstrap import apply_schema, list_tables
from src.school_records.school_records.database.connection import DBConfig, DatabaseConnection


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    table = getattr(settings, "MYSQL_TABLE", "entity_collections")

    conn = DatabaseConnection.get_instance(DBConfig.from_dict(settings.DB_CONFIG))
    apply_schema(conn, table=table)
    tables = list_tables(conn)
    print(f"OK: Table {table} ready -> {conn.config.describe()} (tables={len(tables)})")


if __name__ == "__main__":
    main()
