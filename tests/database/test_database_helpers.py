from __future__ import annotations

import mysql.connector
import pytest

from src.school_records.school_records.core.exceptions import PersistenceError
from src.school_records.school_records.database.bootstrap import apply_schema, validate_table_name
from src.school_records.school_records.database.connection import DBConfig, DatabaseConnection
from src.school_records.school_records.database.mysql_base import db_cursor


class RecordingConnection:
    def __init__(self, fail_on_execute=False):
        self.fail_on_execute = fail_on_execute
        self.statements = []
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=True):
        conn = self

        class _Cursor:
            def execute(self, sql, params=()):
                if conn.fail_on_execute:
                    raise mysql.connector.Error("table is read only")
                conn.statements.append(sql)

            def close(self):
                pass

        return _Cursor()

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class Factory:
    def __init__(self, conn):
        self.conn = conn

    def connect(self):
        return self.conn


def test_db_cursor_commits_and_closes():
    conn = RecordingConnection()

    with db_cursor(Factory(conn)) as (_, cur):
        cur.execute("SELECT 1")

    assert conn.committed and conn.closed and not conn.rolled_back


def test_db_cursor_wraps_driver_errors():
    conn = RecordingConnection(fail_on_execute=True)

    with pytest.raises(PersistenceError) as exc:
        with db_cursor(Factory(conn), collection="bills") as (_, cur):
            cur.execute("UPDATE x")

    assert exc.value.collection == "bills"
    assert conn.rolled_back and conn.closed and not conn.committed


def test_db_cursor_rolls_back_on_other_errors():
    conn = RecordingConnection()

    with pytest.raises(KeyError):
        with db_cursor(Factory(conn)):
            raise KeyError("boom")

    assert conn.rolled_back and conn.closed


def test_apply_schema_creates_named_table():
    conn = RecordingConnection()

    apply_schema(Factory(conn), table="school_collections")

    assert "CREATE TABLE IF NOT EXISTS school_collections" in conn.statements[0]


@pytest.mark.parametrize("name", ["", "1table", "a-b", "x; DROP TABLE y"])
def test_invalid_table_names(name):
    with pytest.raises(ValueError):
        validate_table_name(name)


def test_db_config_from_dict_defaults_and_describe():
    cfg = DBConfig.from_dict({"host": "db", "port": "3307", "password": None})

    assert cfg == DBConfig(host="db", port=3307, user="root", password="", database="school_records")
    assert cfg.describe() == "root@db:3307/school_records"


def test_connection_factory_follows_config_changes():
    DatabaseConnection.reset()
    try:
        first = DatabaseConnection.get_instance(DBConfig(database="a"))
        same = DatabaseConnection.get_instance(DBConfig(database="a"))
        other = DatabaseConnection.get_instance(DBConfig(database="b"))

        assert first is same
        assert other is not first
        assert other.config.database == "b"
    finally:
        DatabaseConnection.reset()
