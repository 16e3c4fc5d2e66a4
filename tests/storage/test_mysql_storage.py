from __future__ import annotations

import mysql.connector
import pytest

from src.school_records.school_records.core.exceptions import NotFoundError, PersistenceError
from src.school_records.school_records.storage.mysql_storage import MySQLStorage
from src.school_records.school_records.students.service import StudentService
from src.school_records.school_records.store.entity_store import EntityStore


class FakeCursor:
    def __init__(self, db):
        self._db = db
        self._rows = []

    def execute(self, sql, params=()):
        if self._db.fail:
            raise mysql.connector.Error("connection lost")
        sql = " ".join(sql.split())
        if sql.startswith("SELECT data"):
            name = params[0]
            self._rows = [{"data": self._db.tables[name]}] if name in self._db.tables else []
        elif sql.startswith("INSERT INTO"):
            self._db.pending[params[0]] = params[1]
        elif sql.startswith("DELETE FROM"):
            self._db.pending[params[0]] = None
        elif sql.startswith("SELECT GET_LOCK"):
            granted = params[0] not in self._db.held_locks and not self._db.lock_busy
            if granted:
                self._db.held_locks.add(params[0])
                self._db.lock_log.append(("get", params[0]))
            self._rows = [{"acquired": 1 if granted else 0}]
        elif sql.startswith("SELECT RELEASE_LOCK"):
            self._db.held_locks.discard(params[0])
            self._db.lock_log.append(("release", params[0]))
            self._rows = [{"released": 1}]
        elif sql.startswith("SELECT name"):
            self._rows = [{"name": n} for n in sorted(self._db.tables)]
        else:
            raise AssertionError(f"unexpected SQL: {sql}")

    def fetchone(self):
        return self._rows[0] if self._rows else None

    def fetchall(self):
        return list(self._rows)

    def close(self):
        pass


class FakeConnection:
    def __init__(self, db):
        self._db = db

    def cursor(self, dictionary=True):
        return FakeCursor(self._db)

    def commit(self):
        for name, data in self._db.pending.items():
            if data is None:
                self._db.tables.pop(name, None)
            else:
                self._db.tables[name] = data
        self._db.pending.clear()
        self._db.commits += 1

    def rollback(self):
        self._db.pending.clear()

    def close(self):
        pass


class FakeConnFactory:
    """Stands in for DatabaseConnection: one dict acts as the collections table."""

    def __init__(self):
        self.tables: dict[str, str] = {}
        self.pending: dict[str, str | None] = {}
        self.commits = 0
        self.fail = False
        self.held_locks: set[str] = set()
        self.lock_log: list[tuple[str, str]] = []
        self.lock_busy = False

    def connect(self):
        return FakeConnection(self)


def test_store_round_trip_through_mysql_rows():
    db = FakeConnFactory()
    store = EntityStore(MySQLStorage(db), timestamps=False)

    created = store.create("bills", {"studentId": "1", "total": 500.5, "items": [{"amount": 500.5}]})
    store.update("bills", created["id"], {"status": "partial"})

    assert store.get_by_id("bills", created["id"])["status"] == "partial"
    assert "bills" in db.tables
    assert db.commits > 0


def test_missing_row_reads_as_unknown_collection():
    assert MySQLStorage(FakeConnFactory()).read("students") is None


def test_corrupt_row_raises_persistence_error():
    db = FakeConnFactory()
    db.tables["students"] = "{broken"

    with pytest.raises(PersistenceError) as exc:
        MySQLStorage(db).read("students")

    assert exc.value.collection == "students"


def test_driver_errors_become_persistence_errors():
    db = FakeConnFactory()
    storage = MySQLStorage(db)
    db.fail = True

    with pytest.raises(PersistenceError):
        storage.write("students", [{"id": "1"}])
    with pytest.raises(PersistenceError):
        storage.read("students")


def test_remove_and_collections():
    db = FakeConnFactory()
    storage = MySQLStorage(db)
    storage.write("a", [])
    storage.write("b", [{"id": "1"}])

    storage.remove("a")

    assert storage.collections() == ["b"]


def test_table_name_must_be_identifier():
    with pytest.raises(ValueError):
        MySQLStorage(FakeConnFactory(), table="x; DROP TABLE y")


def test_store_writes_run_under_a_named_lock():
    db = FakeConnFactory()
    store = EntityStore(MySQLStorage(db), timestamps=False)

    store.create("students", {"firstName": "Ama"})

    assert db.lock_log == [("get", "entity_collections.students"), ("release", "entity_collections.students")]
    assert db.held_locks == set()


def test_service_count_and_create_share_one_lock():
    db = FakeConnFactory()
    students = StudentService(EntityStore(MySQLStorage(db)))

    created = students.create({"firstName": "Ama", "surname": "Owusu"})

    assert created["studentId"] == "STU0001"
    assert [op for op, _ in db.lock_log] == ["get", "release"]


def test_lock_released_when_the_operation_fails():
    db = FakeConnFactory()
    store = EntityStore(MySQLStorage(db))

    with pytest.raises(NotFoundError):
        store.update("students", "missing", {"a": 1})

    assert db.held_locks == set()
    assert db.lock_log[-1] == ("release", "entity_collections.students")


def test_lock_timeout_raises_persistence_error():
    db = FakeConnFactory()
    db.lock_busy = True
    store = EntityStore(MySQLStorage(db, lock_timeout=1))

    with pytest.raises(PersistenceError, match="Timed out") as exc:
        store.create("bills", {"total": 10})

    assert exc.value.collection == "bills"
    assert "bills" not in db.tables


def test_long_collection_names_get_short_lock_names():
    storage = MySQLStorage(FakeConnFactory())

    assert storage.lock_name("students") == "entity_collections.students"
    assert len(storage.lock_name("x" * 80)) <= 64
