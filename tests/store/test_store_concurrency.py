from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor

from src.school_records.school_records.container import build_container
from src.school_records.school_records.storage.memory_storage import MemoryStorage
from src.school_records.school_records.store.entity_store import EntityStore


class SlowStorage(MemoryStorage):
    """Widens the read-modify-write window so unsynchronized creates would collide."""

    def read(self, collection):
        data = super().read(collection)
        time.sleep(0.01)
        return data


def _run_together(n, fn):
    barrier = threading.Barrier(n)

    def _task(i):
        barrier.wait()
        return fn(i)

    with ThreadPoolExecutor(max_workers=n) as pool:
        return list(pool.map(_task, range(n)))


def test_two_concurrent_student_creates_get_sequence_one_and_two():
    container = build_container(storage=SlowStorage())

    students = _run_together(2, lambda i: container.student_service.create({"firstName": f"S{i}", "surname": "Owusu"}))

    assert sorted(s["id"] for s in students) == ["1", "2"]
    assert sorted(s["studentId"] for s in students) == ["STU0001", "STU0002"]
    assert container.student_service.count() == 2


def test_concurrent_raw_creates_never_share_an_id():
    store = EntityStore(SlowStorage(), timestamps=False)

    created = _run_together(8, lambda i: store.create("payments", {"amount": i}))

    ids = [r["id"] for r in created]
    assert len(set(ids)) == 8
    assert store.count("payments") == 8


def test_concurrent_creates_in_different_collections_keep_their_sequences():
    store = EntityStore(SlowStorage(), timestamps=False)
    names = ["bills", "payments", "bills", "payments", "bills", "payments"]

    _run_together(len(names), lambda i: store.create(names[i], {}))

    assert sorted(r["id"] for r in store.get_all("bills")) == ["1", "2", "3"]
    assert sorted(r["id"] for r in store.get_all("payments")) == ["1", "2", "3"]


def test_concurrent_bill_creates_get_distinct_bill_numbers():
    container = build_container(storage=SlowStorage())

    bills = _run_together(
        4,
        lambda i: container.billing_service.create_bill({"studentId": str(i), "items": [{"amount": 100}]}),
    )

    assert sorted(b["billNumber"] for b in bills) == ["BILL000001", "BILL000002", "BILL000003", "BILL000004"]


def test_two_stores_sharing_one_backend_do_not_interleave():
    storage = SlowStorage()
    stores = [EntityStore(storage, timestamps=False), EntityStore(storage, timestamps=False)]

    created = _run_together(4, lambda i: stores[i % 2].create("students", {"n": i}))

    assert sorted(r["id"] for r in created) == ["1", "2", "3", "4"]
    assert sorted(r["n"] for r in stores[0].get_all("students")) == [0, 1, 2, 3]


def test_nested_holds_reenter_without_deadlock(store):
    with store.locked("bills"):
        with store.locked("bills"):
            store.create("bills", {})
        assert store.count("bills") == 1
