from __future__ import annotations

import random

import pytest

from src.school_records.school_records.core.exceptions import PersistenceError
from src.school_records.school_records.storage.memory_storage import MemoryStorage
from src.school_records.school_records.store.id_generators import SequenceIdGenerator, TokenIdGenerator


def test_sequence_counter_is_persisted_in_storage():
    storage = MemoryStorage()
    gen = SequenceIdGenerator(storage)

    assert gen.next_id("students", set()) == "1"
    assert gen.next_id("students", {"1"}) == "2"

    # A new generator over the same storage continues where the old one stopped.
    assert SequenceIdGenerator(storage).next_id("students", set()) == "3"
    assert storage.read("_seq_students") == [{"id": "students", "value": 3}]


def test_sequence_never_moves_backwards_after_deletes():
    storage = MemoryStorage()
    gen = SequenceIdGenerator(storage)
    for _ in range(5):
        gen.next_id("bills", set())

    assert gen.next_id("bills", set()) == "6"
    assert storage.read("_seq_bills") == [{"id": "bills", "value": 6}]


def test_sequence_starts_above_existing_numeric_ids():
    gen = SequenceIdGenerator(MemoryStorage())

    assert gen.next_id("legacy", {"7", "student_1", "3"}) == "8"


def test_token_generator_retries_on_collision():
    class FixedRng(random.Random):
        def __init__(self):
            super().__init__(0)
            self._calls = 0

        def choice(self, seq):
            self._calls += 1
            # First token: all "a"; afterwards real randomness.
            return "a" if self._calls <= 9 else super().choice(seq)

    gen = TokenIdGenerator(rng=FixedRng(), clock=lambda: 1.0)

    token = gen.next_id("news", {"1000_aaaaaaaaa"})

    assert token.startswith("1000_")
    assert token != "1000_aaaaaaaaa"


def test_each_collection_has_its_own_counter():
    storage = MemoryStorage()
    gen = SequenceIdGenerator(storage)

    gen.next_id("students", set())
    gen.next_id("students", set())
    gen.next_id("bills", set())

    assert storage.read("_seq_students") == [{"id": "students", "value": 2}]
    assert storage.read("_seq_bills") == [{"id": "bills", "value": 1}]


@pytest.mark.parametrize(
    "rows",
    [
        ["not a row"],
        [{"id": "students", "value": "7"}],
        [{"id": "students", "value": True}],
        [{"id": "students", "value": -1}],
        [{"id": "bills", "value": 3}],
        [{"id": "students", "value": 1}, {"id": "students", "value": 2}],
    ],
)
def test_malformed_counter_raises_persistence_error(rows):
    gen = SequenceIdGenerator(MemoryStorage({"_seq_students": rows}))

    with pytest.raises(PersistenceError) as exc:
        gen.next_id("students", set())

    assert exc.value.collection == "_seq_students"
    assert gen.next_id("bills", set()) == "1"
