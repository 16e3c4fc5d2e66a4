from __future__ import annotations

import itertools

import pytest

from src.school_records.school_records.container import Container, build_container
from src.school_records.school_records.storage.memory_storage import MemoryStorage
from src.school_records.school_records.store.entity_store import EntityStore


@pytest.fixture
def fixed_clock():
    """Deterministic ISO timestamps: T00:00:01Z, T00:00:02Z, ..."""
    counter = itertools.count(1)
    return lambda: f"2025-01-01T00:00:{next(counter):02d}Z"


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def store(storage: MemoryStorage, fixed_clock) -> EntityStore:
    return EntityStore(storage, clock=fixed_clock)


@pytest.fixture
def bare_store(storage: MemoryStorage) -> EntityStore:
    """Store without createdAt/updatedAt stamping, for exact record comparisons."""
    return EntityStore(storage, timestamps=False)


@pytest.fixture
def container(storage: MemoryStorage) -> Container:
    return build_container(storage=storage)
