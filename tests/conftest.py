"""Shared fixtures and sample records for the record store test suite."""

from __future__ import annotations

import os
from typing import Generator

import pytest

# Settings must validate even when the host environment sets another database
os.environ["DATABASE_URL"] = "sqlite://"

from record_store.config import get_settings  # noqa: E402
from record_store.store import IN_MEMORY, RecordStore  # noqa: E402

from tests.records import IndexedStruct, KeyValue, TestStruct  # noqa: E402


@pytest.fixture(autouse=True)
def _fresh_settings() -> Generator[None, None, None]:
    """Drop cached settings around every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def store() -> Generator[RecordStore, None, None]:
    """In-memory store, closed after the test."""
    record_store = RecordStore.open(IN_MEMORY)
    yield record_store
    record_store.close()


@pytest.fixture
def teststruct_store(store: RecordStore) -> RecordStore:
    """In-memory store with the teststruct table created."""
    store.create_table(TestStruct)
    return store


@pytest.fixture
def keyvalue_store(store: RecordStore) -> RecordStore:
    """In-memory store with the keyvalue table created."""
    store.create_table(KeyValue)
    return store


@pytest.fixture
def indexed_store(store: RecordStore) -> RecordStore:
    """In-memory store with the indexedstruct table and its index created."""
    store.create_table(IndexedStruct)
    return store
