"""Shared fixtures for store tests."""

from datetime import datetime, timezone

import pytest

from fintrack.store.transactions import TransactionStore
from tests.helpers.backends import MemoryBackend, SteppingClock


@pytest.fixture
def backend() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture
def clock() -> SteppingClock:
    return SteppingClock(datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def store(backend: MemoryBackend, clock: SteppingClock) -> TransactionStore:
    txn_store = TransactionStore(backend, clock=clock)
    txn_store.initialize()
    return txn_store


@pytest.fixture
def sample_input() -> dict[str, str]:
    return {"description": "  Groceries  ", "amount": "-42.10", "category": "Food", "date": "2025-06-14"}
