"""Store layer - the transaction store and its persistence backends.

This module re-exports the public store API for easy importing.
"""

from pathlib import Path

from fintrack.store.backend import Persistence
from fintrack.store.jsonfile import JsonFileBackend
from fintrack.store.schema import get_default_data_path, init_database
from fintrack.store.sqlite import SqliteBackend
from fintrack.store.transactions import (
    InvalidAmountError,
    PersistenceError,
    StoreError,
    StoreNotInitializedError,
    TransactionStore,
)


def create_backend(backend: str, data_path: Path) -> Persistence:
    """Create a persistence backend by name.

    Args:
        backend: "sqlite" or "json".
        data_path: Path to the data file.

    Returns:
        Backend instance.

    Raises:
        ValueError: If the backend name is unknown.
    """
    if backend == "sqlite":
        return SqliteBackend(data_path)
    if backend == "json":
        return JsonFileBackend(data_path)
    raise ValueError(f"Unknown backend: {backend}")


__all__ = [
    # Backends
    "JsonFileBackend",
    "Persistence",
    "SqliteBackend",
    "create_backend",
    "get_default_data_path",
    "init_database",
    # Store
    "InvalidAmountError",
    "PersistenceError",
    "StoreError",
    "StoreNotInitializedError",
    "TransactionStore",
]
