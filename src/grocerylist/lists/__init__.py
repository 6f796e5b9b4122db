"""Grocery list ownership and persistence."""

from grocerylist.lists.persistence import (
    ListPersistence,
    MemorySnapshotBackend,
    PersistenceError,
    SnapshotBackend,
    SnapshotDecodeError,
    SqlSnapshotBackend,
)
from grocerylist.lists.store import ListStore

__all__ = [
    "ListPersistence",
    "ListStore",
    "MemorySnapshotBackend",
    "PersistenceError",
    "SnapshotBackend",
    "SnapshotDecodeError",
    "SqlSnapshotBackend",
]
