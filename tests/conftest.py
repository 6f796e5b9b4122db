"""Pytest configuration and shared fixtures."""

import pytest

from grocerylist.database import make_engine, make_session_factory
from grocerylist.lists.persistence import (
    ListPersistence,
    MemorySnapshotBackend,
    PersistenceError,
    SnapshotBackend,
    SqlSnapshotBackend,
)
from grocerylist.lists.store import ListStore
from grocerylist.merge.matching import MatchStrictness
from grocerylist.schemas import GroceryCategory, Ingredient

# =============================================================================
# Backends
# =============================================================================


class FailingWriteBackend(MemorySnapshotBackend):
    """Backend whose writes always fail."""

    def write(self, key: str, payload: str) -> None:
        raise PersistenceError("disk full", key=key)


class FailingReadBackend(SnapshotBackend):
    """Backend whose reads always fail."""

    def __init__(self):
        self.writes: dict[str, str] = {}

    def read(self, key: str) -> str | None:
        raise PersistenceError("storage unavailable", key=key)

    def write(self, key: str, payload: str) -> None:
        self.writes[key] = payload


@pytest.fixture
def memory_backend():
    """Empty in-memory snapshot backend."""
    return MemorySnapshotBackend()


@pytest.fixture
def failing_write_backend():
    """Backend that cannot persist anything."""
    return FailingWriteBackend()


@pytest.fixture
def failing_read_backend():
    """Backend whose stored snapshots cannot be read."""
    return FailingReadBackend()


@pytest.fixture
def session_factory(tmp_path):
    """Session factory for a throwaway SQLite database."""
    engine = make_engine(f"sqlite:///{tmp_path / 'lists.db'}")
    yield make_session_factory(engine)
    engine.dispose()


@pytest.fixture
def sql_backend(session_factory):
    """Snapshot backend over the throwaway database."""
    return SqlSnapshotBackend(session_factory)


@pytest.fixture
def persistence(memory_backend):
    """List persistence over the in-memory backend."""
    return ListPersistence(memory_backend)


@pytest.fixture
def store(persistence):
    """Strict-matching list store with a fresh default list."""
    return ListStore(persistence, strictness=MatchStrictness.STRICT)


@pytest.fixture
def permissive_store(persistence):
    """List store using permissive name matching."""
    return ListStore(persistence, strictness=MatchStrictness.PERMISSIVE)


# =============================================================================
# Ingredients
# =============================================================================


@pytest.fixture
def make_ingredient():
    """Factory for parsed ingredient entries."""

    def _make(
        name: str,
        amount: float = 1.0,
        unit: str = "",
        category: GroceryCategory = GroceryCategory.OTHER,
    ) -> Ingredient:
        return Ingredient(name=name, amount=amount, unit=unit, category=category)

    return _make


@pytest.fixture
def recipe_batch(make_ingredient):
    """Ingredients of a typical weeknight pasta recipe."""
    return [
        make_ingredient("spaghetti", 1, "lb", GroceryCategory.PANTRY),
        make_ingredient("garlic", 4, "cloves", GroceryCategory.PRODUCE),
        make_ingredient("olive oil", 3, "tbsp", GroceryCategory.PANTRY),
        make_ingredient("water", 4, "quarts", GroceryCategory.OTHER),
        make_ingredient("salt and pepper", 1, "piece", GroceryCategory.OTHER),
        make_ingredient("parmesan", 2, "oz", GroceryCategory.DAIRY),
    ]
