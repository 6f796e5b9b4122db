"""Snapshot persistence for grocery lists."""

from abc import ABC, abstractmethod

from pydantic import TypeAdapter, ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from grocerylist.logging_config import get_logger
from grocerylist.models import Snapshot
from grocerylist.schemas import GroceryList

logger = get_logger(__name__)

LISTS_KEY = "groceryLists"
CURRENT_LIST_KEY = "currentList"

_lists_adapter = TypeAdapter(list[GroceryList])
_list_adapter = TypeAdapter(GroceryList)


class PersistenceError(Exception):
    """Raised when a snapshot cannot be read or written."""

    def __init__(self, message: str, key: str | None = None):
        super().__init__(message)
        self.key = key


class SnapshotDecodeError(PersistenceError):
    """Raised when a stored snapshot cannot be decoded."""


class SnapshotBackend(ABC):
    """Key/value blob store holding serialized snapshots."""

    @abstractmethod
    def read(self, key: str) -> str | None:
        """Return the payload stored under key, or None if absent."""
        pass

    @abstractmethod
    def write(self, key: str, payload: str) -> None:
        """Store payload under key, replacing any previous value."""
        pass


class MemorySnapshotBackend(SnapshotBackend):
    """Dict-backed backend for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> str | None:
        return self.data.get(key)

    def write(self, key: str, payload: str) -> None:
        self.data[key] = payload


class SqlSnapshotBackend(SnapshotBackend):
    """Backend storing snapshots in the `snapshots` table."""

    def __init__(self, session_factory: sessionmaker[Session]):
        self.session_factory = session_factory

    def read(self, key: str) -> str | None:
        try:
            with self.session_factory() as session:
                row = session.scalar(select(Snapshot).where(Snapshot.key == key))
                return row.payload if row else None
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to read snapshot {key!r}: {e}", key=key) from e

    def write(self, key: str, payload: str) -> None:
        try:
            with self.session_factory() as session, session.begin():
                row = session.get(Snapshot, key)
                if row is None:
                    session.add(Snapshot(key=key, payload=payload))
                else:
                    row.payload = payload
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to write snapshot {key!r}: {e}", key=key) from e


class ListPersistence:
    """
    Loads and saves the two list snapshots.

    - "all lists" (`groceryLists`): every list, in order.
    - "current list" (`currentList`): the list the user is working on.

    Snapshots use camelCase field names (id, name, ingredients with
    id/name/amount/unit/category/isChecked/isRemoved).
    """

    def __init__(self, backend: SnapshotBackend):
        self.backend = backend

    def load_lists(self) -> list[GroceryList] | None:
        """Load all lists; None when nothing has been saved yet."""
        payload = self.backend.read(LISTS_KEY)
        if payload is None:
            return None
        try:
            return _lists_adapter.validate_json(payload)
        except ValidationError as e:
            raise SnapshotDecodeError(f"Corrupt {LISTS_KEY} snapshot: {e}", key=LISTS_KEY) from e

    def load_current(self) -> GroceryList | None:
        """Load the current list snapshot; None when nothing has been saved yet."""
        payload = self.backend.read(CURRENT_LIST_KEY)
        if payload is None:
            return None
        try:
            return _list_adapter.validate_json(payload)
        except ValidationError as e:
            raise SnapshotDecodeError(
                f"Corrupt {CURRENT_LIST_KEY} snapshot: {e}", key=CURRENT_LIST_KEY
            ) from e

    def save(self, lists: list[GroceryList], current: GroceryList | None) -> None:
        """Write both snapshots. The current list snapshot is skipped when there is none."""
        try:
            lists_payload = _lists_adapter.dump_json(lists, by_alias=True).decode()
            current_payload = (
                _list_adapter.dump_json(current, by_alias=True).decode() if current else None
            )
        except (ValueError, TypeError) as e:
            raise PersistenceError(f"Failed to encode snapshots: {e}") from e

        self.backend.write(LISTS_KEY, lists_payload)
        if current_payload is not None:
            self.backend.write(CURRENT_LIST_KEY, current_payload)

        logger.debug(
            f"Saved {len(lists)} lists; current: {current.name if current else None}"
        )
