"""Tests for list snapshot persistence."""

import json

import pytest

from grocerylist.lists.persistence import (
    CURRENT_LIST_KEY,
    LISTS_KEY,
    ListPersistence,
    MemorySnapshotBackend,
    SnapshotDecodeError,
)
from grocerylist.schemas import GroceryCategory, GroceryList, Ingredient


@pytest.fixture
def weekly_list():
    return GroceryList(
        name="Weekly",
        ingredients=[
            Ingredient(name="milk", amount=1, unit="gallon", category=GroceryCategory.DAIRY),
            Ingredient(name="salt", unit="To Taste", category="Pantry", is_checked=True),
        ],
    )


class TestListPersistence:
    """Tests for ListPersistence over the in-memory backend."""

    def test_nothing_saved(self, persistence):
        """Test loading before the first save."""
        assert persistence.load_lists() is None
        assert persistence.load_current() is None

    def test_save_and_load(self, persistence, weekly_list):
        """Test that both snapshots are restored."""
        persistence.save([weekly_list], weekly_list)

        lists = persistence.load_lists()
        current = persistence.load_current()

        assert [gl.id for gl in lists] == [weekly_list.id]
        assert lists[0].ingredients == weekly_list.ingredients
        assert current.id == weekly_list.id

    def test_camel_case_payload(self, memory_backend, persistence, weekly_list):
        """Test the stored field names."""
        persistence.save([weekly_list], weekly_list)

        payload = json.loads(memory_backend.data[LISTS_KEY])
        entry = payload[0]["ingredients"][1]
        assert set(entry) >= {"id", "name", "amount", "unit", "category", "isChecked", "isRemoved"}
        assert entry["isChecked"] is True
        assert entry["category"] == "Pantry"
        assert "createdAt" in payload[0]

    def test_no_current_list(self, memory_backend, persistence, weekly_list):
        """Test that the current list snapshot is skipped when there is none."""
        persistence.save([weekly_list], None)
        assert LISTS_KEY in memory_backend.data
        assert CURRENT_LIST_KEY not in memory_backend.data

    def test_corrupt_lists_snapshot(self):
        """Test that undecodable data raises a decode error."""
        persistence = ListPersistence(MemorySnapshotBackend({LISTS_KEY: "{not json"}))
        with pytest.raises(SnapshotDecodeError) as exc_info:
            persistence.load_lists()
        assert exc_info.value.key == LISTS_KEY

    def test_corrupt_current_snapshot(self):
        """Test a current list snapshot with the wrong shape."""
        persistence = ListPersistence(MemorySnapshotBackend({CURRENT_LIST_KEY: "[1, 2]"}))
        with pytest.raises(SnapshotDecodeError):
            persistence.load_current()

    def test_snapshot_without_optional_fields(self):
        """Test snapshots written with only the core fields."""
        payload = json.dumps(
            [
                {
                    "id": "list-1",
                    "name": "Old",
                    "ingredients": [
                        {"id": "i-1", "name": "eggs", "amount": 12, "unit": "",
                         "category": "Dairy", "isChecked": False, "isRemoved": False}
                    ],
                }
            ]
        )
        persistence = ListPersistence(MemorySnapshotBackend({LISTS_KEY: payload}))

        lists = persistence.load_lists()

        assert lists[0].name == "Old"
        assert lists[0].ingredients[0].category == GroceryCategory.DAIRY


class TestSqlSnapshotBackend:
    """Tests for the SQL-backed snapshot store."""

    def test_read_missing_key(self, sql_backend):
        """Test reading a key that was never written."""
        assert sql_backend.read(LISTS_KEY) is None

    def test_write_and_overwrite(self, sql_backend):
        """Test that writes replace earlier values."""
        sql_backend.write(LISTS_KEY, "[]")
        sql_backend.write(LISTS_KEY, '[{"id": "x"}]')
        assert sql_backend.read(LISTS_KEY) == '[{"id": "x"}]'

    def test_list_round_trip(self, sql_backend, weekly_list):
        """Test full persistence through the database."""
        persistence = ListPersistence(sql_backend)
        persistence.save([weekly_list], weekly_list)

        restored = ListPersistence(sql_backend).load_lists()

        assert restored[0].name == "Weekly"
        assert [i.name for i in restored[0].ingredients] == ["milk", "salt"]
        assert restored[0].ingredients[1].is_checked
