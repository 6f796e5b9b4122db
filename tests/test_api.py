"""Tests for the grocery list API routes."""

from concurrent.futures import ThreadPoolExecutor

import pytest
from fastapi.testclient import TestClient

from grocerylist.config import get_settings
from grocerylist.main import app
from grocerylist.routers.lists import get_store

BASE = "/api/v1/lists"


@pytest.fixture
def client(store):
    """Test client whose routes use the in-memory store."""
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def _add(client, list_id="current", *ingredients):
    return client.post(f"{BASE}/{list_id}/ingredients", json={"ingredients": list(ingredients)})


MILK = {"name": "milk", "amount": 1, "unit": "cup", "category": "Dairy"}


@pytest.fixture
def sqlite_app(tmp_path, monkeypatch):
    """The application configured against a throwaway SQLite database."""
    monkeypatch.setenv("GROCERYLIST_DATABASE_URL", f"sqlite:///{tmp_path / 'api.db'}")
    get_settings.cache_clear()
    if hasattr(app.state, "store"):
        del app.state.store
    yield app
    if hasattr(app.state, "store"):
        del app.state.store
    get_settings.cache_clear()


class TestListRoutes:
    """Tests for list-level routes."""

    def test_list_lists(self, client, store):
        """Test the list overview."""
        response = client.get(BASE)
        assert response.status_code == 200

        data = response.json()
        assert data["total"] == 1
        assert data["currentListId"] == store.current_list.id
        assert data["lists"][0]["name"] == "Shopping List"
        assert data["lists"][0]["itemCount"] == 0

    def test_create_list(self, client, store):
        """Test that a created list becomes current."""
        response = client.post(BASE, json={"name": "Party"})
        assert response.status_code == 201

        data = response.json()
        assert data["name"] == "Party"
        assert data["isCurrent"] is True
        assert store.current_list.id == data["id"]

    def test_create_list_requires_name(self, client):
        """Test request validation."""
        assert client.post(BASE, json={"name": ""}).status_code == 422

    def test_get_current_list(self, client, store):
        """Test the 'current' alias."""
        response = client.get(f"{BASE}/current")
        assert response.status_code == 200
        assert response.json()["id"] == store.current_list.id

    def test_get_unknown_list(self, client):
        """Test 404 for unknown lists."""
        assert client.get(f"{BASE}/missing").status_code == 404

    def test_select_list(self, client, store):
        """Test switching the current list."""
        first_id = store.current_list.id
        client.post(BASE, json={"name": "Party"})

        response = client.post(f"{BASE}/{first_id}/select")

        assert response.status_code == 200
        assert response.json()["isCurrent"] is True
        assert store.current_list.id == first_id

    def test_rename_list(self, client, store):
        """Test renaming."""
        response = client.patch(f"{BASE}/current", json={"name": "Weekly"})
        assert response.status_code == 200
        assert response.json()["name"] == "Weekly"
        assert store.current_list.name == "Weekly"

    def test_delete_list(self, client, store):
        """Test deleting a list."""
        list_id = store.current_list.id
        assert client.delete(f"{BASE}/{list_id}").status_code == 204
        assert store.lists == []
        assert client.delete(f"{BASE}/{list_id}").status_code == 404


class TestIngredientRoutes:
    """Tests for ingredient routes."""

    def test_add_ingredients(self, client):
        """Test adding with display strings in the response."""
        response = _add(client, "current", MILK, {"name": "water", "amount": 2, "unit": "cups"})
        assert response.status_code == 200

        data = response.json()
        assert data["saved"] is True
        (milk,) = data["ingredients"]
        assert milk["displayName"] == "Milk"
        assert milk["displayQuantity"] == "1 cup"
        assert milk["category"] == "Dairy"
        assert milk["isChecked"] is False

    def test_add_merges(self, client, store):
        """Test that repeated adds consolidate."""
        _add(client, "current", MILK)
        response = _add(client, "current", MILK)

        assert response.json()["ingredients"][0]["displayQuantity"] == "2 cups"
        assert len(store.current_list.ingredients) == 1

    def test_add_to_unknown_list(self, client):
        """Test 404 when adding to an unknown list."""
        assert _add(client, "missing", MILK).status_code == 404

    def test_toggle_remove_restore(self, client):
        """Test entry state transitions."""
        ingredient_id = _add(client, "current", MILK).json()["ingredients"][0]["id"]
        base = f"{BASE}/current/ingredients/{ingredient_id}"

        assert client.post(f"{base}/toggle").json()["isChecked"] is True
        assert client.post(f"{base}/remove").json()["isRemoved"] is True
        assert client.get(f"{BASE}/current").json()["ingredients"][0]["isRemoved"] is True
        assert client.post(f"{base}/restore").json()["isRemoved"] is False

    def test_unknown_ingredient(self, client):
        """Test 404 for unknown ingredients."""
        assert client.post(f"{BASE}/current/ingredients/missing/toggle").status_code == 404
        assert client.delete(f"{BASE}/current/ingredients/missing").status_code == 404

    def test_delete_ingredient(self, client, store):
        """Test permanent removal."""
        ingredient_id = _add(client, "current", MILK).json()["ingredients"][0]["id"]

        response = client.delete(f"{BASE}/current/ingredients/{ingredient_id}")

        assert response.status_code == 204
        assert store.current_list.ingredients == []

    def test_clear_ingredients(self, client):
        """Test clearing a list."""
        _add(client, "current", MILK, {"name": "eggs", "amount": 6})

        response = client.delete(f"{BASE}/current/ingredients")

        assert response.status_code == 200
        assert response.json()["ingredients"] == []

    def test_save_failure_is_reported(self, client, store, failing_write_backend):
        """Test that a failed save still returns the merged entries."""
        store.persistence.backend = failing_write_backend

        response = _add(client, "current", MILK)

        assert response.status_code == 200
        assert response.json()["saved"] is False
        assert len(store.current_list.ingredients) == 1

    def test_out_of_range_amount_is_unmeasured(self, client, store):
        """Test that an amount overflowing to infinity cannot break the list."""
        response = client.post(
            f"{BASE}/current/ingredients",
            content='{"ingredients": [{"name": "flour", "amount": 1e400, "unit": "g"}]}',
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 200
        assert response.json()["ingredients"][0]["amount"] == 0
        assert store.current_list.ingredients[0].amount == 0

        assert client.get(f"{BASE}/current").status_code == 200

    def test_batch_response_lists_entry_once(self, client):
        """Test a batch merging several items into one entry."""
        response = _add(client, "current", MILK, MILK, {"name": "eggs", "amount": 6}, MILK)

        names = [i["name"] for i in response.json()["ingredients"]]
        assert names == ["milk", "eggs"]
        assert response.json()["ingredients"][0]["displayQuantity"] == "3 cups"


class TestStoreLifecycle:
    """Tests for the application's single list store."""

    def test_store_built_at_startup(self, sqlite_app):
        """Test that startup builds the store used by every request."""
        with TestClient(sqlite_app) as client:
            store = sqlite_app.state.store
            created = client.post(BASE, json={"name": "Party"}).json()

            assert store.current_list.id == created["id"]
            assert client.get(BASE).json()["total"] == 2

    def test_concurrent_requests_share_one_store(self, sqlite_app):
        """Test that simultaneous requests see a single store and default list."""
        with TestClient(sqlite_app) as client:
            with ThreadPoolExecutor(max_workers=8) as pool:
                responses = list(pool.map(lambda _: client.get(BASE).json(), range(8)))

            assert {r["currentListId"] for r in responses} == {
                sqlite_app.state.store.current_list.id
            }
            assert all(r["total"] == 1 for r in responses)

    def test_store_built_on_first_request(self, sqlite_app):
        """Test the lazy build when startup did not run."""
        client = TestClient(sqlite_app)

        first = client.get(BASE).json()
        second = client.get(BASE).json()

        assert first["currentListId"] == second["currentListId"]
        assert sqlite_app.state.store.current_list.id == first["currentListId"]
