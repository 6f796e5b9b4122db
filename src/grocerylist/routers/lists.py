"""API routes for grocery lists and their ingredients."""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from grocerylist.config import get_settings
from grocerylist.database import make_engine, make_session_factory
from grocerylist.lists.persistence import ListPersistence, SqlSnapshotBackend
from grocerylist.lists.store import ListStore
from grocerylist.logging_config import get_logger
from grocerylist.normalize.display import format_amount_and_unit, format_ingredient_name
from grocerylist.schemas import GroceryCategory, GroceryList, Ingredient

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/lists", tags=["lists"])

# Path value addressing whichever list is current
CURRENT = "current"


# Request/Response schemas
class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class IngredientCreate(CamelModel):
    """Ingredient as handed over by the recipe parser."""

    name: str = Field(min_length=1)
    amount: float = 0.0
    unit: str = ""
    category: str = GroceryCategory.OTHER.value


class AddIngredientsRequest(CamelModel):
    ingredients: list[IngredientCreate]


class ListNameRequest(CamelModel):
    name: str = Field(min_length=1, max_length=100)


class IngredientResponse(CamelModel):
    """List entry with its display strings."""

    id: str
    name: str
    amount: float
    unit: str
    category: GroceryCategory
    is_checked: bool
    is_removed: bool
    display_name: str
    display_quantity: str

    @classmethod
    def from_ingredient(cls, ingredient: Ingredient) -> "IngredientResponse":
        return cls(
            **ingredient.model_dump(),
            display_name=format_ingredient_name(ingredient.name, ingredient.amount),
            display_quantity=format_amount_and_unit(ingredient.amount, ingredient.unit),
        )


class ListResponse(CamelModel):
    id: str
    name: str
    created_at: datetime
    is_current: bool
    ingredients: list[IngredientResponse]


class ListSummary(CamelModel):
    id: str
    name: str
    created_at: datetime
    item_count: int
    checked_count: int


class ListsResponse(CamelModel):
    lists: list[ListSummary]
    total: int
    current_list_id: str | None = None


class AddIngredientsResponse(CamelModel):
    ingredients: list[IngredientResponse]
    saved: bool


def build_store() -> ListStore:
    """List store over the configured snapshot database."""
    settings = get_settings()
    session_factory = make_session_factory(make_engine(settings.database_url))
    store = ListStore(ListPersistence(SqlSnapshotBackend(session_factory)))
    logger.info(f"List store initialized from {settings.database_url}")
    return store


async def get_store(request: Request) -> ListStore:
    """
    Dependency returning the application's list store.

    The store is normally built once at startup. The fallback build runs on
    the event loop thread, so concurrent first requests share one store.
    """
    store: ListStore | None = getattr(request.app.state, "store", None)
    if store is None:
        store = build_store()
        request.app.state.store = store
    return store


def _list_id(list_id: str) -> str | None:
    return None if list_id == CURRENT else list_id


def _require_list(store: ListStore, list_id: str) -> GroceryList:
    grocery_list = store.get_list(_list_id(list_id))
    if grocery_list is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"List {list_id} not found",
        )
    return grocery_list


def _list_response(store: ListStore, grocery_list: GroceryList) -> ListResponse:
    return ListResponse(
        id=grocery_list.id,
        name=grocery_list.name,
        created_at=grocery_list.created_at,
        is_current=store.current_list is not None and store.current_list.id == grocery_list.id,
        ingredients=[IngredientResponse.from_ingredient(i) for i in grocery_list.ingredients],
    )


def _ingredient_not_found(ingredient_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Ingredient {ingredient_id} not found",
    )


# Handlers are `async def` without awaits: they all run on the event loop
# thread, one at a time, which keeps the store single-writer.


@router.get("", response_model=ListsResponse)
async def list_lists(store: ListStore = Depends(get_store)) -> ListsResponse:
    """Get all grocery lists."""
    return ListsResponse(
        lists=[
            ListSummary(
                id=gl.id,
                name=gl.name,
                created_at=gl.created_at,
                item_count=len(gl.visible_ingredients),
                checked_count=len(gl.checked_ingredients),
            )
            for gl in store.lists
        ],
        total=len(store.lists),
        current_list_id=store.current_list.id if store.current_list else None,
    )


@router.post("", response_model=ListResponse, status_code=status.HTTP_201_CREATED)
async def create_list(
    request: ListNameRequest,
    store: ListStore = Depends(get_store),
) -> ListResponse:
    """Create a list and make it current."""
    grocery_list = store.create_list(request.name)
    return _list_response(store, grocery_list)


@router.get("/{list_id}", response_model=ListResponse)
async def get_list(list_id: str, store: ListStore = Depends(get_store)) -> ListResponse:
    """Get a list (or `current`) with its ingredients."""
    return _list_response(store, _require_list(store, list_id))


@router.post("/{list_id}/select", response_model=ListResponse)
async def select_list(list_id: str, store: ListStore = Depends(get_store)) -> ListResponse:
    """Make a list current."""
    grocery_list = _require_list(store, list_id)
    store.select_list(grocery_list.id)
    return _list_response(store, grocery_list)


@router.patch("/{list_id}", response_model=ListResponse)
async def rename_list(
    list_id: str,
    request: ListNameRequest,
    store: ListStore = Depends(get_store),
) -> ListResponse:
    """Rename a list."""
    grocery_list = _require_list(store, list_id)
    store.rename_list(grocery_list.id, request.name)
    return _list_response(store, grocery_list)


@router.delete("/{list_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_list(list_id: str, store: ListStore = Depends(get_store)) -> None:
    """Delete a list."""
    grocery_list = _require_list(store, list_id)
    store.delete_list(grocery_list.id)


@router.post("/{list_id}/ingredients", response_model=AddIngredientsResponse)
async def add_ingredients(
    list_id: str,
    request: AddIngredientsRequest,
    store: ListStore = Depends(get_store),
) -> AddIngredientsResponse:
    """Merge parsed ingredients into a list."""
    if list_id != CURRENT:
        _require_list(store, list_id)

    touched = store.add_ingredients(
        [Ingredient(**item.model_dump()) for item in request.ingredients],
        list_id=_list_id(list_id),
    )
    return AddIngredientsResponse(
        ingredients=[IngredientResponse.from_ingredient(i) for i in touched],
        saved=store.last_persist_error is None,
    )


@router.delete("/{list_id}/ingredients", response_model=ListResponse)
async def clear_ingredients(list_id: str, store: ListStore = Depends(get_store)) -> ListResponse:
    """Remove every ingredient from a list."""
    grocery_list = _require_list(store, list_id)
    store.clear_all(grocery_list.id)
    return _list_response(store, grocery_list)


@router.post("/{list_id}/ingredients/{ingredient_id}/toggle", response_model=IngredientResponse)
async def toggle_ingredient(
    list_id: str,
    ingredient_id: str,
    store: ListStore = Depends(get_store),
) -> IngredientResponse:
    """Toggle an ingredient's purchased state."""
    grocery_list = _require_list(store, list_id)
    ingredient = store.toggle_checked(ingredient_id, grocery_list.id)
    if ingredient is None:
        raise _ingredient_not_found(ingredient_id)
    return IngredientResponse.from_ingredient(ingredient)


@router.post("/{list_id}/ingredients/{ingredient_id}/remove", response_model=IngredientResponse)
async def remove_ingredient(
    list_id: str,
    ingredient_id: str,
    store: ListStore = Depends(get_store),
) -> IngredientResponse:
    """Soft-delete an ingredient."""
    grocery_list = _require_list(store, list_id)
    ingredient = store.remove_ingredient(ingredient_id, grocery_list.id)
    if ingredient is None:
        raise _ingredient_not_found(ingredient_id)
    return IngredientResponse.from_ingredient(ingredient)


@router.post("/{list_id}/ingredients/{ingredient_id}/restore", response_model=IngredientResponse)
async def restore_ingredient(
    list_id: str,
    ingredient_id: str,
    store: ListStore = Depends(get_store),
) -> IngredientResponse:
    """Restore a soft-deleted ingredient."""
    grocery_list = _require_list(store, list_id)
    ingredient = store.restore_ingredient(ingredient_id, grocery_list.id)
    if ingredient is None:
        raise _ingredient_not_found(ingredient_id)
    return IngredientResponse.from_ingredient(ingredient)


@router.delete(
    "/{list_id}/ingredients/{ingredient_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_ingredient(
    list_id: str,
    ingredient_id: str,
    store: ListStore = Depends(get_store),
) -> None:
    """Remove an ingredient for good."""
    grocery_list = _require_list(store, list_id)
    if not store.delete_ingredient(ingredient_id, grocery_list.id):
        raise _ingredient_not_found(ingredient_id)
