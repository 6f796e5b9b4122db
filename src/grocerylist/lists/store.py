"""In-memory owner of the grocery lists and their mutation API."""

from grocerylist.config import get_settings
from grocerylist.logging_config import LoggingContext, get_logger
from grocerylist.lists.persistence import ListPersistence, PersistenceError
from grocerylist.merge.consolidation import consolidate
from grocerylist.merge.matching import MatchStrictness, find_match
from grocerylist.normalize.preprocess import preprocess_ingredients
from grocerylist.schemas import GroceryList, Ingredient

logger = get_logger(__name__)


class ListStore:
    """
    Owns the grocery lists for one session.

    The store is a single-writer structure: callers serialize calls to the
    mutating methods. Every mutation persists a full snapshot; a failed save
    is logged and kept in `last_persist_error`, but the in-memory lists stay
    the source of truth and are never rolled back.

    Unknown list or ingredient ids are logged and the call is a no-op that
    returns None (or an empty list).
    """

    def __init__(
        self,
        persistence: ListPersistence,
        strictness: MatchStrictness | None = None,
        default_list_name: str | None = None,
    ):
        settings = get_settings()
        self.persistence = persistence
        self.strictness = strictness or settings.matching_strictness
        self.default_list_name = default_list_name or settings.default_list_name

        self.lists: list[GroceryList] = []
        self.current_list: GroceryList | None = None
        self.last_persist_error: PersistenceError | None = None

        self.load()

    # =========================================================================
    # Persistence
    # =========================================================================

    def load(self) -> None:
        """
        Restore lists from the persisted snapshots.

        The current list is resolved against the loaded lists by id, then by
        name, then falls back to the first list. With no lists at all, a
        default list is created.
        """
        try:
            self.lists = self.persistence.load_lists() or []
        except PersistenceError as e:
            logger.error(f"Error loading grocery lists: {e}")
            self.lists = []

        saved_current: GroceryList | None = None
        try:
            saved_current = self.persistence.load_current()
        except PersistenceError as e:
            logger.error(f"Error loading current list: {e}")

        self.current_list = self._resolve_current(saved_current)

        if self.current_list is None:
            logger.info("No saved lists found, creating default list")
            self.create_list(self.default_list_name)
        else:
            logger.info(
                f"Loaded {len(self.lists)} lists; current: {self.current_list.name} "
                f"with {len(self.current_list.ingredients)} ingredients"
            )

    def _resolve_current(self, saved: GroceryList | None) -> GroceryList | None:
        if not self.lists:
            return None
        if saved is not None:
            for grocery_list in self.lists:
                if grocery_list.id == saved.id:
                    return grocery_list
            for grocery_list in self.lists:
                if grocery_list.name == saved.name:
                    return grocery_list
        return self.lists[0]

    def save(self) -> bool:
        """Persist both snapshots. Returns False (and logs) on failure."""
        try:
            self.persistence.save(self.lists, self.current_list)
        except PersistenceError as e:
            logger.error(f"Error saving grocery lists: {e}")
            self.last_persist_error = e
            return False
        self.last_persist_error = None
        return True

    # =========================================================================
    # Lists
    # =========================================================================

    def get_list(self, list_id: str | None = None) -> GroceryList | None:
        """Look up a list by id; the current list when no id is given."""
        if list_id is None:
            return self.current_list
        for grocery_list in self.lists:
            if grocery_list.id == list_id:
                return grocery_list
        logger.warning(f"Could not find list with ID: {list_id}")
        return None

    def create_list(self, name: str) -> GroceryList:
        """Create a list and make it current."""
        grocery_list = GroceryList(name=name)
        self.lists.append(grocery_list)
        self.current_list = grocery_list
        logger.info(f"Created list {name!r} ({grocery_list.id})")
        self.save()
        return grocery_list

    def select_list(self, list_id: str) -> GroceryList | None:
        """Make an existing list current."""
        grocery_list = self.get_list(list_id)
        if grocery_list is None:
            return None
        self.current_list = grocery_list
        self.save()
        return grocery_list

    def rename_list(self, list_id: str, name: str) -> GroceryList | None:
        grocery_list = self.get_list(list_id)
        if grocery_list is None:
            return None
        grocery_list.name = name
        self.save()
        return grocery_list

    def delete_list(self, list_id: str) -> bool:
        """Delete a list; the first remaining list becomes current if needed."""
        grocery_list = self.get_list(list_id)
        if grocery_list is None:
            return False
        self.lists = [gl for gl in self.lists if gl.id != list_id]
        if self.current_list is not None and self.current_list.id == list_id:
            self.current_list = self.lists[0] if self.lists else None
        logger.info(f"Deleted list {grocery_list.name!r} ({list_id})")
        self.save()
        return True

    # =========================================================================
    # Ingredients
    # =========================================================================

    def add_ingredients(
        self,
        ingredients: list[Ingredient],
        list_id: str | None = None,
    ) -> list[Ingredient]:
        """
        Merge a batch of parsed ingredients into a list.

        Each preprocessed entry is merged into the first matching entry of the
        list, or appended when nothing matches. Without a list id the current
        list is used, creating the default list if there is none.

        Args:
            ingredients: Raw entries from the recipe parser.
            list_id: Target list; defaults to the current list.

        Returns:
            The list entries that were merged into or appended, each once,
            in the order they were first touched.
        """
        if list_id is None and self.current_list is None:
            logger.info("No current list, creating default list")
            self.create_list(self.default_list_name)

        grocery_list = self.get_list(list_id)
        if grocery_list is None:
            return []

        with LoggingContext(list_id=grocery_list.id):
            logger.info(f"Adding {len(ingredients)} ingredients to {grocery_list.name!r}")
            touched: dict[str, Ingredient] = {}

            for new in preprocess_ingredients(ingredients):
                index = find_match(new, grocery_list.ingredients, self.strictness)
                if index is None:
                    entry = new.model_copy()
                    grocery_list.ingredients.append(entry)
                    logger.debug(f"Added new ingredient {entry.name!r}")
                else:
                    entry = grocery_list.ingredients[index]
                    self._merge_into(entry, new)
                touched.setdefault(entry.id, entry)

            self.save()
            return list(touched.values())

    def _merge_into(self, entry: Ingredient, new: Ingredient) -> None:
        if entry.is_removed:
            # A removed entry comes back with just the newly requested quantity
            entry.amount = new.amount
            entry.unit = new.unit
            entry.is_removed = False
            entry.is_checked = False
            logger.debug(f"Restored removed ingredient {entry.name!r}")
            return

        amount, unit = consolidate(entry.amount, entry.unit, new.amount, new.unit, entry.name)
        changed = (amount, unit) != (entry.amount, entry.unit)
        entry.amount = amount
        entry.unit = unit
        if changed and entry.is_checked:
            # More of an already-bought item needs to be bought again
            entry.is_checked = False
        logger.debug(f"Combined {new.name!r} into {entry.name!r}: {amount} {unit!r}")

    def _find_ingredient(
        self, ingredient_id: str, list_id: str | None
    ) -> tuple[GroceryList, Ingredient] | None:
        grocery_list = self.get_list(list_id)
        if grocery_list is None:
            return None
        ingredient = grocery_list.find_ingredient(ingredient_id)
        if ingredient is None:
            logger.warning(f"Could not find ingredient {ingredient_id} in {grocery_list.name!r}")
            return None
        return grocery_list, ingredient

    def toggle_checked(self, ingredient_id: str, list_id: str | None = None) -> Ingredient | None:
        found = self._find_ingredient(ingredient_id, list_id)
        if found is None:
            return None
        _, ingredient = found
        ingredient.is_checked = not ingredient.is_checked
        self.save()
        return ingredient

    def remove_ingredient(self, ingredient_id: str, list_id: str | None = None) -> Ingredient | None:
        """Soft-delete an entry; it keeps its position for a later restore."""
        found = self._find_ingredient(ingredient_id, list_id)
        if found is None:
            return None
        _, ingredient = found
        ingredient.is_removed = True
        self.save()
        return ingredient

    def restore_ingredient(
        self, ingredient_id: str, list_id: str | None = None
    ) -> Ingredient | None:
        found = self._find_ingredient(ingredient_id, list_id)
        if found is None:
            return None
        _, ingredient = found
        ingredient.is_removed = False
        self.save()
        return ingredient

    def delete_ingredient(self, ingredient_id: str, list_id: str | None = None) -> bool:
        """Remove an entry from the list for good."""
        found = self._find_ingredient(ingredient_id, list_id)
        if found is None:
            return False
        grocery_list, ingredient = found
        grocery_list.ingredients = [i for i in grocery_list.ingredients if i.id != ingredient.id]
        self.save()
        return True

    def clear_all(self, list_id: str | None = None) -> GroceryList | None:
        """Remove every entry from a list."""
        grocery_list = self.get_list(list_id)
        if grocery_list is None:
            return None
        grocery_list.ingredients = []
        logger.info(f"Cleared list {grocery_list.name!r}")
        self.save()
        return grocery_list
