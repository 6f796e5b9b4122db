"""Clean up raw ingredient entries before they are merged into a list."""

import re

from grocerylist.logging_config import get_logger
from grocerylist.normalize.units import TO_TASTE, normalize_unit
from grocerylist.schemas import GroceryCategory, Ingredient

logger = get_logger(__name__)


# Plain water never goes on a shopping list
EXCLUDED_WATER_NAMES = {
    "water",
    "tap water",
    "filtered water",
    "distilled water",
    "cold water",
    "warm water",
    "hot water",
    "ice water",
    "iced water",
    "lukewarm water",
    "boiling water",
    "room temperature water",
}

GENERIC_WATER_PATTERN = re.compile(r"^(ice|cold|warm|hot|lukewarm)?\s*water$")

# Waters that are actually bought
FLAVORED_WATERS = {
    "rose water",
    "orange blossom water",
    "floral water",
    "coconut water",
}

# Units that do not amount to an explicit measurement
UNMEASURED_UNITS = {"", "piece", "pieces", "to taste"}

SALT_WORD = re.compile(r"\bsalt\b")
PEPPER_WORD = re.compile(r"\bpepper\b")

# "salt", "kosher salt", "freshly ground black pepper"; not "bell pepper"
SEASONING_PATTERN = re.compile(
    r"^(?:(?:kosher|sea|table|fine|flaky|coarse|freshly|ground|cracked|black|white)\s+)*"
    r"(?:salt|pepper)$"
)


def is_excluded_water(name: str) -> bool:
    """Check whether an ingredient name is plain water."""
    key = " ".join(name.strip().lower().split())
    if key in FLAVORED_WATERS:
        return False
    if key in EXCLUDED_WATER_NAMES or GENERIC_WATER_PATTERN.match(key):
        return True
    return key.endswith(" water")


def has_explicit_measurement(ingredient: Ingredient) -> bool:
    """A quantity of 1 piece / nothing / "to taste" is not a real measurement."""
    return not (
        normalize_unit(ingredient.unit) in UNMEASURED_UNITS and ingredient.amount <= 1
    )


def _to_taste(name: str) -> Ingredient:
    return Ingredient(
        name=name,
        amount=0,
        unit=TO_TASTE,
        category=GroceryCategory.PANTRY,
    )


def split_salt_and_pepper(ingredient: Ingredient) -> list[Ingredient]:
    """
    Split an unmeasured combined "salt and pepper" entry into two entries.

    Returns the entry unchanged (as a one-element list) when it does not
    mention both seasonings or carries a real measurement.
    """
    key = ingredient.key
    if not (SALT_WORD.search(key) and PEPPER_WORD.search(key)):
        return [ingredient]
    if has_explicit_measurement(ingredient):
        return [ingredient]

    salt_name = "kosher salt" if "kosher" in key else "salt"
    pepper_name = "black pepper" if "black pepper" in key else "pepper"
    logger.debug(f"Splitting {ingredient.name!r} into {salt_name!r} and {pepper_name!r}")
    return [_to_taste(salt_name), _to_taste(pepper_name)]


def normalize_seasoning(ingredient: Ingredient) -> Ingredient:
    """Rewrite unmeasured salt/pepper to the qualitative "To Taste" form."""
    if not SEASONING_PATTERN.match(" ".join(ingredient.key.split())):
        return ingredient
    if has_explicit_measurement(ingredient):
        return ingredient
    return ingredient.model_copy(
        update={"amount": 0.0, "unit": TO_TASTE, "category": GroceryCategory.PANTRY}
    )


def preprocess_ingredients(ingredients: list[Ingredient]) -> list[Ingredient]:
    """
    Normalize a batch of raw entries.

    Steps:
    1. Drop plain water.
    2. Split unmeasured "salt and pepper" entries.
    3. Collapse unmeasured salt/pepper into "To Taste".

    The input entries are never mutated.
    """
    processed: list[Ingredient] = []

    for ingredient in ingredients:
        if is_excluded_water(ingredient.name):
            logger.debug(f"Dropping water entry {ingredient.name!r}")
            continue

        for part in split_salt_and_pepper(ingredient):
            processed.append(normalize_seasoning(part))

    if len(processed) != len(ingredients):
        logger.info(f"Preprocessed {len(ingredients)} entries into {len(processed)}")

    return processed
