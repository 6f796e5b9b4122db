"""Decide whether two list entries are the same purchasable item."""

import re
from enum import Enum

from grocerylist.logging_config import get_logger
from grocerylist.schemas import Ingredient

logger = get_logger(__name__)


class MatchStrictness(str, Enum):
    """How tolerant name matching is."""

    # Exact name or a declared equivalence only
    STRICT = "strict"
    # Additionally strips a trailing "s" and consults INGREDIENT_SYNONYMS
    PERMISSIVE = "permissive"


# "garlic", "garlic clove", "garlic cloves"
GARLIC_PATTERN = re.compile(r"^garlic(?:\s+cloves?)?$")

# Name groups treated as one ingredient in permissive mode
INGREDIENT_SYNONYMS: list[set[str]] = [
    {"tomato", "tomatoes"},
    {"onion", "onions"},
    {"garlic", "garlic clove", "garlic cloves", "minced garlic", "clove garlic", "cloves garlic"},
    {"bell pepper", "bell peppers", "pepper", "peppers"},
    {"potato", "potatoes"},
    {"carrot", "carrots"},
]


def normalize_name(name: str) -> str:
    """Trim, lower-case and collapse whitespace."""
    return " ".join(name.strip().lower().split())


def is_garlic(name: str) -> bool:
    """Check whether a name is one of the garlic spellings."""
    return bool(GARLIC_PATTERN.match(normalize_name(name)))


def _equivalent(name1: str, name2: str) -> bool:
    return is_garlic(name1) and is_garlic(name2)


def _singular(name: str) -> str:
    if len(name) > 1 and name.endswith("s"):
        return name[:-1]
    return name


def _synonyms(name1: str, name2: str) -> bool:
    return any(name1 in group and name2 in group for group in INGREDIENT_SYNONYMS)


def names_match(
    name1: str,
    name2: str,
    strictness: MatchStrictness = MatchStrictness.STRICT,
) -> bool:
    """
    Compare two ingredient names.

    Strict mode only accepts identical names (after trim + lower-case) and the
    garlic equivalence. Suffix stripping is deliberately left to permissive
    mode: "pepper" and "peppers" are different items in strict mode.
    """
    key1 = normalize_name(name1)
    key2 = normalize_name(name2)

    if key1 == key2 or _equivalent(key1, key2):
        return True

    if strictness == MatchStrictness.PERMISSIVE:
        if _singular(key1) == _singular(key2):
            return True
        return _synonyms(key1, key2)

    return False


def is_match(
    a: Ingredient,
    b: Ingredient,
    strictness: MatchStrictness = MatchStrictness.STRICT,
) -> bool:
    """Two entries match when their categories are equal and their names match."""
    if a.category != b.category:
        return False
    return names_match(a.name, b.name, strictness)


def find_match(
    candidate: Ingredient,
    entries: list[Ingredient],
    strictness: MatchStrictness = MatchStrictness.STRICT,
) -> int | None:
    """Index of the first entry matching the candidate, in iteration order."""
    for index, entry in enumerate(entries):
        if is_match(entry, candidate, strictness):
            logger.debug(f"Matched {candidate.name!r} to existing {entry.name!r} at {index}")
            return index
    return None
