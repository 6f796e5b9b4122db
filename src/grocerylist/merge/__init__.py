"""Ingredient matching and quantity consolidation."""

from grocerylist.merge.consolidation import consolidate
from grocerylist.merge.matching import (
    MatchStrictness,
    find_match,
    is_match,
    names_match,
)

__all__ = [
    "MatchStrictness",
    "consolidate",
    "find_match",
    "is_match",
    "names_match",
]
