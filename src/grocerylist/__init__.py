"""Grocery list manager: merges recipe ingredients into a running shopping list."""

__version__ = "0.1.0"
