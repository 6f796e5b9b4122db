"""API routers for the grocerylist application."""

from grocerylist.routers.lists import build_store, get_store
from grocerylist.routers.lists import router as lists_router

__all__ = [
    "build_store",
    "get_store",
    "lists_router",
]
