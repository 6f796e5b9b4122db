"""Domain schemas for grocery lists and their ingredient entries."""

import math
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GroceryCategory(str, Enum):
    """Store section an ingredient is shopped from."""

    PRODUCE = "Produce"
    MEAT_AND_SEAFOOD = "Meat & Seafood"
    DELI = "Deli"
    BAKERY = "Bakery"
    FROZEN = "Frozen"
    PANTRY = "Pantry"
    DAIRY = "Dairy"
    BEVERAGES = "Beverages"
    OTHER = "Other"

    @classmethod
    def _missing_(cls, value: object) -> "GroceryCategory":
        # Accept display values and member names in any case ("produce",
        # "MEAT_AND_SEAFOOD"); anything unrecognised lands in OTHER.
        if isinstance(value, str):
            key = value.strip().lower()
            for member in cls:
                if key in (member.value.lower(), member.name.lower()):
                    return member
        return cls.OTHER

    @property
    def display_name(self) -> str:
        return self.value


class Ingredient(BaseModel):
    """A single entry on a grocery list."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    id: str = Field(default_factory=_new_id)
    name: str
    amount: float = Field(default=0.0, ge=0)
    unit: str = ""
    category: GroceryCategory = GroceryCategory.OTHER
    is_checked: bool = False
    is_removed: bool = False

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: Any) -> str:
        """Names are stored trimmed."""
        if v is None:
            return ""
        return str(v).strip()

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, v: Any) -> float:
        """Missing, unparseable, non-finite or negative amounts become the unmeasured sentinel."""
        if v is None:
            return 0.0
        try:
            amount = float(v)
        except (ValueError, TypeError):
            return 0.0
        if not math.isfinite(amount) or amount < 0:
            return 0.0
        return amount

    @field_validator("unit", mode="before")
    @classmethod
    def coerce_unit(cls, v: Any) -> str:
        """Handle missing units."""
        if v is None:
            return ""
        return str(v).strip()

    @field_validator("category", mode="before")
    @classmethod
    def coerce_category(cls, v: Any) -> GroceryCategory:
        """Parsers hand over free-text categories."""
        if isinstance(v, GroceryCategory):
            return v
        if v is None:
            return GroceryCategory.OTHER
        return GroceryCategory(str(v))

    @property
    def key(self) -> str:
        """Trimmed, lower-cased name used for matching."""
        return self.name.strip().lower()


class GroceryList(BaseModel):
    """A named, ordered grocery list."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str = Field(default_factory=_new_id)
    name: str
    ingredients: list[Ingredient] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utcnow)
    is_active: bool = True

    def find_ingredient(self, ingredient_id: str) -> Ingredient | None:
        """Look up an entry by id, including soft-removed ones."""
        for ingredient in self.ingredients:
            if ingredient.id == ingredient_id:
                return ingredient
        return None

    @property
    def visible_ingredients(self) -> list[Ingredient]:
        return [i for i in self.ingredients if not i.is_removed]

    @property
    def checked_ingredients(self) -> list[Ingredient]:
        return [i for i in self.ingredients if i.is_checked and not i.is_removed]

    @property
    def unchecked_ingredients(self) -> list[Ingredient]:
        return [i for i in self.ingredients if not i.is_checked and not i.is_removed]

    @property
    def removed_ingredients(self) -> list[Ingredient]:
        return [i for i in self.ingredients if i.is_removed]

    @property
    def ingredients_by_category(self) -> dict[GroceryCategory, list[Ingredient]]:
        """Visible entries grouped by category, each group sorted by name."""
        grouped: dict[GroceryCategory, list[Ingredient]] = {}
        for ingredient in self.visible_ingredients:
            grouped.setdefault(ingredient.category, []).append(ingredient)
        return {
            category: sorted(items, key=lambda i: i.name.lower())
            for category, items in grouped.items()
        }
