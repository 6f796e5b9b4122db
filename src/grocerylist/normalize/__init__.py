"""Normalize units and raw ingredient entries."""

from grocerylist.normalize.display import format_amount_and_unit, format_ingredient_name
from grocerylist.normalize.preprocess import (
    is_excluded_water,
    normalize_seasoning,
    preprocess_ingredients,
    split_salt_and_pepper,
)
from grocerylist.normalize.units import (
    QuantityRange,
    UnitKind,
    classify_unit,
    grams_to_weight,
    milliliters_to_volume,
    parse_quantity_range,
    volume_to_milliliters,
    weight_to_grams,
)

__all__ = [
    "QuantityRange",
    "UnitKind",
    "classify_unit",
    "format_amount_and_unit",
    "format_ingredient_name",
    "grams_to_weight",
    "is_excluded_water",
    "milliliters_to_volume",
    "normalize_seasoning",
    "parse_quantity_range",
    "preprocess_ingredients",
    "split_salt_and_pepper",
    "volume_to_milliliters",
    "weight_to_grams",
]
