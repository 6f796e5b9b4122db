"""Fold a new ingredient quantity into an existing list entry."""

from grocerylist.logging_config import get_logger
from grocerylist.merge.matching import is_garlic
from grocerylist.normalize.units import (
    POINT_EPSILON,
    QuantityRange,
    UnitKind,
    classify_unit,
    effective_kind,
    grams_to_weight,
    is_zero_like,
    milliliters_to_volume,
    parse_quantity_range,
    range_to_amount_and_unit,
    unit_key,
    units_equal,
    volume_to_milliliters,
    weight_to_grams,
)

logger = get_logger(__name__)


# Garlic heuristic: 1 clove ~ 1 tsp minced, 1 tbsp = 3 tsp
GARLIC_TEASPOONS: dict[str, float] = {
    "clove": 1.0,
    "cloves": 1.0,
    "tsp": 1.0,
    "tsps": 1.0,
    "teaspoon": 1.0,
    "teaspoons": 1.0,
    "tbsp": 3.0,
    "tbsps": 3.0,
    "tbs": 3.0,
    "tablespoon": 3.0,
    "tablespoons": 3.0,
}
GARLIC_CLOVE_UNIT = "cloves"
GARLIC_TSP_UNIT = "tsp"
GARLIC_TBSP_UNIT = "tbsp"

_COUNTABLE = (UnitKind.COUNT, UnitKind.RANGE)


def garlic_teaspoons(amount: float, unit: str | None) -> float | None:
    """Express a garlic quantity in teaspoons; None for units the heuristic does not cover."""
    factor = GARLIC_TEASPOONS.get(unit_key(unit))
    if factor is None:
        return None
    return amount * factor


def _is_garlic_spoon(unit: str | None) -> bool:
    return classify_unit(unit) == UnitKind.VOLUME and unit_key(unit) in GARLIC_TEASPOONS


def _as_range(amount: float, unit: str, garlic: bool) -> QuantityRange:
    if garlic and _is_garlic_spoon(unit):
        cloves = garlic_teaspoons(amount, unit) or 0.0
        return QuantityRange(cloves, cloves, GARLIC_CLOVE_UNIT)
    return parse_quantity_range(amount, unit)


def _consolidate_countable(
    existing_amount: float,
    existing_unit: str,
    new_amount: float,
    new_unit: str,
    garlic: bool,
) -> tuple[float, str] | None:
    existing_kind = effective_kind(existing_amount, existing_unit)
    new_kind = effective_kind(new_amount, new_unit)

    if existing_kind not in _COUNTABLE and new_kind not in _COUNTABLE:
        return None

    def countable(kind: UnitKind, unit: str) -> bool:
        return kind in _COUNTABLE or (garlic and _is_garlic_spoon(unit))

    if not (countable(existing_kind, existing_unit) and countable(new_kind, new_unit)):
        return None

    total = _as_range(existing_amount, existing_unit, garlic) + _as_range(
        new_amount, new_unit, garlic
    )
    return range_to_amount_and_unit(total)


def _consolidate_garlic_spoons(
    existing_amount: float,
    existing_unit: str,
    new_amount: float,
    new_unit: str,
) -> tuple[float, str] | None:
    existing_tsp = garlic_teaspoons(existing_amount, existing_unit)
    new_tsp = garlic_teaspoons(new_amount, new_unit)
    if existing_tsp is None or new_tsp is None:
        return None

    total = existing_tsp + new_tsp
    tablespoons = total / 3
    if abs(tablespoons - round(tablespoons)) < POINT_EPSILON:
        return float(round(tablespoons)), GARLIC_TBSP_UNIT
    return total, GARLIC_TSP_UNIT


def consolidate(
    existing_amount: float,
    existing_unit: str,
    new_amount: float,
    new_unit: str,
    ingredient_name: str = "",
) -> tuple[float, str]:
    """
    Compute the merged (amount, unit) of two quantities of the same ingredient.

    Rules, first applicable wins:
    1. Both unmeasured: stays unmeasured (amount 0), keeping a non-empty label.
    2. One unmeasured: the measured side, verbatim.
    3. Both count/range (garlic spoons count as cloves): interval sum.
    4. Identical unit strings: plain addition.
    5. Garlic in mixed cloves/tsp/tbsp: sum in teaspoons, whole tablespoons if possible.
    6. Both volume: sum in milliliters, shown in the existing unit.
    7. Both weight: sum in grams, shown in the existing unit.
    8. Anything else: the existing quantity, unchanged.

    Args:
        existing_amount: Amount already on the list.
        existing_unit: Unit already on the list.
        new_amount: Amount being added.
        new_unit: Unit being added.
        ingredient_name: Name of the ingredient, for name-specific heuristics.

    Returns:
        Tuple of (amount, unit).
    """
    existing_unit = existing_unit or ""
    new_unit = new_unit or ""

    existing_zero = is_zero_like(existing_amount, existing_unit)
    new_zero = is_zero_like(new_amount, new_unit)

    # 1-2. Qualitative entries never dilute a real quantity
    if existing_zero and new_zero:
        label = existing_unit.strip() or new_unit.strip()
        return 0.0, label
    if existing_zero:
        return new_amount, new_unit
    if new_zero:
        return existing_amount, existing_unit

    garlic = is_garlic(ingredient_name)

    # 3. Counts and ranges
    merged = _consolidate_countable(existing_amount, existing_unit, new_amount, new_unit, garlic)
    if merged is not None:
        return merged

    # 4. Same unit
    if units_equal(existing_unit, new_unit):
        return existing_amount + new_amount, existing_unit

    # 5. Garlic spoons
    if garlic:
        merged = _consolidate_garlic_spoons(existing_amount, existing_unit, new_amount, new_unit)
        if merged is not None:
            return merged

    # 6. Volume
    existing_ml = volume_to_milliliters(existing_amount, existing_unit)
    new_ml = volume_to_milliliters(new_amount, new_unit)
    if existing_ml is not None and new_ml is not None:
        return milliliters_to_volume(existing_ml + new_ml, existing_unit)

    # 7. Weight
    existing_g = weight_to_grams(existing_amount, existing_unit)
    new_g = weight_to_grams(new_amount, new_unit)
    if existing_g is not None and new_g is not None:
        return grams_to_weight(existing_g + new_g, existing_unit)

    # 8. Incompatible dimensions: the new quantity is dropped
    logger.info(
        f"Cannot combine {new_amount} {new_unit!r} into {existing_amount} {existing_unit!r}"
        f" for {ingredient_name!r}; keeping existing quantity"
    )
    return existing_amount, existing_unit
