"""Unit classification and conversion utilities."""

import re
from dataclasses import dataclass
from enum import Enum

from grocerylist.logging_config import get_logger

logger = get_logger(__name__)


# =============================================================================
# Unit Vocabularies
# =============================================================================

# Volume conversions (base unit: ml)
VOLUME_UNITS: dict[str, float] = {
    # US customary
    "tsp": 4.92892,
    "tsps": 4.92892,
    "teaspoon": 4.92892,
    "teaspoons": 4.92892,
    "tbsp": 14.7868,
    "tbsps": 14.7868,
    "tbs": 14.7868,
    "tbl": 14.7868,
    "tablespoon": 14.7868,
    "tablespoons": 14.7868,
    "fl oz": 29.5735,
    "fluid ounce": 29.5735,
    "fluid ounces": 29.5735,
    "cup": 236.588,
    "cups": 236.588,
    "pint": 473.176,
    "pints": 473.176,
    "pt": 473.176,
    "pts": 473.176,
    "quart": 946.353,
    "quarts": 946.353,
    "qt": 946.353,
    "qts": 946.353,
    "gallon": 3785.41,
    "gallons": 3785.41,
    "gal": 3785.41,
    "gals": 3785.41,
    # Metric
    "ml": 1.0,
    "milliliter": 1.0,
    "milliliters": 1.0,
    "millilitre": 1.0,
    "millilitres": 1.0,
    "l": 1000.0,
    "liter": 1000.0,
    "liters": 1000.0,
    "litre": 1000.0,
    "litres": 1000.0,
}

# Weight conversions (base unit: g)
WEIGHT_UNITS: dict[str, float] = {
    # Imperial
    "oz": 28.35,
    "ounce": 28.35,
    "ounces": 28.35,
    "lb": 453.59,
    "lbs": 453.59,
    "pound": 453.59,
    "pounds": 453.59,
    # Metric
    "g": 1.0,
    "gram": 1.0,
    "grams": 1.0,
    "gramme": 1.0,
    "grammes": 1.0,
    "kg": 1000.0,
    "kilo": 1000.0,
    "kilos": 1000.0,
    "kilogram": 1000.0,
    "kilograms": 1000.0,
}

# Discrete-item units; summed by plain arithmetic
COUNT_UNITS: frozenset[str] = frozenset(
    {
        "piece",
        "pieces",
        "clove",
        "cloves",
        "sprig",
        "sprigs",
        "leaf",
        "leaves",
        "head",
        "heads",
        "bunch",
        "bunches",
        "small",
        "medium",
        "large",
        "serving",
        "servings",
    }
)

# Qualitative markers meaning "no specific quantity"
ZERO_UNITS: frozenset[str] = frozenset({"", "to taste", "for serving"})

TO_TASTE = "To Taste"
DEFAULT_VOLUME_UNIT = "tbsp"
DEFAULT_WEIGHT_UNIT = "g"

_NUMBER = r"(\d+(?:\.\d+)?)"
# "to 15", "to 15 cloves"
RANGE_TO_PATTERN = re.compile(rf"^to\s+{_NUMBER}(?:\s+([a-z]+))?$")
# "12-15", "12 – 15 cloves"
RANGE_SPAN_PATTERN = re.compile(rf"^{_NUMBER}\s*[-–]\s*{_NUMBER}(?:\s+([a-z]+))?$")

POINT_EPSILON = 1e-6


class UnitKind(str, Enum):
    """Dimension a unit string belongs to."""

    ZERO = "zero"
    COUNT = "count"
    VOLUME = "volume"
    WEIGHT = "weight"
    RANGE = "range"
    UNKNOWN = "unknown"


# =============================================================================
# Classification
# =============================================================================


def normalize_unit(unit: str | None) -> str:
    """Lower-case a unit and collapse internal whitespace."""
    if not unit:
        return ""
    return " ".join(unit.lower().split())


def unit_key(unit: str | None) -> str:
    """Vocabulary lookup key: "Tbsp." and "tbsp" are the same unit."""
    return normalize_unit(unit).rstrip(".")


def units_equal(unit1: str | None, unit2: str | None) -> bool:
    """Check whether two unit strings are identical ignoring case and whitespace."""
    return normalize_unit(unit1) == normalize_unit(unit2)


def classify_unit(unit: str | None) -> UnitKind:
    """
    Categorize a free-text unit string.

    Examples:
        "" / "To Taste" -> ZERO
        "cloves" / "large" -> COUNT
        "to 15 cloves" / "12-15" -> RANGE
        "Tbsp" -> VOLUME
        "lbs" -> WEIGHT
        "can" -> UNKNOWN
    """
    key = unit_key(unit)

    if key in ZERO_UNITS:
        return UnitKind.ZERO
    if RANGE_TO_PATTERN.match(key) or RANGE_SPAN_PATTERN.match(key):
        return UnitKind.RANGE
    if key in COUNT_UNITS:
        return UnitKind.COUNT
    if key in VOLUME_UNITS:
        return UnitKind.VOLUME
    if key in WEIGHT_UNITS:
        return UnitKind.WEIGHT
    return UnitKind.UNKNOWN


def is_zero_like(amount: float, unit: str | None) -> bool:
    """
    Check whether an (amount, unit) pair is unmeasured.

    The 0 amount sentinel and the qualitative labels ("To Taste", "For Serving")
    are unmeasured. An empty unit with a positive amount is a bare count
    ("2" eggs), not an unmeasured entry.
    """
    if amount <= 0:
        return True
    return classify_unit(unit) == UnitKind.ZERO and bool(unit_key(unit))


def effective_kind(amount: float, unit: str | None) -> UnitKind:
    """Classify a unit in the context of its amount; a bare positive number is a count."""
    kind = classify_unit(unit)
    if kind == UnitKind.ZERO and amount > 0 and not unit_key(unit):
        return UnitKind.COUNT
    return kind


# =============================================================================
# Conversion
# =============================================================================


def volume_to_milliliters(amount: float, unit: str | None) -> float | None:
    """Convert a volume to milliliters; None when the unit is not a volume."""
    factor = VOLUME_UNITS.get(unit_key(unit))
    if factor is None:
        return None
    return amount * factor


def milliliters_to_volume(ml: float, preferred_unit: str | None) -> tuple[float, str]:
    """Express milliliters in the preferred unit, falling back to tablespoons."""
    factor = VOLUME_UNITS.get(unit_key(preferred_unit))
    if factor is None:
        logger.debug(f"Unknown volume unit {preferred_unit!r}, using {DEFAULT_VOLUME_UNIT}")
        return ml / VOLUME_UNITS[DEFAULT_VOLUME_UNIT], DEFAULT_VOLUME_UNIT
    return ml / factor, (preferred_unit or "").strip()


def weight_to_grams(amount: float, unit: str | None) -> float | None:
    """Convert a weight to grams; None when the unit is not a weight."""
    factor = WEIGHT_UNITS.get(unit_key(unit))
    if factor is None:
        return None
    return amount * factor


def grams_to_weight(grams: float, preferred_unit: str | None) -> tuple[float, str]:
    """Express grams in the preferred unit, falling back to grams."""
    factor = WEIGHT_UNITS.get(unit_key(preferred_unit))
    if factor is None:
        logger.debug(f"Unknown weight unit {preferred_unit!r}, using {DEFAULT_WEIGHT_UNIT}")
        return grams, DEFAULT_WEIGHT_UNIT
    return grams / factor, (preferred_unit or "").strip()


# =============================================================================
# Ranges
# =============================================================================


@dataclass
class QuantityRange:
    """An amount expressed as a [low, high] interval of some base unit."""

    low: float
    high: float
    base: str = ""

    @property
    def is_point(self) -> bool:
        return abs(self.high - self.low) < POINT_EPSILON

    def __add__(self, other: "QuantityRange") -> "QuantityRange":
        return QuantityRange(
            low=self.low + other.low,
            high=self.high + other.high,
            base=self.base or other.base,
        )


def format_number(value: float) -> str:
    """Render a number without a trailing '.0' ("25", "2.5")."""
    if abs(value - round(value)) < POINT_EPSILON:
        return str(int(round(value)))
    return f"{value:.2f}".rstrip("0").rstrip(".")


def _range_base(word: str | None) -> str:
    if not word or classify_unit(word) == UnitKind.ZERO:
        return ""
    return word


def parse_quantity_range(amount: float, unit: str | None) -> QuantityRange:
    """
    Parse an (amount, unit) pair into a QuantityRange.

    - A plain amount gives low == high == amount, base = unit.
    - "to 15 cloves" with amount 10 gives 10..15 cloves.
    - "12-15" gives 12..15 regardless of amount.

    Malformed range text never raises; it falls back to a point amount.
    """
    key = unit_key(unit)

    match = RANGE_TO_PATTERN.match(key)
    if match:
        upper = float(match.group(1))
        return QuantityRange(min(amount, upper), max(amount, upper), _range_base(match.group(2)))

    match = RANGE_SPAN_PATTERN.match(key)
    if match:
        first, second = float(match.group(1)), float(match.group(2))
        return QuantityRange(min(first, second), max(first, second), _range_base(match.group(3)))

    return QuantityRange(amount, amount, (unit or "").strip())


def range_to_amount_and_unit(quantity: QuantityRange) -> tuple[float, str]:
    """Collapse a range to a point (amount, base) or to (low, "to <high> [base]")."""
    if quantity.is_point:
        return quantity.low, quantity.base
    unit = f"to {format_number(quantity.high)}"
    if quantity.base:
        unit = f"{unit} {quantity.base}"
    return quantity.low, unit
