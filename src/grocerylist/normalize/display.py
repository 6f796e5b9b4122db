"""Human-readable rendering of list entries."""

from grocerylist.normalize.units import (
    UnitKind,
    classify_unit,
    format_number,
    is_zero_like,
    parse_quantity_range,
)

# Fraction glyphs keyed by their decimal value
FRACTION_GLYPHS: dict[float, str] = {
    0.125: "⅛",
    0.25: "¼",
    0.33: "⅓",
    0.375: "⅜",
    0.5: "½",
    0.625: "⅝",
    0.67: "⅔",
    0.75: "¾",
    0.875: "⅞",
}

# Words that describe the item rather than measure it; only the number is shown
NON_MEASURABLE_WORDS = {
    "piece",
    "pieces",
    "count",
    "individual",
    "item",
    "items",
    "stalk",
    "stalks",
    "leaf",
    "leaves",
    "medium",
    "large",
    "small",
    "extra large",
    "xl",
    "raw",
    "thin",
    "thick",
    "fresh",
    "frozen",
    "dried",
    "ripe",
    "unripe",
    "organic",
    "whole",
    "sliced",
    "diced",
    "minced",
    "chopped",
    "grated",
    "peeled",
    "seeded",
}

SPELLED_OUT_UNITS = {
    "tbsp": "tablespoons",
    "tbs": "tablespoons",
    "tsp": "teaspoons",
    "oz": "ounces",
    "lb": "pounds",
    "lbs": "pounds",
    "c": "cups",
    "pt": "pints",
    "qt": "quarts",
    "gal": "gallons",
    "ml": "milliliters",
    "l": "liters",
    "g": "grams",
    "kg": "kilograms",
}

SINGULAR_UNITS = {
    "tablespoons": "tablespoon",
    "teaspoons": "teaspoon",
    "ounces": "ounce",
    "pounds": "pound",
    "cups": "cup",
    "pints": "pint",
    "quarts": "quart",
    "gallons": "gallon",
    "milliliters": "milliliter",
    "liters": "liter",
    "grams": "gram",
    "kilograms": "kilogram",
    "slices": "slice",
    "cans": "can",
    "jars": "jar",
    "bottles": "bottle",
    "packages": "package",
    "bags": "bag",
    "bunches": "bunch",
    "heads": "head",
    "cloves": "clove",
    "sprigs": "sprig",
    "servings": "serving",
}
PLURAL_UNITS = {singular: plural for plural, singular in SINGULAR_UNITS.items()}

# Countable produce shown in the plural when buying more than one
PLURALIZABLE_NAMES = {
    "shallot",
    "tomato",
    "avocado",
    "onion",
    "pepper",
}
IRREGULAR_PLURALS = {"tomato": "tomatoes", "potato": "potatoes"}

# Remainders this close to a whole number are shown as the whole number
WHOLE_TOLERANCE = 0.0625


def format_amount(amount: float) -> str:
    """Render an amount with a vulgar fraction where one is close enough."""
    whole = int(amount)
    remainder = amount - whole

    if remainder < WHOLE_TOLERANCE:
        if whole == 0:
            return format_number(amount)
        remainder = 0.0
    elif remainder > 1 - WHOLE_TOLERANCE:
        whole += 1
        remainder = 0.0

    fraction = ""
    if remainder > 0:
        closest = min(FRACTION_GLYPHS, key=lambda value: abs(value - remainder))
        if abs(closest - remainder) < 0.1:
            fraction = FRACTION_GLYPHS[closest]
        else:
            return format_number(round(amount, 1))

    if whole == 0 and fraction:
        return fraction
    return f"{whole}{fraction}"


def spell_out_unit(unit: str, amount: float) -> str:
    """Expand an abbreviation and pick the singular or plural form."""
    key = " ".join(unit.lower().split())
    if key in NON_MEASURABLE_WORDS:
        return ""

    spelled = SPELLED_OUT_UNITS.get(key, key)
    if amount <= 1:
        return SINGULAR_UNITS.get(spelled, spelled)
    return PLURAL_UNITS.get(spelled, spelled)


def format_amount_and_unit(amount: float, unit: str) -> str:
    """
    Render the quantity column of a list entry.

    Examples:
        (0, "To Taste") -> "To Taste"
        (1.5, "tbsp") -> "1½ tablespoons"
        (3, "pieces") -> "3"
        (2, "") -> "2"
        (15, "to 25 cloves") -> "15 to 25 cloves"
    """
    kind = classify_unit(unit)

    if is_zero_like(amount, unit):
        return unit.strip()

    if kind == UnitKind.RANGE:
        quantity = parse_quantity_range(amount, unit)
        text = f"{format_amount(quantity.low)} to {format_amount(quantity.high)}"
        base = spell_out_unit(quantity.base, quantity.high) if quantity.base else ""
        return f"{text} {base}" if base else text

    amount_text = format_amount(amount)
    unit_text = spell_out_unit(unit, amount)
    if not unit_text:
        return amount_text
    return f"{amount_text} {unit_text}"


def format_ingredient_name(name: str, amount: float) -> str:
    """Title-case a name, pluralizing countable produce when buying several."""
    key = name.strip().lower()
    if amount > 1 and key in PLURALIZABLE_NAMES:
        key = IRREGULAR_PLURALS.get(key, f"{key}s")
    return key.title()
