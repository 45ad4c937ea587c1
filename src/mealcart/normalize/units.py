"""Unit normalization and conversion utilities."""

import math
from dataclasses import dataclass

# =============================================================================
# Unit Conversion Tables
# =============================================================================

# Spellings and plurals mapped to canonical abbreviations
UNIT_ALIASES: dict[str, str] = {
    "tablespoon": "tbsp",
    "tablespoons": "tbsp",
    "teaspoon": "tsp",
    "teaspoons": "tsp",
    "cup": "cup",
    "cups": "cup",
    "ounce": "oz",
    "ounces": "oz",
    "pound": "lb",
    "pounds": "lb",
    "gram": "g",
    "grams": "g",
    "kilogram": "kg",
    "kilograms": "kg",
    "milliliter": "ml",
    "milliliters": "ml",
    "liter": "l",
    "liters": "l",
    "clove": "clove",
    "cloves": "clove",
    "slice": "slice",
    "slices": "slice",
}

VOLUME_BASE_UNIT = "cup"
WEIGHT_BASE_UNIT = "g"

# Volume conversions (base unit: cup)
VOLUME_UNITS: dict[str, float] = {
    "tbsp": 1 / 16,
    "tsp": 1 / 48,
    "cup": 1.0,
    "ml": 1 / 240,
    "l": 4.227,
}

# Weight conversions (base unit: g)
WEIGHT_UNITS: dict[str, float] = {
    "oz": 28.35,
    "lb": 453.59,
    "g": 1.0,
    "kg": 1000.0,
}

# Units rounded up to whole numbers
COUNT_UNITS: frozenset[str] = frozenset({"clove", "slice", ""})

# Re-expansion thresholds, in base units
CUPS_PER_QUART = 4.0
GRAMS_PER_POUND = 453.59

# Preparation words that do not change what has to be bought
PREPARATION_DESCRIPTORS: frozenset[str] = frozenset(
    {"fresh", "dried", "chopped", "minced", "sliced", "diced"}
)


@dataclass
class BaseQuantity:
    """An amount paired with the unit it is expressed in."""

    amount: float
    unit: str


# =============================================================================
# Names
# =============================================================================


def normalize_ingredient_name(name: str) -> str:
    """
    Normalize an ingredient name into a deduplication key.

    - Lowercase, trim and collapse whitespace
    - Strip leading and trailing preparation descriptors, each at most once per side

    The last remaining word is never stripped, so "fresh" stays "fresh".

    Examples:
        "Fresh Chopped Onion" -> "onion"
        "diced tomatoes" -> "tomatoes"
        "garlic minced" -> "garlic"
    """
    if not name:
        return ""

    words = name.lower().split()

    stripped: set[str] = set()
    while len(words) > 1 and words[0] in PREPARATION_DESCRIPTORS and words[0] not in stripped:
        stripped.add(words.pop(0))

    stripped = set()
    while len(words) > 1 and words[-1] in PREPARATION_DESCRIPTORS and words[-1] not in stripped:
        stripped.add(words.pop())

    return " ".join(words)


# =============================================================================
# Units
# =============================================================================


def normalize_unit(unit: str | None) -> str:
    """
    Map a unit spelling to its canonical abbreviation.

    Unknown units come back lower-cased and trimmed.

    Examples:
        "Tablespoons" -> "tbsp"
        "ounces" -> "oz"
        "pinch" -> "pinch"
    """
    normalized = (unit or "").lower().strip()
    return UNIT_ALIASES.get(normalized, normalized)


def convert_to_base_unit(amount: float, unit: str | None) -> BaseQuantity:
    """
    Convert an amount to the base unit of its family.

    Volumes become cups and weights become grams. Units outside both families
    ("clove", "slice", "pinch", "") keep their amount and normalized unit.

    Examples:
        (2, "tbsp") -> 0.125 cup
        (1, "lb") -> 453.59 g
        (3, "cloves") -> 3 clove
    """
    normalized_unit = normalize_unit(unit)

    if normalized_unit in VOLUME_UNITS:
        return BaseQuantity(amount * VOLUME_UNITS[normalized_unit], VOLUME_BASE_UNIT)

    if normalized_unit in WEIGHT_UNITS:
        return BaseQuantity(amount * WEIGHT_UNITS[normalized_unit], WEIGHT_BASE_UNIT)

    return BaseQuantity(amount, normalized_unit)


def can_aggregate(unit1: str | None, unit2: str | None) -> bool:
    """Check whether two units reduce to the same base unit."""
    return convert_to_base_unit(1.0, unit1).unit == convert_to_base_unit(1.0, unit2).unit


def expand_unit(amount: float, unit: str) -> BaseQuantity:
    """
    Re-express a large base-unit amount in a coarser shopping unit.

    - cup -> quarts from 4 cups upwards
    - g -> lb from 453.59 g upwards

    Only one step is taken; other units pass through.
    """
    if unit == VOLUME_BASE_UNIT and amount >= CUPS_PER_QUART:
        return BaseQuantity(amount / CUPS_PER_QUART, "quarts")

    if unit == WEIGHT_BASE_UNIT and amount >= GRAMS_PER_POUND:
        return BaseQuantity(amount / GRAMS_PER_POUND, "lb")

    return BaseQuantity(amount, unit)


def round_amount(amount: float, unit: str) -> float:
    """
    Round an amount up to a practical shopping quantity.

    Always rounds up so a shopper never buys too little:
    - cup, lb: next 1/4
    - g: next 10
    - clove, slice, no unit: next whole number
    - anything else: next 0.01

    Examples:
        (0.85, "cup") -> 1.0
        (127, "g") -> 130
        (2.3, "clove") -> 3
    """
    if unit in (VOLUME_BASE_UNIT, "lb"):
        return math.ceil(amount * 4) / 4
    if unit == WEIGHT_BASE_UNIT:
        return math.ceil(amount / 10) * 10
    if unit in COUNT_UNITS:
        return math.ceil(amount)

    return math.ceil(amount * 100) / 100
