"""Normalize ingredient names and units into comparable forms."""

from mealcart.normalize.units import (
    BaseQuantity,
    can_aggregate,
    convert_to_base_unit,
    expand_unit,
    normalize_ingredient_name,
    normalize_unit,
    round_amount,
)

__all__ = [
    "BaseQuantity",
    "can_aggregate",
    "convert_to_base_unit",
    "expand_unit",
    "normalize_ingredient_name",
    "normalize_unit",
    "round_amount",
]
