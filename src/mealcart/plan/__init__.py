"""Shopping list planning from weekly meal plans."""

from mealcart.plan.shopping_list import (
    aggregate_ingredients,
    finalize_ingredient,
    iter_plan_ingredients,
    merge_ingredients,
    to_cart_items,
)

__all__ = [
    "aggregate_ingredients",
    "finalize_ingredient",
    "iter_plan_ingredients",
    "merge_ingredients",
    "to_cart_items",
]
