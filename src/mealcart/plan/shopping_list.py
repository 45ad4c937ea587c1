"""Shopping list generation from weekly meal plans."""

from collections.abc import Iterable, Iterator

from pydantic import ValidationError

from mealcart.logging_config import get_logger
from mealcart.normalize.units import (
    can_aggregate,
    convert_to_base_unit,
    expand_unit,
    normalize_ingredient_name,
    round_amount,
)
from mealcart.schemas import (
    AggregatedIngredient,
    CartItem,
    Ingredient,
    MealPlanDay,
)

logger = get_logger(__name__)

DEFAULT_AISLE = "Other"


def iter_plan_ingredients(meal_plan: Iterable[MealPlanDay]) -> Iterator[Ingredient]:
    """
    Yield every ingredient line of a plan in shopping order.

    Days in plan order, then breakfast, lunch and dinner, then ingredients as
    listed. A recipe without an ingredient list contributes nothing.
    """
    for day in meal_plan:
        for recipe in day.meals:
            yield from recipe.extended_ingredients or []


def merge_ingredients(meal_plan: Iterable[MealPlanDay]) -> dict[str, AggregatedIngredient]:
    """
    Merge ingredient lines that share a normalized name.

    Amounts are summed in base units (cup or g) and left unrounded. When two
    lines of one ingredient come from different unit families the raw amounts
    are still added and the first unit is kept.

    Returns:
        Dict mapping normalized names to running aggregates, in encounter order.
    """
    merged: dict[str, AggregatedIngredient] = {}

    for ingredient in iter_plan_ingredients(meal_plan):
        key = normalize_ingredient_name(ingredient.name)
        incoming = convert_to_base_unit(ingredient.amount, ingredient.unit)

        existing = merged.get(key)
        if existing is None:
            merged[key] = AggregatedIngredient(
                name=ingredient.name,
                amount=incoming.amount,
                unit=incoming.unit,
                aisle=ingredient.aisle or DEFAULT_AISLE,
                original_strings=[ingredient.original],
            )
            continue

        current = convert_to_base_unit(existing.amount, existing.unit)
        if can_aggregate(existing.unit, ingredient.unit):
            existing.amount = current.amount + incoming.amount
            existing.unit = current.unit
        else:
            logger.warning(
                f"Unit mismatch for '{key}': {current.unit or '(none)'} vs "
                f"{incoming.unit or '(none)'}, adding raw amounts"
            )
            existing.amount = current.amount + incoming.amount

        existing.original_strings.append(ingredient.original)

    return merged


def finalize_ingredient(ingredient: AggregatedIngredient) -> AggregatedIngredient:
    """Re-expand large amounts into coarser units and round up once."""
    expanded = expand_unit(ingredient.amount, ingredient.unit)
    return ingredient.model_copy(
        update={
            "amount": round_amount(expanded.amount, expanded.unit),
            "unit": expanded.unit,
        }
    )


def aggregate_ingredients(meal_plan: Iterable[MealPlanDay]) -> list[AggregatedIngredient]:
    """
    Aggregate a weekly meal plan into a shopping list.

    1. Normalize names (e.g. "fresh onion" -> "onion") to find duplicates
    2. Convert measurements to base units (cups for volume, grams for weight)
    3. Sum duplicates
    4. Convert large quantities to coarser units (8 cups -> 2 quarts)
    5. Round up to practical shopping amounts
    6. Sort by grocery aisle

    Never raises on empty plans, missing ingredient lists or unknown units.

    Args:
        meal_plan: Days of the plan, each with breakfast, lunch and dinner.

    Returns:
        One aggregate per distinct ingredient, stably sorted by aisle.
    """
    merged = merge_ingredients(meal_plan)
    shopping_list = [finalize_ingredient(ingredient) for ingredient in merged.values()]
    shopping_list.sort(key=lambda ingredient: ingredient.aisle)

    logger.info(f"Aggregated {len(shopping_list)} shopping list items")
    return shopping_list


def to_cart_items(shopping_list: Iterable[AggregatedIngredient]) -> list[CartItem]:
    """
    Reduce shopping list items to what a cart filler needs.

    Items with a zero amount are left out since there is nothing to buy, as are
    items a retailer search cannot take (name over 200 or unit over 50
    characters).
    """
    cart_items: list[CartItem] = []
    for item in shopping_list:
        if item.amount <= 0:
            logger.debug(f"Skipping '{item.name}': nothing to buy")
            continue
        try:
            cart_items.append(CartItem(name=item.name, amount=item.amount, unit=item.unit))
        except ValidationError as e:
            logger.warning(
                f"Skipping '{item.name[:50]}' for the cart: {e.error_count()} invalid fields"
            )
    return cart_items
