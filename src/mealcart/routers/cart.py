"""API routes for filling a retailer cart."""

import time

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from mealcart.cart import (
    CartFiller,
    CartFillerError,
    get_available_cart_fillers,
    get_cart_filler_for_retailer,
)
from mealcart.config import get_settings
from mealcart.database import get_db
from mealcart.errors import ApiError
from mealcart.logging_config import get_logger
from mealcart.models import ShoppingList
from mealcart.plan.shopping_list import to_cart_items
from mealcart.schemas import (
    MAX_CART_ITEMS,
    AggregatedIngredient,
    CartItem,
    CartItemsRequest,
    CartResult,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/cart", tags=["cart"])


# =============================================================================
# Request/Response Schemas
# =============================================================================


class CartTiming(BaseModel):
    """Request timings in milliseconds."""

    total: float
    cart: float


class CartFillResponse(CartResult):
    """Outcome of a cart fill with timings."""

    timing: CartTiming


# =============================================================================
# Dependencies
# =============================================================================


def get_cart_filler() -> CartFiller:
    """Get the cart filler for the configured retailer."""
    retailer = get_settings().cart_retailer
    filler = get_cart_filler_for_retailer(retailer)

    if filler is None:
        raise ApiError.external_api(
            f"No cart filler available for '{retailer}'",
            {"available": get_available_cart_fillers()},
        )

    return filler


async def fill_cart(filler: CartFiller, items: list[CartItem], started: float) -> CartFillResponse:
    """Run a cart fill and time it; the filler is always closed afterwards."""
    cart_started = time.perf_counter()
    logger.info(f"Filling {filler.name} cart with {len(items)} items")

    try:
        async with filler:
            result = await filler.add_items_to_cart(items)
    except CartFillerError as e:
        logger.error(f"{filler.name} cart fill failed: {e}")
        raise ApiError.external_api(
            f"Could not fill the {filler.name} cart", {"reason": str(e)}
        ) from e

    cart_ms = (time.perf_counter() - cart_started) * 1000
    logger.info(
        f"Cart fill done: added {result.added_count}, failed {len(result.failed_items)}, "
        f"{cart_ms:.1f}ms"
    )

    return CartFillResponse(
        **result.model_dump(),
        timing=CartTiming(total=(time.perf_counter() - started) * 1000, cart=cart_ms),
    )


# =============================================================================
# Endpoints
# =============================================================================


@router.post("", response_model=CartFillResponse)
async def add_to_cart(
    request: CartItemsRequest,
    filler: CartFiller = Depends(get_cart_filler),
) -> CartFillResponse:
    """
    Add items to the retailer cart.

    Items are added in order; those the retailer cannot match are listed in
    failedItems instead of failing the request.
    """
    started = time.perf_counter()
    return await fill_cart(filler, request.ingredients, started)


@router.post("/shopping-lists/{shopping_list_id}", response_model=CartFillResponse)
async def add_shopping_list_to_cart(
    shopping_list_id: str,
    db: AsyncSession = Depends(get_db),
    filler: CartFiller = Depends(get_cart_filler),
) -> CartFillResponse:
    """Add every item of a stored shopping list to the retailer cart."""
    started = time.perf_counter()
    record = await db.get(ShoppingList, shopping_list_id)

    if not record:
        raise ApiError.not_found("Shopping list not found", {"id": shopping_list_id})

    shopping_list = [AggregatedIngredient.model_validate(item) for item in record.ingredients]
    items = to_cart_items(shopping_list)

    if not items:
        raise ApiError.bad_request(
            "Shopping list has nothing to add to the cart", {"id": shopping_list_id}
        )

    if len(items) > MAX_CART_ITEMS:
        raise ApiError.bad_request(
            f"Shopping list has {len(items)} items, the cart takes at most {MAX_CART_ITEMS}",
            {"id": shopping_list_id},
        )

    return await fill_cart(filler, items, started)
