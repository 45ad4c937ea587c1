"""API routes for shopping list generation and retrieval."""

import time
import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from mealcart.database import get_db
from mealcart.errors import ApiError
from mealcart.logging_config import LoggingContext, get_logger
from mealcart.models import ShoppingList
from mealcart.plan.shopping_list import aggregate_ingredients
from mealcart.schemas import AggregatedIngredient, MealPlanDay

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/shopping-lists", tags=["shopping-lists"])


# =============================================================================
# Request/Response Schemas
# =============================================================================


class ShoppingListCreateRequest(BaseModel):
    """Request to aggregate a meal plan into a shopping list."""

    model_config = ConfigDict(populate_by_name=True)

    meal_plan_id: str = Field(alias="mealPlanId", min_length=1)
    meal_plan: list[MealPlanDay] = Field(alias="mealPlan", min_length=1, max_length=7)


class Timing(BaseModel):
    """Request timings in milliseconds."""

    total: float
    aggregation: float


class ShoppingListCreateResponse(BaseModel):
    """Freshly generated shopping list."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    shopping_list_id: str = Field(alias="shoppingListId")
    shopping_list: list[AggregatedIngredient] = Field(alias="shoppingList")
    timing: Timing


class ShoppingListResponse(BaseModel):
    """Stored shopping list."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    shopping_list: list[AggregatedIngredient] = Field(alias="shoppingList")
    meal_plan_id: str = Field(alias="mealPlanId")
    created_at: datetime = Field(alias="createdAt")


# =============================================================================
# Endpoints
# =============================================================================


@router.post("", response_model=ShoppingListCreateResponse, status_code=status.HTTP_200_OK)
async def create_shopping_list(
    request: ShoppingListCreateRequest,
    db: AsyncSession = Depends(get_db),
) -> ShoppingListCreateResponse:
    """
    Aggregate every ingredient of a meal plan into one shopping list and store it.

    Duplicate ingredients are merged, units converted and amounts rounded up;
    the list comes back sorted by aisle.
    """
    started = time.perf_counter()

    with LoggingContext(meal_plan_id=request.meal_plan_id):
        logger.info(f"Processing {len(request.meal_plan)} days of meals")

        aggregation_started = time.perf_counter()
        shopping_list = aggregate_ingredients(request.meal_plan)
        aggregation_ms = (time.perf_counter() - aggregation_started) * 1000

        record = ShoppingList(
            id=str(uuid.uuid4()),
            meal_plan_id=request.meal_plan_id,
            ingredients=[item.model_dump(by_alias=True) for item in shopping_list],
        )
        db.add(record)
        await db.commit()

        total_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"Saved shopping list {record.id}: {len(shopping_list)} items, "
            f"aggregation {aggregation_ms:.1f}ms, total {total_ms:.1f}ms"
        )

    return ShoppingListCreateResponse(
        shopping_list_id=record.id,
        shopping_list=shopping_list,
        timing=Timing(total=total_ms, aggregation=aggregation_ms),
    )


@router.get("/{shopping_list_id}", response_model=ShoppingListResponse)
async def get_shopping_list(
    shopping_list_id: str,
    db: AsyncSession = Depends(get_db),
) -> ShoppingListResponse:
    """Get a previously generated shopping list."""
    record = await db.get(ShoppingList, shopping_list_id)

    if not record:
        raise ApiError.not_found("Shopping list not found", {"id": shopping_list_id})

    return ShoppingListResponse(
        shopping_list=[AggregatedIngredient.model_validate(item) for item in record.ingredients],
        meal_plan_id=record.meal_plan_id,
        created_at=record.created_at,
    )
