"""Common data schemas shared by the aggregator, the cart filler and the API.

Field names are snake_case in Python and camelCase on the wire, so every model
accepts both spellings on input.
"""

from pydantic import BaseModel, ConfigDict, Field

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
MAX_CART_ITEMS = 100


class Ingredient(BaseModel):
    """A single ingredient line of a recipe."""

    id: int | None = None
    name: str = Field(min_length=1)
    original: str = Field(min_length=1, description="Quantity phrase as written")
    amount: float = Field(ge=0, allow_inf_nan=False)
    unit: str = ""
    aisle: str = ""


class Recipe(BaseModel):
    """A recipe with its ingredient list."""

    model_config = ConfigDict(populate_by_name=True)

    id: int | None = None
    title: str = Field(min_length=1)
    image: str | None = None
    ready_in_minutes: int | None = Field(None, alias="readyInMinutes", gt=0)
    servings: int | None = Field(None, gt=0)
    source_url: str | None = Field(None, alias="sourceUrl")
    summary: str = ""
    extended_ingredients: list[Ingredient] | None = Field(
        default_factory=list, alias="extendedIngredients"
    )


class MealPlanDay(BaseModel):
    """One day of the plan: breakfast, lunch and dinner."""

    date: str = Field(pattern=DATE_PATTERN, description="ISO date (YYYY-MM-DD)")
    breakfast: Recipe
    lunch: Recipe
    dinner: Recipe

    @property
    def meals(self) -> tuple[Recipe, Recipe, Recipe]:
        """Recipes in serving order."""
        return (self.breakfast, self.lunch, self.dinner)


WeeklyPlan = list[MealPlanDay]


class AggregatedIngredient(BaseModel):
    """All ingredient lines of a plan sharing one normalized name."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    amount: float
    unit: str
    aisle: str = "Other"
    original_strings: list[str] = Field(alias="originalStrings", min_length=1)


class CartItem(BaseModel):
    """Item handed to a cart filler."""

    name: str = Field(min_length=1, max_length=200)
    amount: float = Field(gt=0, allow_inf_nan=False)
    unit: str = Field("", max_length=50)


class CartResult(BaseModel):
    """Outcome of a cart fill run."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    cart_url: str = Field(alias="cartUrl")
    added_count: int = Field(alias="addedCount")
    failed_items: list[str] = Field(default_factory=list, alias="failedItems")


class CartItemsRequest(BaseModel):
    """Batch of items for one cart fill run."""

    ingredients: list[CartItem] = Field(min_length=1, max_length=MAX_CART_ITEMS)
