"""SQLAlchemy database models."""

import uuid
from datetime import datetime

from sqlalchemy import JSON, DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from mealcart.database import Base


class ShoppingList(Base):
    """Aggregated shopping list generated from a meal plan."""

    __tablename__ = "shopping_lists"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    meal_plan_id: Mapped[str] = mapped_column(String, nullable=False)
    ingredients: Mapped[list] = mapped_column(JSON, default=list)  # AggregatedIngredient dicts
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    __table_args__ = (Index("idx_shopping_lists_meal_plan_id", "meal_plan_id"),)
