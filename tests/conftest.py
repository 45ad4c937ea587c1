"""Pytest configuration and shared fixtures."""

import asyncio

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from factories import make_day
from mealcart.database import Base, get_db
from mealcart.main import app
from mealcart.schemas import MealPlanDay

# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (require external services)"
    )
    config.addinivalue_line("markers", "slow: marks tests as slow running")


# =============================================================================
# Meal Plan Fixtures
# =============================================================================


@pytest.fixture
def empty_week() -> list[MealPlanDay]:
    """Seven days of recipes without any ingredients."""
    return [make_day(offset) for offset in range(7)]


@pytest.fixture
def sample_meal_plan_payload() -> dict:
    """A two-day meal plan as the API receives it."""

    def recipe(recipe_id: int, title: str, ingredients: list[dict]) -> dict:
        return {
            "id": recipe_id,
            "title": title,
            "image": "",
            "readyInMinutes": 20,
            "servings": 4,
            "sourceUrl": "",
            "summary": "",
            "extendedIngredients": ingredients,
        }

    garlic = {
        "id": 11215,
        "name": "garlic",
        "original": "3 cloves garlic",
        "amount": 3,
        "unit": "cloves",
        "aisle": "Produce",
    }
    milk = {
        "id": 1077,
        "name": "milk",
        "original": "1 cup milk",
        "amount": 1,
        "unit": "cup",
        "aisle": "Milk, Eggs, Other Dairy",
    }
    oats = {
        "id": 8120,
        "name": "rolled oats",
        "original": "1/2 cup rolled oats",
        "amount": 0.5,
        "unit": "cups",
        "aisle": "Cereal",
    }

    return {
        "mealPlanId": "plan-123",
        "mealPlan": [
            {
                "date": "2024-01-01",
                "breakfast": recipe(1, "Overnight Oats", [oats, milk]),
                "lunch": recipe(2, "Garlic Soup", [garlic]),
                "dinner": recipe(3, "Plain Rice", []),
            },
            {
                "date": "2024-01-02",
                "breakfast": recipe(4, "Porridge", [oats, milk]),
                "lunch": recipe(5, "Garlic Bread", [garlic]),
                "dinner": recipe(6, "Pasta Aglio", [garlic]),
            },
        ],
    }


# =============================================================================
# API Fixtures
# =============================================================================


@pytest.fixture
def client(tmp_path):
    """Test client backed by a throw-away SQLite database."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'mealcart_test.db'}",
        poolclass=NullPool,
    )

    async def create_tables() -> None:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(create_tables())
    session_factory = async_sessionmaker(engine, expire_on_commit=False)

    async def get_test_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = get_test_db
    yield TestClient(app)

    app.dependency_overrides.clear()
    asyncio.run(engine.dispose())
