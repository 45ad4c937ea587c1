"""API routers for the mealcart application."""

from mealcart.routers.cart import router as cart_router
from mealcart.routers.shopping_lists import router as shopping_lists_router

__all__ = [
    "cart_router",
    "shopping_lists_router",
]
