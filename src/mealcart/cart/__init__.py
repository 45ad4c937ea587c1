"""Interfaces for filling a retailer's online cart from a shopping list.

Retailer implementations subclass CartFiller and are listed in
CART_FILLER_REGISTRY under their retailer key.
"""

from mealcart.cart.base import CartFiller, CartFillerError, CartFillerTimeout

__all__ = [
    "CartFiller",
    "CartFillerError",
    "CartFillerTimeout",
    "CART_FILLER_REGISTRY",
    "get_cart_filler_for_retailer",
    "get_available_cart_fillers",
]

# Registry of available cart fillers by retailer
CART_FILLER_REGISTRY: dict[str, type[CartFiller]] = {}


def get_cart_filler_for_retailer(retailer: str) -> CartFiller | None:
    """
    Get a cart filler for a retailer.

    Args:
        retailer: The retailer key, e.g. "walmart".

    Returns:
        A cart filler instance or None if no cart filler is available.
    """
    filler_class = CART_FILLER_REGISTRY.get(retailer.lower())
    if filler_class:
        return filler_class()
    return None


def get_available_cart_fillers() -> list[str]:
    """Get list of retailers with a cart filler."""
    return sorted(CART_FILLER_REGISTRY)
