"""Weekly meal plan to shopping list aggregation service."""

__version__ = "0.1.0"
