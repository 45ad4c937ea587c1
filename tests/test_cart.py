"""Tests for the cart filler base class."""

import pytest
from pydantic import ValidationError

from factories import CART_URL, FakeCartFiller, make_day, make_ingredient
from mealcart.cart import (
    CART_FILLER_REGISTRY,
    CartFillerError,
    CartFillerTimeout,
    get_available_cart_fillers,
    get_cart_filler_for_retailer,
)
from mealcart.plan.shopping_list import aggregate_ingredients, to_cart_items
from mealcart.schemas import CartItem


@pytest.fixture
def cart_items() -> list[CartItem]:
    """Three items to put in a cart."""
    return [
        CartItem(name="milk", amount=1, unit="quarts"),
        CartItem(name="garlic", amount=6, unit="clove"),
        CartItem(name="rolled oats", amount=1, unit="cup"),
    ]


class TestAddItemsToCart:
    """Tests for CartFiller.add_items_to_cart."""

    @pytest.mark.asyncio
    async def test_all_items_added(self, cart_items):
        """Test a clean run adds every item in order."""
        filler = FakeCartFiller()

        result = await filler.add_items_to_cart(cart_items)

        assert result.success is True
        assert result.cart_url == CART_URL
        assert result.added_count == 3
        assert result.failed_items == []
        assert filler.attempts == ["milk", "garlic", "rolled oats"]

    @pytest.mark.asyncio
    async def test_unmatched_item_reported(self, cart_items):
        """Test items the retailer cannot find are listed as failed."""
        filler = FakeCartFiller({"garlic": False})

        result = await filler.add_items_to_cart(cart_items)

        assert result.added_count == 2
        assert result.failed_items == ["garlic"]

    @pytest.mark.asyncio
    async def test_item_error_not_retried(self, cart_items):
        """Test non-transient errors fail the item without retrying."""
        filler = FakeCartFiller({"milk": CartFillerError("out of stock", item_name="milk")})

        result = await filler.add_items_to_cart(cart_items)

        assert result.failed_items == ["milk"]
        assert filler.attempts.count("milk") == 1
        assert result.added_count == 2

    @pytest.mark.asyncio
    async def test_timeout_retried(self, cart_items):
        """Test a timeout is retried and can still succeed."""
        filler = FakeCartFiller({"milk": [CartFillerTimeout("slow"), True]})

        result = await filler.add_items_to_cart(cart_items)

        assert result.added_count == 3
        assert filler.attempts.count("milk") == 2

    @pytest.mark.asyncio
    async def test_timeout_gives_up(self, cart_items):
        """Test an item fails once retries are exhausted."""
        filler = FakeCartFiller({"garlic": CartFillerTimeout("slow")}, max_retries=3)

        result = await filler.add_items_to_cart(cart_items)

        assert result.failed_items == ["garlic"]
        assert filler.attempts.count("garlic") == 3

    @pytest.mark.asyncio
    async def test_unexpected_error_propagates(self, cart_items):
        """Test errors outside the cart filler hierarchy abort the run."""
        filler = FakeCartFiller({"garlic": RuntimeError("browser crashed")})

        with pytest.raises(RuntimeError, match="browser crashed"):
            await filler.add_items_to_cart(cart_items)

    @pytest.mark.asyncio
    async def test_empty_batch_rejected(self):
        """Test at least one item is required."""
        with pytest.raises(ValidationError):
            await FakeCartFiller().add_items_to_cart([])

    @pytest.mark.asyncio
    async def test_batch_limit(self):
        """Test more than 100 items are rejected."""
        items = [CartItem(name=f"item {i}", amount=1) for i in range(101)]

        with pytest.raises(ValidationError):
            await FakeCartFiller().add_items_to_cart(items)

    @pytest.mark.asyncio
    async def test_context_manager(self, cart_items):
        """Test open and close hooks run around the block."""
        filler = FakeCartFiller()

        async with filler as opened:
            assert opened.opened is True
            await opened.add_items_to_cart(cart_items)

        assert filler.closed is True

    @pytest.mark.asyncio
    async def test_from_shopping_list(self):
        """Test an aggregated plan feeds straight into a cart filler."""
        plan = [
            make_day(0, lunch=[make_ingredient("garlic", 3, "cloves")]),
            make_day(1, dinner=[make_ingredient("minced garlic", 2, "cloves")]),
            make_day(2, breakfast=[make_ingredient("salt", 0, "pinch")]),
        ]
        filler = FakeCartFiller()

        result = await filler.add_items_to_cart(to_cart_items(aggregate_ingredients(plan)))

        assert result.added_count == 1
        assert filler.attempts == ["garlic"]


class TestCartItem:
    """Tests for CartItem validation."""

    def test_amount_must_be_positive(self):
        """Test zero amounts are rejected."""
        with pytest.raises(ValidationError):
            CartItem(name="milk", amount=0)

    def test_name_length(self):
        """Test overly long names are rejected."""
        with pytest.raises(ValidationError):
            CartItem(name="x" * 201, amount=1)

    def test_amount_must_be_finite(self):
        """Test infinite amounts are rejected."""
        with pytest.raises(ValidationError):
            CartItem(name="milk", amount=float("inf"))


class TestCartFillerLifecycle:
    """Tests for opening, closing and looking up cart fillers."""

    @pytest.mark.asyncio
    async def test_closed_when_open_fails(self):
        """Test resources are released when opening the retailer session fails."""
        filler = FakeCartFiller()
        filler.open_error = CartFillerError("login page did not load")

        with pytest.raises(CartFillerError):
            async with filler:
                pass

        assert filler.closed is True

    def test_registry_lookup(self, monkeypatch):
        """Test retailers are looked up case-insensitively."""
        monkeypatch.setitem(CART_FILLER_REGISTRY, "test-mart", FakeCartFiller)

        assert isinstance(get_cart_filler_for_retailer("Test-Mart"), FakeCartFiller)
        assert "test-mart" in get_available_cart_fillers()

    def test_unknown_retailer(self):
        """Test an unregistered retailer has no cart filler."""
        assert get_cart_filler_for_retailer("nowhere") is None
