"""Base cart filler interface for online grocery retailers."""

import asyncio
import time
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from mealcart.config import get_settings
from mealcart.logging_config import get_logger
from mealcart.schemas import CartItem, CartItemsRequest, CartResult

logger = get_logger(__name__)
settings = get_settings()


class CartFillerError(Exception):
    """Base exception for cart filler errors."""

    def __init__(self, message: str, item_name: str | None = None):
        super().__init__(message)
        self.item_name = item_name


class CartFillerTimeout(CartFillerError):
    """Raised when the retailer is too slow to respond; worth retrying."""


class CartFiller(ABC):
    """Abstract base class for retailer cart fillers.

    Subclasses know how to put a single item into the retailer's cart;
    this class handles batching, retries, pacing and result bookkeeping.
    """

    # Override in subclasses
    RETAILER_NAME: str = "Unknown"

    def __init__(
        self,
        max_retries: int | None = None,
        item_delay: float | None = None,
        retry_backoff: float | None = None,
    ):
        """
        Initialize the cart filler.

        Args:
            max_retries: Attempts per item when the retailer times out.
            item_delay: Seconds to wait between items.
            retry_backoff: Multiplier for the exponential wait between attempts.
        """
        self.max_retries = max_retries if max_retries is not None else settings.cart_max_retries
        self.item_delay = item_delay if item_delay is not None else settings.cart_item_delay
        self.retry_backoff = (
            retry_backoff if retry_backoff is not None else settings.cart_retry_backoff
        )

    @property
    def name(self) -> str:
        """Return retailer name."""
        return self.RETAILER_NAME

    @abstractmethod
    async def add_item(self, item: CartItem) -> bool:
        """
        Search for an item and add the best match to the cart.

        Returns:
            True if the item was added, False if no match could be added.

        Raises:
            CartFillerTimeout: If the retailer did not respond in time.
            CartFillerError: For other per-item failures.
        """
        pass

    @abstractmethod
    async def cart_url(self) -> str:
        """Return the URL of the filled cart."""
        pass

    async def open(self) -> None:
        """Acquire resources (browser, session). Default does nothing."""

    async def close(self) -> None:
        """Release resources. Default does nothing."""

    async def _add_with_retry(self, item: CartItem) -> bool:
        """Add one item, retrying on timeouts. Returns False when the item failed."""

        @retry(
            retry=retry_if_exception_type(CartFillerTimeout),
            stop=stop_after_attempt(max(self.max_retries, 1)),
            wait=wait_exponential(multiplier=self.retry_backoff, max=10),
            reraise=True,
        )
        async def _do_add() -> bool:
            return await self.add_item(item)

        try:
            return await _do_add()
        except CartFillerTimeout:
            logger.warning(f"Timed out adding '{item.name}' after {self.max_retries} attempts")
            return False
        except CartFillerError as e:
            logger.warning(f"Failed to add '{item.name}': {e}")
            return False

    async def add_items_to_cart(self, items: Sequence[CartItem]) -> CartResult:
        """
        Add a batch of items to the cart in order.

        Per-item failures are collected in the result instead of aborting the
        run. Any exception other than CartFillerError propagates.

        Args:
            items: 1 to 100 items to add.

        Returns:
            CartResult with the cart URL, the number of items added and the
            names of items that could not be added.
        """
        batch = CartItemsRequest(ingredients=list(items)).ingredients
        started = time.perf_counter()
        logger.info(f"Starting {self.name} cart fill ({len(batch)} items)")

        failed_items: list[str] = []
        added_count = 0

        for index, item in enumerate(batch):
            logger.debug(f"[{index + 1}/{len(batch)}] Processing: {item.name}")

            if await self._add_with_retry(item):
                added_count += 1
            else:
                failed_items.append(item.name)

            if index < len(batch) - 1 and self.item_delay > 0:
                await asyncio.sleep(self.item_delay)

        url = await self.cart_url()
        elapsed = time.perf_counter() - started

        logger.info(
            f"{self.name} cart fill completed in {elapsed:.2f}s: "
            f"added {added_count}/{len(batch)} items"
        )
        if failed_items:
            logger.info(f"Failed items: {', '.join(failed_items)}")

        return CartResult(
            success=True,
            cart_url=url,
            added_count=added_count,
            failed_items=failed_items,
        )

    async def __aenter__(self) -> "CartFiller":
        """Async context manager entry; closes again if opening fails."""
        try:
            await self.open()
        except BaseException:
            await self.close()
            raise
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.close()
