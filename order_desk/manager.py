"""Cart operations over a repository, returning Ok/Err results."""

from __future__ import annotations

import logging
import threading
from decimal import Decimal
from typing import TYPE_CHECKING, Callable

from order_desk.models import OrderLineItem, OrderSubmission, order_total
from order_desk.persistence import CartRepository
from order_desk.result import Err, Ok, Result

if TYPE_CHECKING:
    from order_desk.api import DashboardClient

logger = logging.getLogger(__name__)

LOAD_FAILED = "Failed to load order items"
ADD_FAILED = "Failed to add to order"
UPDATE_FAILED = "Failed to update quantity"
INSTRUCTIONS_FAILED = "Failed to update instructions"
REMOVE_FAILED = "Failed to remove item"
CLEAR_FAILED = "Failed to clear order"
CALCULATION_FAILED = "Failed to calculate total"
INVALID_QUANTITY = "Quantity must be at least 1"

ItemsResult = Result[list[OrderLineItem], str]


def merge_item(items: list[OrderLineItem], item: OrderLineItem) -> list[OrderLineItem]:
    """Add item to items, summing quantities when the menu item is already present."""
    if any(existing.item_id == item.item_id for existing in items):
        return [
            existing.with_quantity(existing.quantity + item.quantity) if existing.item_id == item.item_id else existing
            for existing in items
        ]
    return [*items, item]


def set_quantity(items: list[OrderLineItem], item_id: str, quantity: int) -> list[OrderLineItem]:
    """Set one item's quantity; anything below 1 drops the item."""
    if quantity < 1:
        return without_item(items, item_id)
    return [item.with_quantity(quantity) if item.item_id == item_id else item for item in items]


def set_instructions(items: list[OrderLineItem], item_id: str, text: str) -> list[OrderLineItem]:
    return [item.with_instructions(text) if item.item_id == item_id else item for item in items]


def without_item(items: list[OrderLineItem], item_id: str) -> list[OrderLineItem]:
    return [item for item in items if item.item_id != item_id]


class OrderManager:
    """Maintains a pending cart's line items.

    Every operation loads the cart, transforms it in memory and saves it back.
    A per-manager lock serialises these sequences so two calls on the same cart
    cannot overwrite each other's save. Storage exceptions are logged and
    returned as ``Err`` values carrying one of the module's failure tags.
    """

    def __init__(self, repository: CartRepository) -> None:
        self.repository = repository
        self._lock = threading.RLock()

    def load(self) -> ItemsResult:
        with self._lock:
            try:
                return Ok(self.repository.load())
            except Exception:
                logger.warning("cart load failed", exc_info=True)
                return Err(LOAD_FAILED)

    def add(self, item: OrderLineItem) -> ItemsResult:
        if item.quantity < 1:
            return Err(INVALID_QUANTITY)
        return self._mutate(lambda items: merge_item(items, item), ADD_FAILED)

    def update_quantity(self, item_id: str, new_quantity: int) -> ItemsResult:
        return self._mutate(lambda items: set_quantity(items, item_id, new_quantity), UPDATE_FAILED)

    def update_instructions(self, item_id: str, text: str) -> ItemsResult:
        return self._mutate(lambda items: set_instructions(items, item_id, text), INSTRUCTIONS_FAILED)

    def remove(self, item_id: str) -> ItemsResult:
        return self._mutate(lambda items: without_item(items, item_id), REMOVE_FAILED)

    def clear(self) -> Result[None, str]:
        with self._lock:
            try:
                self.repository.clear()
            except Exception:
                logger.warning("cart clear failed", exc_info=True)
                return Err(CLEAR_FAILED)
            return Ok(None)

    def calculate_total(self) -> Result[Decimal, str]:
        with self._lock:
            try:
                items = self.repository.load()
            except Exception:
                logger.warning("cart total failed", exc_info=True)
                return Err(CALCULATION_FAILED)
            return Ok(order_total(items))

    def validate_submission(self, submission: OrderSubmission) -> Result[bool, str]:
        """Check a submission before it is sent to the order API."""
        if not submission.items:
            return Err("Order must contain at least one item")
        if not submission.table_number or submission.table_number < 1:
            return Err("Valid table number is required")
        if not submission.customer_name.strip():
            return Err("Customer name is required")
        for item in submission.items:
            if item.quantity < 1:
                return Err(f"Invalid quantity for {item.menu_item.name}")
            if item.unit_price < 0:
                return Err(f"Invalid price for {item.menu_item.name}")
        return Ok(True)

    def submit(self, submission: OrderSubmission, client: DashboardClient) -> Result[str, str]:
        """Validate, create the order remotely and clear the cart on success."""
        validation = self.validate_submission(submission)
        if not validation.ok:
            return validation

        created = client.create_order(submission)
        if not created.ok:
            return created

        cleared = self.clear()
        if not cleared.ok:
            # Order already created remotely.
            logger.warning("order %s created but cart was not cleared", created.value)
        logger.info("order %s submitted with %d items", created.value, len(submission.items))
        return created

    def _mutate(self, transform: Callable[[list[OrderLineItem]], list[OrderLineItem]], failure: str) -> ItemsResult:
        with self._lock:
            try:
                items = transform(self.repository.load())
                self.repository.save(items)
            except Exception:
                logger.warning("cart update failed: %s", failure, exc_info=True)
                return Err(failure)
            return Ok(items)
