"""Domain models for order-desk."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    SERVED = "served"
    CANCELLED = "cancelled"


class OrderType(str, Enum):
    DINE_IN = "dine-in"
    TAKEAWAY = "takeaway"
    DELIVERY = "delivery"


STATUS_FLOW: tuple[OrderStatus, ...] = (
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PREPARING,
    OrderStatus.READY,
    OrderStatus.SERVED,
)
TERMINAL_STATUSES = frozenset({OrderStatus.SERVED, OrderStatus.CANCELLED})
EDITABLE_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.CONFIRMED})


def next_status(status: OrderStatus) -> OrderStatus | None:
    """Return the forward step for a status, or None when it is terminal."""
    if status in TERMINAL_STATUSES:
        return None
    return STATUS_FLOW[STATUS_FLOW.index(status) + 1]


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    """Whether kitchen/waiter action may move an order from current to target."""
    if current in TERMINAL_STATUSES:
        return False
    if target == OrderStatus.CANCELLED:
        return True
    return next_status(current) == target


@dataclass(frozen=True)
class MenuItemRef:
    """The menu item a line item points at."""

    id: str
    name: str
    price: Decimal
    description: str = ""
    category: str = ""


@dataclass(frozen=True)
class OrderLineItem:
    """One menu item with quantity and instructions inside a cart or order."""

    menu_item: MenuItemRef
    quantity: int = 1
    special_instructions: str = ""
    unit_price: Decimal | None = None

    def __post_init__(self) -> None:
        # Price at order time falls back to the current menu price.
        if self.unit_price is None:
            object.__setattr__(self, "unit_price", self.menu_item.price)

    @property
    def item_id(self) -> str:
        return self.menu_item.id

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    def with_quantity(self, quantity: int) -> OrderLineItem:
        return replace(self, quantity=quantity)

    def with_instructions(self, text: str) -> OrderLineItem:
        return replace(self, special_instructions=text)


def order_total(items: list[OrderLineItem]) -> Decimal:
    return sum((item.line_total for item in items), Decimal("0"))


@dataclass(frozen=True)
class CustomerRef:
    id: str
    name: str
    email: str = ""
    phone: str | None = None


@dataclass
class Order:
    """An order as reported by the order API."""

    id: str
    items: list[OrderLineItem]
    total_amount: Decimal
    status: OrderStatus
    customer: CustomerRef | None = None
    table_number: int | None = None
    order_type: OrderType = OrderType.DINE_IN
    order_date: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_editable(self) -> bool:
        return self.status in EDITABLE_STATUSES

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES


@dataclass(frozen=True)
class OrderSubmission:
    """Cart contents plus the details needed to create an order."""

    items: list[OrderLineItem]
    table_number: int
    customer_name: str
    order_type: OrderType = OrderType.DINE_IN
    notes: str = ""


@dataclass(frozen=True)
class DishSales:
    name: str
    quantity: int
    revenue: Decimal


@dataclass(frozen=True)
class StatsData:
    """Aggregates computed by the order API for the kitchen dashboard."""

    daily_earnings: Decimal = Decimal("0")
    weekly_earnings: Decimal = Decimal("0")
    yearly_earnings: Decimal = Decimal("0")
    today_order_count: int = 0
    avg_order_value: Decimal = Decimal("0")
    orders_by_status: dict[str, int] = field(default_factory=dict)
    best_selling_dishes: list[DishSales] = field(default_factory=list)

    @classmethod
    def empty(cls) -> StatsData:
        return cls()
