"""Pydantic models for the order API's camelCase JSON."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, Optional

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field, TypeAdapter, field_validator

from order_desk.models import (
    CustomerRef,
    DishSales,
    MenuItemRef,
    Order,
    OrderLineItem,
    OrderStatus,
    OrderSubmission,
    OrderType,
    StatsData,
    order_total,
)


def _null_as(default: Any):
    return BeforeValidator(lambda value: default if value is None or value == "" else value)


Money = Annotated[Decimal, _null_as(Decimal("0"))]
Count = Annotated[int, _null_as(0)]
TextField = Annotated[str, _null_as("")]


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class MenuItemIn(WireModel):
    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    name: str
    price: Money = Decimal("0")
    description: TextField = ""
    category: TextField = ""

    @field_validator("category", mode="before")
    @classmethod
    def category_name(cls, value: Any) -> Any:
        # Populated categories arrive as {"_id": ..., "name": ...}.
        if isinstance(value, dict):
            return value.get("name", "")
        return value

    def to_domain(self) -> MenuItemRef:
        return MenuItemRef(
            id=self.id,
            name=self.name,
            price=self.price,
            description=self.description,
            category=self.category,
        )


class OrderItemIn(WireModel):
    menu_item: MenuItemIn | str = Field(alias="menuItem")
    quantity: int = 1
    special_instructions: TextField = Field("", alias="specialInstructions")
    price: Optional[Decimal] = None

    def to_domain(self) -> OrderLineItem:
        if isinstance(self.menu_item, str):
            ref = MenuItemRef(id=self.menu_item, name="", price=self.price or Decimal("0"))
        else:
            ref = self.menu_item.to_domain()
        return OrderLineItem(
            menu_item=ref,
            quantity=self.quantity,
            special_instructions=self.special_instructions,
            unit_price=self.price,
        )


class CustomerIn(WireModel):
    id: TextField = Field("", validation_alias=AliasChoices("_id", "id"))
    name: TextField = ""
    email: TextField = ""
    phone: Optional[str] = None


class OrderIn(WireModel):
    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    items: list[OrderItemIn] = []
    total_amount: Optional[Decimal] = Field(None, alias="totalAmount")
    status: OrderStatus = OrderStatus.PENDING
    customer: CustomerIn | str | None = None
    table_number: Optional[int] = Field(None, alias="tableNumber")
    order_type: OrderType = Field(OrderType.DINE_IN, alias="orderType")
    order_date: Optional[datetime] = Field(None, alias="orderDate")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    def to_domain(self) -> Order:
        items = [item.to_domain() for item in self.items]
        customer = None
        if isinstance(self.customer, CustomerIn):
            customer = CustomerRef(
                id=self.customer.id,
                name=self.customer.name,
                email=self.customer.email,
                phone=self.customer.phone,
            )
        return Order(
            id=self.id,
            items=items,
            total_amount=self.total_amount if self.total_amount is not None else order_total(items),
            status=self.status,
            customer=customer,
            table_number=self.table_number,
            order_type=self.order_type,
            order_date=self.order_date,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class DishSalesIn(WireModel):
    name: TextField = ""
    quantity: Count = 0
    revenue: Money = Decimal("0")


class StatsIn(WireModel):
    daily_earnings: Money = Field(Decimal("0"), alias="dailyEarnings")
    weekly_earnings: Money = Field(Decimal("0"), alias="weeklyEarnings")
    yearly_earnings: Money = Field(Decimal("0"), alias="yearlyEarnings")
    today_order_count: Count = Field(0, alias="todayOrderCount")
    avg_order_value: Money = Field(Decimal("0"), alias="avgOrderValue")
    orders_by_status: Annotated[dict[str, int], _null_as({})] = Field({}, alias="ordersByStatus")
    best_selling_dishes: Annotated[list[DishSalesIn], _null_as([])] = Field([], alias="bestSellingDishes")

    def to_domain(self) -> StatsData:
        return StatsData(
            daily_earnings=self.daily_earnings,
            weekly_earnings=self.weekly_earnings,
            yearly_earnings=self.yearly_earnings,
            today_order_count=self.today_order_count,
            avg_order_value=self.avg_order_value,
            orders_by_status=dict(self.orders_by_status),
            best_selling_dishes=[
                DishSales(name=dish.name, quantity=dish.quantity, revenue=dish.revenue)
                for dish in self.best_selling_dishes
            ],
        )


class OrderCreated(WireModel):
    order_id: Optional[str] = Field(None, alias="orderId")
    id: Optional[str] = Field(None, alias="_id")


class OrderItemCreate(WireModel):
    menu_item: str = Field(alias="menuItem")
    quantity: int
    price: float
    special_instructions: str = Field("", alias="specialInstructions")


class OrderCreate(WireModel):
    items: list[OrderItemCreate]
    total_amount: float = Field(alias="totalAmount")
    table_number: int = Field(alias="tableNumber")
    customer_name: str = Field(alias="customerName")
    order_type: OrderType = Field(alias="orderType")
    status: OrderStatus
    notes: Optional[str] = None

    @classmethod
    def from_submission(cls, submission: OrderSubmission, status: OrderStatus = OrderStatus.CONFIRMED) -> OrderCreate:
        return cls(
            items=[
                OrderItemCreate(
                    menu_item=item.item_id,
                    quantity=item.quantity,
                    price=float(item.unit_price),
                    special_instructions=item.special_instructions,
                )
                for item in submission.items
            ],
            total_amount=float(order_total(submission.items)),
            table_number=submission.table_number,
            customer_name=submission.customer_name.strip(),
            order_type=submission.order_type,
            status=status,
            notes=submission.notes or None,
        )

    def payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


MENU_ADAPTER = TypeAdapter(list[MenuItemIn])
ORDERS_ADAPTER = TypeAdapter(list[OrderIn])
STATS_ADAPTER = TypeAdapter(StatsIn)
CREATED_ADAPTER = TypeAdapter(OrderCreated)
