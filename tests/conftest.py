from decimal import Decimal

import pytest

from order_desk.manager import OrderManager
from order_desk.models import MenuItemRef, OrderLineItem
from order_desk.persistence import InMemoryCartRepository


def make_item(item_id: str, quantity: int = 1, price: str = "5", **kwargs) -> OrderLineItem:
    menu_item = MenuItemRef(id=item_id, name=kwargs.pop("name", f"Dish {item_id}"), price=Decimal(price),
                            category=kwargs.pop("category", "Mains"))
    return OrderLineItem(menu_item=menu_item, quantity=quantity, **kwargs)


@pytest.fixture()
def repo():
    return InMemoryCartRepository()


@pytest.fixture()
def manager(repo):
    return OrderManager(repo)


@pytest.fixture()
def menu():
    return [
        MenuItemRef(id="m1", name="Margherita Pizza", price=Decimal("12.50"), description="Tomato, mozzarella", category="Mains"),
        MenuItemRef(id="m2", name="Garlic Bread", price=Decimal("4.00"), description="Toasted baguette", category="Starters"),
        MenuItemRef(id="m3", name="Tiramisu", price=Decimal("6.75"), description="Coffee dessert", category="Desserts"),
        MenuItemRef(id="m4", name="Lemonade", price=Decimal("3.00"), category="Drinks"),
    ]
