"""Cart persistence: the repository contract and its backing stores."""

from __future__ import annotations

import sqlite3
from decimal import Decimal
from pathlib import Path
from typing import Iterable, Protocol

from order_desk.config import CART_ID, DB_PATH
from order_desk.models import MenuItemRef, OrderLineItem


class CartRepository(Protocol):
    """Loads and stores one cart's line items. Last write wins."""

    def load(self) -> list[OrderLineItem]: ...

    def save(self, items: Iterable[OrderLineItem]) -> None: ...

    def clear(self) -> None: ...


class InMemoryCartRepository:
    """Process-local cart store, mainly for tests and previews."""

    def __init__(self, items: Iterable[OrderLineItem] = ()) -> None:
        self._items: list[OrderLineItem] = list(items)

    def load(self) -> list[OrderLineItem]:
        return list(self._items)

    def save(self, items: Iterable[OrderLineItem]) -> None:
        self._items = list(items)

    def clear(self) -> None:
        self._items = []


class SqliteCartRepository:
    """SQLite-backed cart store keyed by cart id."""

    def __init__(self, db_path: str | Path = DB_PATH, cart_id: str = CART_ID) -> None:
        self.db_path = Path(db_path)
        self.cart_id = cart_id
        self._bootstrapped = False

    def _connect(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path)
        if not self._bootstrapped:
            bootstrap_schema(conn)
            self._bootstrapped = True
        return conn

    def load(self) -> list[OrderLineItem]:
        conn = self._connect()
        try:
            rows = conn.execute(
                """
                SELECT menu_item_id, name, price, description, category,
                       quantity, special_instructions, unit_price
                FROM cart_items
                WHERE cart_id = ?
                ORDER BY position
                """,
                (self.cart_id,),
            ).fetchall()
        finally:
            conn.close()
        return [_row_to_item(row) for row in rows]

    def save(self, items: Iterable[OrderLineItem]) -> None:
        copied = list(items)
        conn = self._connect()
        try:
            with conn:
                conn.execute("DELETE FROM cart_items WHERE cart_id = ?", (self.cart_id,))
                conn.executemany(
                    """
                    INSERT INTO cart_items (
                        cart_id, position, menu_item_id, name, price, description,
                        category, quantity, special_instructions, unit_price
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    [
                        (
                            self.cart_id,
                            idx,
                            item.menu_item.id,
                            item.menu_item.name,
                            str(item.menu_item.price),
                            item.menu_item.description,
                            item.menu_item.category,
                            item.quantity,
                            item.special_instructions,
                            str(item.unit_price),
                        )
                        for idx, item in enumerate(copied)
                    ],
                )
        finally:
            conn.close()

    def clear(self) -> None:
        conn = self._connect()
        try:
            with conn:
                conn.execute("DELETE FROM cart_items WHERE cart_id = ?", (self.cart_id,))
        finally:
            conn.close()


def bootstrap_schema(conn: sqlite3.Connection) -> None:
    """Create the cart schema if it does not already exist."""
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS cart_items (
            cart_id TEXT NOT NULL,
            position INTEGER NOT NULL,
            menu_item_id TEXT NOT NULL,
            name TEXT NOT NULL,
            price TEXT NOT NULL,
            description TEXT NOT NULL DEFAULT '',
            category TEXT NOT NULL DEFAULT '',
            quantity INTEGER NOT NULL CHECK (quantity >= 1),
            special_instructions TEXT NOT NULL DEFAULT '',
            unit_price TEXT NOT NULL,
            PRIMARY KEY (cart_id, position)
        );

        CREATE UNIQUE INDEX IF NOT EXISTS idx_cart_items_cart_menu_item
            ON cart_items(cart_id, menu_item_id);
        """
    )


def _row_to_item(row: tuple) -> OrderLineItem:
    menu_item_id, name, price, description, category, quantity, instructions, unit_price = row
    return OrderLineItem(
        menu_item=MenuItemRef(
            id=menu_item_id,
            name=name,
            price=Decimal(price),
            description=description,
            category=category,
        ),
        quantity=int(quantity),
        special_instructions=instructions,
        unit_price=Decimal(unit_price),
    )
