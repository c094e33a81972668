from datetime import datetime
from decimal import Decimal

import pytest

from order_desk import printer
from order_desk.models import Order, OrderStatus, OrderType
from order_desk.printer import SECTION_SEPARATOR_TOKEN, kitchen_ticket_lines, print_lines, resolve_printer_font_path

from conftest import make_item


def test_kitchen_ticket_lines():
    order = Order(
        id="665f1c2a9b1e8a0012abcd12",
        items=[make_item("A", quantity=2, name="Burger", special_instructions="No onions"), make_item("B", name="Cola")],
        total_amount=Decimal("15"),
        status=OrderStatus.CONFIRMED,
        table_number=5,
        order_type=OrderType.DINE_IN,
        created_at=datetime(2024, 5, 4, 18, 45),
    )

    assert kitchen_ticket_lines(order) == [
        "#abcd12 Dine-in T5",
        "18:45",
        SECTION_SEPARATOR_TOKEN,
        "2 x Burger",
        "  * No onions",
        "1 x Cola",
        SECTION_SEPARATOR_TOKEN,
        "Total $15.00",
    ]


def test_font_override_wins(tmp_path, monkeypatch):
    font = tmp_path / "font.ttf"
    font.write_bytes(b"")
    monkeypatch.setenv("RECEIPT_PRINTER_FONT_PATH", str(font))

    assert resolve_printer_font_path() == str(font)


def test_missing_font_raises(monkeypatch):
    monkeypatch.delenv("RECEIPT_PRINTER_FONT_PATH", raising=False)
    monkeypatch.setattr(printer, "PRINTER_FONT_PATH", "/nonexistent/font.ttf")
    monkeypatch.setattr(printer, "_LINUX_FONT_FALLBACKS", ())

    with pytest.raises(RuntimeError, match="No usable printer font found"):
        resolve_printer_font_path()


def test_print_nothing_is_a_no_op():
    print_lines([])
