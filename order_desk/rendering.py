"""Rendering helpers for line items, order cards and stats."""

from __future__ import annotations

from decimal import Decimal

from rich.text import Text

from order_desk.constant import ORDER_TYPE_LABELS, STATUS_STYLES
from order_desk.export import format_money
from order_desk.models import Order, OrderLineItem, StatsData
from order_desk.stats import active_order_count, daily_trend, status_breakdown, top_dishes


def badge_style(status: str) -> str:
    """Return a consistent badge style for an order status."""
    return STATUS_STYLES.get(status, "bold #ffffff on #444444")


def format_status_badge(status: str) -> Text:
    return Text(f" {status.upper()} ", style=badge_style(status))


def format_line_item(item: OrderLineItem) -> Text:
    """Render `2 x Name  $10.00` with instructions on a second line."""
    text = Text()
    text.append(f"{item.quantity} x ", style="bold")
    text.append(item.menu_item.name)
    text.append(f"  {format_money(item.line_total)}", style="dim")
    if item.special_instructions:
        text.append(f"\n      {item.special_instructions}", style="italic #dddddd")
    return text


def format_total(total: Decimal) -> Text:
    text = Text()
    text.append("Total: ", style="bold")
    text.append(format_money(total), style="bold #5fbf72")
    return text


def format_order_card(order: Order) -> Text:
    """Render one order for the kitchen board."""
    text = Text()
    text.append_text(format_status_badge(order.status.value))
    text.append(f" #{order.id[-6:]}", style="bold")
    text.append(f"  {ORDER_TYPE_LABELS.get(order.order_type.value, order.order_type.value)}")
    if order.table_number is not None:
        text.append(f"  Table {order.table_number}")
    if order.customer is not None and order.customer.name:
        text.append(f"  {order.customer.name}", style="dim")
    for item in order.items:
        text.append("\n    ")
        text.append_text(format_line_item(item))
    text.append("\n    ")
    text.append_text(format_total(order.total_amount))
    return text


def format_stats_panel(stats: StatsData) -> Text:
    """Compact stats summary for the kitchen board."""
    text = Text()
    text.append("Today ", style="bold")
    text.append(format_money(stats.daily_earnings))
    text.append(f"  ({stats.today_order_count} orders, avg {format_money(stats.avg_order_value)})")
    trend = daily_trend(stats)
    text.append(f"\n{trend:+.1f}% vs weekly daily average", style="#5fbf72" if trend >= 0 else "#ffb3b3")
    text.append("\nWeek ", style="bold")
    text.append(format_money(stats.weekly_earnings))
    text.append("  Year ", style="bold")
    text.append(format_money(stats.yearly_earnings))
    text.append(f"\nIn progress: {active_order_count(stats)}")

    breakdown = status_breakdown(stats)
    if breakdown:
        text.append("\n")
        for idx, (status, count) in enumerate(breakdown):
            if idx > 0:
                text.append(" ")
            text.append(f" {status} {count} ", style=badge_style(status))

    dishes = top_dishes(stats)
    if dishes:
        text.append("\nTop: ", style="bold")
        text.append(", ".join(f"{dish.name} x{dish.quantity}" for dish in dishes))
    return text
