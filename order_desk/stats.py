"""Summaries over externally computed kitchen statistics."""

from __future__ import annotations

from decimal import Decimal

from order_desk.models import STATUS_FLOW, DishSales, OrderStatus, StatsData


def calculate_trend(current: float | Decimal, previous: float | Decimal) -> float:
    """Percent change from previous to current.

    A zero baseline reports 100 when anything was earned and 0 otherwise.
    """
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return float((Decimal(str(current)) - Decimal(str(previous))) / Decimal(str(previous)) * 100)


def status_breakdown(stats: StatsData) -> list[tuple[str, int]]:
    """Order counts by status, lifecycle statuses first, then anything else the server reports."""
    known = [status.value for status in (*STATUS_FLOW, OrderStatus.CANCELLED)]
    rows = [(status, stats.orders_by_status[status]) for status in known if status in stats.orders_by_status]
    rows.extend(sorted((k, v) for k, v in stats.orders_by_status.items() if k not in known))
    return rows


def active_order_count(stats: StatsData) -> int:
    """Orders still in the kitchen pipeline (not served and not cancelled)."""
    terminal = {OrderStatus.SERVED.value, OrderStatus.CANCELLED.value}
    return sum(count for status, count in stats.orders_by_status.items() if status not in terminal)


def top_dishes(stats: StatsData, limit: int = 5) -> list[DishSales]:
    """Best sellers ranked by quantity, revenue breaking ties."""
    ranked = sorted(stats.best_selling_dishes, key=lambda dish: (-dish.quantity, -dish.revenue, dish.name))
    return ranked[:limit]


def daily_trend(stats: StatsData) -> float:
    """Today's earnings against this week's average day."""
    return calculate_trend(stats.daily_earnings, stats.weekly_earnings / 7)
