from decimal import Decimal

import pytest

from order_desk.models import DishSales, StatsData
from order_desk.stats import active_order_count, calculate_trend, daily_trend, status_breakdown, top_dishes


@pytest.mark.parametrize(
    ("current", "previous", "expected"),
    [(120, 100, 20.0), (50, 0, 100.0), (0, 0, 0.0), (75, 100, -25.0), (Decimal("10.5"), Decimal("10.5"), 0.0)],
)
def test_calculate_trend(current, previous, expected):
    assert calculate_trend(current, previous) == pytest.approx(expected)


def test_status_breakdown_follows_lifecycle_then_extras():
    stats = StatsData(orders_by_status={"served": 4, "zzz": 1, "pending": 2, "cancelled": 1, "archived": 3})

    assert status_breakdown(stats) == [
        ("pending", 2),
        ("served", 4),
        ("cancelled", 1),
        ("archived", 3),
        ("zzz", 1),
    ]


def test_active_order_count_skips_terminal():
    stats = StatsData(orders_by_status={"pending": 2, "preparing": 3, "served": 10, "cancelled": 1})

    assert active_order_count(stats) == 5


def test_top_dishes_ranked_by_quantity_then_revenue():
    stats = StatsData(
        best_selling_dishes=[
            DishSales("Soup", 5, Decimal("20")),
            DishSales("Steak", 5, Decimal("150")),
            DishSales("Burger", 9, Decimal("90")),
        ]
    )

    assert [dish.name for dish in top_dishes(stats, limit=2)] == ["Burger", "Steak"]


def test_daily_trend_against_week_average():
    stats = StatsData(daily_earnings=Decimal("120"), weekly_earnings=Decimal("700"))

    assert daily_trend(stats) == pytest.approx(20.0)
    assert daily_trend(StatsData()) == 0.0
