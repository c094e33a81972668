import csv
from datetime import datetime
from decimal import Decimal

from openpyxl import load_workbook

from order_desk.export import (
    export_paths,
    export_stats_csv,
    export_stats_workbook,
    format_money,
    stats_report_lines,
)
from order_desk.models import DishSales, StatsData

STATS = StatsData(
    daily_earnings=Decimal("250.75"),
    weekly_earnings=Decimal("1200"),
    yearly_earnings=Decimal("48000.5"),
    today_order_count=14,
    avg_order_value=Decimal("17.911"),
    orders_by_status={"served": 9, "pending": 3},
    best_selling_dishes=[DishSales("Burger", 12, Decimal("114")), DishSales("Fries", 20, Decimal("60.5"))],
)


def test_format_money():
    assert format_money(Decimal("1234.5")) == "$1,234.50"
    assert format_money(0) == "$0.00"
    assert format_money(Decimal("-3.2")) == "-$3.20"


def test_csv_sections(tmp_path):
    path = export_stats_csv(STATS, tmp_path / "out" / "stats.csv")

    with path.open(newline="", encoding="utf-8") as fh:
        rows = list(csv.reader(fh))

    assert rows[0] == ["Metric", "Value"]
    assert rows[1] == ["Daily Earnings", "250.75"]
    assert rows[4] == ["Today's Orders", "14"]
    assert rows[5] == ["Average Order Value", "17.91"]
    assert rows[6] == []
    assert rows[7:10] == [["Status", "Count"], ["pending", "3"], ["served", "9"]]
    assert rows[10] == []
    assert rows[11:] == [["Dish", "Quantity", "Revenue"], ["Burger", "12", "114.00"], ["Fries", "20", "60.50"]]


def test_workbook_sheets(tmp_path):
    path = export_stats_workbook(STATS, tmp_path / "stats.xlsx")

    wb = load_workbook(path)
    assert wb.sheetnames == ["Summary", "Orders by Status", "Best Sellers"]

    summary = wb["Summary"]
    assert summary["A1"].value == "Metric"
    assert summary["A1"].font.bold
    assert summary["B2"].value == 250.75
    assert summary["B5"].value == 14

    by_status = [row for row in wb["Orders by Status"].iter_rows(values_only=True)]
    assert by_status == [("Status", "Count"), ("pending", 3), ("served", 9)]

    dishes = [row for row in wb["Best Sellers"].iter_rows(values_only=True)]
    assert dishes[1] == ("Burger", 12, 114)


def test_empty_stats_still_export(tmp_path):
    path = export_stats_workbook(StatsData.empty(), tmp_path / "empty.xlsx")

    wb = load_workbook(path)
    assert wb["Best Sellers"].max_row == 1


def test_export_paths_are_timestamped(tmp_path):
    csv_path, xlsx_path = export_paths(tmp_path, now=datetime(2024, 5, 4, 9, 30, 15))

    assert csv_path == tmp_path / "kitchen-stats-20240504-093015.csv"
    assert xlsx_path.suffix == ".xlsx"


def test_report_lines():
    lines = stats_report_lines(STATS, generated_at=datetime(2024, 5, 4, 21, 5))

    assert lines[:3] == ["KITCHEN STATS", "2024-05-04 21:05", ""]
    assert "Daily Earnings: $250.75" in lines
    assert "Today's Orders: 14" in lines
    assert "Pending: 3" in lines
    assert lines[-1] == "2. Fries x20 $60.50"
