"""Spreadsheet, CSV and printable report output for kitchen statistics."""

from __future__ import annotations

import csv
import logging
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Font

from order_desk.config import CURRENCY_SYMBOL, EXPORT_DIR
from order_desk.models import StatsData
from order_desk.stats import status_breakdown

logger = logging.getLogger(__name__)

SUMMARY_HEADER = ("Metric", "Value")
STATUS_HEADER = ("Status", "Count")
DISHES_HEADER = ("Dish", "Quantity", "Revenue")


def format_money(amount: Decimal | float) -> str:
    value = Decimal(str(amount)).quantize(Decimal("0.01"))
    sign = "-" if value < 0 else ""
    return f"{sign}{CURRENCY_SYMBOL}{abs(value):,.2f}"


def summary_rows(stats: StatsData) -> list[tuple[str, Decimal | int]]:
    return [
        ("Daily Earnings", stats.daily_earnings),
        ("Weekly Earnings", stats.weekly_earnings),
        ("Yearly Earnings", stats.yearly_earnings),
        ("Today's Orders", stats.today_order_count),
        ("Average Order Value", stats.avg_order_value),
    ]


def _money_cell(value: Decimal | int) -> str | int:
    if isinstance(value, Decimal):
        return f"{value.quantize(Decimal('0.01'))}"
    return value


def export_stats_csv(stats: StatsData, path: str | Path) -> Path:
    """Write the three stats sections to one CSV file, separated by blank rows."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.writer(fh)
        writer.writerow(SUMMARY_HEADER)
        for label, value in summary_rows(stats):
            writer.writerow((label, _money_cell(value)))
        writer.writerow(())
        writer.writerow(STATUS_HEADER)
        writer.writerows(status_breakdown(stats))
        writer.writerow(())
        writer.writerow(DISHES_HEADER)
        for dish in stats.best_selling_dishes:
            writer.writerow((dish.name, dish.quantity, _money_cell(dish.revenue)))
    logger.info("stats CSV written to %s", target)
    return target


def export_stats_workbook(stats: StatsData, path: str | Path) -> Path:
    """Write a workbook with Summary, Orders by Status and Best Sellers sheets."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)

    wb = Workbook()
    summary = wb.active
    summary.title = "Summary"
    _append_header(summary, SUMMARY_HEADER)
    for label, value in summary_rows(stats):
        summary.append((label, float(value) if isinstance(value, Decimal) else value))

    by_status = wb.create_sheet("Orders by Status")
    _append_header(by_status, STATUS_HEADER)
    for row in status_breakdown(stats):
        by_status.append(row)

    dishes = wb.create_sheet("Best Sellers")
    _append_header(dishes, DISHES_HEADER)
    for dish in stats.best_selling_dishes:
        dishes.append((dish.name, dish.quantity, float(dish.revenue)))

    for sheet in wb.worksheets:
        sheet.column_dimensions["A"].width = 24
    wb.save(target)
    logger.info("stats workbook written to %s", target)
    return target


def _append_header(sheet, header: tuple[str, ...]) -> None:
    sheet.append(header)
    for cell in sheet[1]:
        cell.font = Font(bold=True)


def export_paths(directory: str | Path = EXPORT_DIR, now: datetime | None = None) -> tuple[Path, Path]:
    """Timestamped CSV and workbook paths inside directory."""
    stamp = (now or datetime.now()).strftime("%Y%m%d-%H%M%S")
    base = Path(directory) / f"kitchen-stats-{stamp}"
    return base.with_suffix(".csv"), base.with_suffix(".xlsx")


def stats_report_lines(stats: StatsData, generated_at: datetime | None = None) -> list[str]:
    """Plain-text report for printing."""
    stamp = (generated_at or datetime.now()).strftime("%Y-%m-%d %H:%M")
    lines = ["KITCHEN STATS", stamp, ""]
    for label, value in summary_rows(stats):
        shown = format_money(value) if isinstance(value, Decimal) else str(value)
        lines.append(f"{label}: {shown}")

    breakdown = status_breakdown(stats)
    if breakdown:
        lines.append("")
        lines.append("ORDERS BY STATUS")
        lines.extend(f"{status.title()}: {count}" for status, count in breakdown)

    if stats.best_selling_dishes:
        lines.append("")
        lines.append("BEST SELLERS")
        for idx, dish in enumerate(stats.best_selling_dishes, start=1):
            lines.append(f"{idx}. {dish.name} x{dish.quantity} {format_money(dish.revenue)}")
    return lines
