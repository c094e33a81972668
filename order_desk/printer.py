"""Thermal printer output for kitchen tickets and stats reports."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from time import sleep

from order_desk.config import (
    PRINTER_FONT_PATH,
    PRINTER_FONT_SIZE,
    PRINTER_LEFT_INDENT_PX,
    PRINTER_TAIL_SPACER_PX,
    PRINTER_USB_PRODUCT_ID,
    PRINTER_USB_VENDOR_ID,
    PRINTER_WIDTH_PX,
)
from order_desk.constant import ORDER_TYPE_LABELS
from order_desk.export import format_money, stats_report_lines
from order_desk.models import Order, OrderLineItem, StatsData

logger = logging.getLogger(__name__)

# Separator tuning values.
_SECTION_SEPARATOR_HEIGHT_PX = 20
_SECTION_SEPARATOR_THICKNESS_PX = 5
_SECTION_SEPARATOR_STRIPE_HEIGHT_PX = 2
_SECTION_SEPARATOR_PAUSE_SECONDS = 0.1
SECTION_SEPARATOR_TOKEN = "__SECTION_SEP__"
# Extra vertical headroom to avoid descender clipping on thermal output.
_LINE_EXTRA_PX = 14
_FONT_OVERRIDE_ENV = "RECEIPT_PRINTER_FONT_PATH"
_LINUX_FONT_FALLBACKS = (
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/noto/NotoSans-Regular.ttf",
    "/usr/share/fonts/liberation/LiberationSans-Regular.ttf",
)


def to_print_label(item: OrderLineItem) -> str:
    """Format a printed line as `<qty> x <name>`."""
    return f"{item.quantity} x {item.menu_item.name}"


def kitchen_ticket_lines(order: Order) -> list[str]:
    """Lines for a kitchen ticket: header, items with instructions, total."""
    header = f"#{order.id[-6:]} {ORDER_TYPE_LABELS.get(order.order_type.value, order.order_type.value)}"
    if order.table_number is not None:
        header += f" T{order.table_number}"
    lines = [header]
    if order.created_at is not None:
        lines.append(order.created_at.strftime("%H:%M"))
    lines.append(SECTION_SEPARATOR_TOKEN)
    for item in order.items:
        lines.append(to_print_label(item))
        if item.special_instructions:
            lines.append(f"  * {item.special_instructions}")
    lines.append(SECTION_SEPARATOR_TOKEN)
    lines.append(f"Total {format_money(order.total_amount)}")
    return lines


def resolve_printer_font_path() -> str:
    """First existing font among the env override, PRINTER_FONT_PATH and Linux fallbacks."""
    ordered = dict.fromkeys(
        path
        for path in (os.environ.get(_FONT_OVERRIDE_ENV, "").strip(), PRINTER_FONT_PATH, *_LINUX_FONT_FALLBACKS)
        if path
    )
    found = next((path for path in ordered if Path(path).is_file()), None)
    if found is None:
        raise RuntimeError(
            f"No usable printer font found. Set {_FONT_OVERRIDE_ENV} to a .ttf/.otf file "
            f"(tried {len(ordered)} paths)."
        )
    return found


def check_printer_dependencies() -> tuple[bool, str]:
    """Check whether printer dependencies are importable and a font is available."""
    try:
        from escpos.printer import Usb  # noqa: F401
        from PIL import ImageFont

        font_path = resolve_printer_font_path()
        ImageFont.truetype(font_path, PRINTER_FONT_SIZE)
    except Exception as exc:
        return (False, f"Printer deps unavailable: {exc}")
    return (True, "Printer ready")


def _fit_text_to_px(text: str, font: object, max_width_px: int) -> str:
    from PIL import Image, ImageDraw

    scratch = Image.new("1", (1, 1), color=1)
    draw = ImageDraw.Draw(scratch)
    if draw.textbbox((0, 0), text, font=font)[2] <= max_width_px:
        return text
    ellipsis = "..."
    trimmed = text
    while trimmed:
        candidate = f"{trimmed}{ellipsis}"
        if draw.textbbox((0, 0), candidate, font=font)[2] <= max_width_px:
            return candidate
        trimmed = trimmed[:-1]
    return ellipsis


def render_line(text: str, font: object) -> object:
    from PIL import Image, ImageDraw

    canvas_height = PRINTER_FONT_SIZE + _LINE_EXTRA_PX
    img = Image.new("1", (PRINTER_WIDTH_PX, canvas_height), color=1)
    draw = ImageDraw.Draw(img)

    fitted = _fit_text_to_px(text, font, PRINTER_WIDTH_PX - PRINTER_LEFT_INDENT_PX * 2)
    bbox = draw.textbbox((0, 0), fitted, font=font)
    text_height = bbox[3] - bbox[1]

    x = PRINTER_LEFT_INDENT_PX
    # Offset by bbox top so descenders are not clipped.
    y = (canvas_height - text_height) // 2 - bbox[1]
    draw.text((x, y), fitted, font=font, fill=0)
    return img


def _render_spacer(height_px: int) -> object:
    from PIL import Image

    return Image.new("1", (PRINTER_WIDTH_PX, max(1, height_px)), color=1)


def _print_section_separator(printer: object) -> None:
    """Print a solid bar as thin stripes, pausing between them to limit print-head heat."""
    from PIL import Image

    margin = max(0, (_SECTION_SEPARATOR_HEIGHT_PX - _SECTION_SEPARATOR_THICKNESS_PX) // 2)
    printer.image(_render_spacer(margin))
    remaining = _SECTION_SEPARATOR_THICKNESS_PX
    while remaining > 0:
        stripe_height = min(_SECTION_SEPARATOR_STRIPE_HEIGHT_PX, remaining)
        printer.image(Image.new("1", (PRINTER_WIDTH_PX, stripe_height), color=0))
        remaining -= stripe_height
        if remaining:
            sleep(_SECTION_SEPARATOR_PAUSE_SECONDS)
    printer.image(_render_spacer(margin))


def print_lines(lines: list[str]) -> None:
    """Print lines top to bottom and cut the ticket at the end."""
    if not lines:
        return

    try:
        from escpos.printer import Usb
        from PIL import ImageFont
    except Exception as exc:
        raise RuntimeError(f"Printer dependencies unavailable: {exc}") from exc

    printer = Usb(PRINTER_USB_VENDOR_ID, PRINTER_USB_PRODUCT_ID)
    font = ImageFont.truetype(resolve_printer_font_path(), PRINTER_FONT_SIZE)

    for line in lines:
        if line == SECTION_SEPARATOR_TOKEN:
            _print_section_separator(printer)
            continue
        printer.image(render_line(line, font))

    printer.image(_render_spacer(PRINTER_TAIL_SPACER_PX))
    printer.cut()
    logger.info("printed %d lines", len(lines))


def print_kitchen_ticket(order: Order) -> None:
    print_lines(kitchen_ticket_lines(order))


def print_stats_report(stats: StatsData) -> None:
    print_lines(stats_report_lines(stats))
