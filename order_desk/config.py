"""Runtime configuration defaults for persistence, the API client and printing."""

from __future__ import annotations

import os

DB_PATH = os.environ.get("ORDER_DESK_DB_PATH", "data/order_desk.db")
CART_ID = "waiter_current_order"

API_BASE_URL = os.environ.get("ORDER_DESK_API_URL", "http://localhost:5000")
API_TOKEN = os.environ.get("ORDER_DESK_TOKEN") or None
API_TIMEOUT_SECONDS = 10.0

EXPORT_DIR = os.environ.get("ORDER_DESK_EXPORT_DIR", "exports")
DEBUG_LOG_PATH = "/tmp/order-desk-debug.log"
CURRENCY_SYMBOL = "$"

PRINTER_USB_VENDOR_ID = 0x28E9
PRINTER_USB_PRODUCT_ID = 0x0289
PRINTER_WIDTH_PX = 384
PRINTER_FONT_SIZE = 28
PRINTER_FONT_PATH = "/System/Library/Fonts/SFNS.ttf"
PRINTER_LEFT_INDENT_PX = 8
PRINTER_TAIL_SPACER_PX = 70
