"""Kitchen board Textual app: order statuses, stats and exports."""

from __future__ import annotations

import logging

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.widgets import Header, Static

from order_desk.api import DashboardClient
from order_desk.cart_app import visible_rows, window_bounds
from order_desk.config import EXPORT_DIR
from order_desk.export import export_paths, export_stats_csv, export_stats_workbook
from order_desk.models import Order, OrderStatus, StatsData, can_transition, next_status
from order_desk.printer import check_printer_dependencies, print_kitchen_ticket, print_stats_report
from order_desk.rendering import format_order_card, format_stats_panel

logger = logging.getLogger(__name__)

STATUS_FILTERS: tuple[str, ...] = ("all", *(status.value for status in OrderStatus))


class KitchenApp(App):
    """A Textual app for tracking orders through the kitchen."""

    TITLE = "Order Desk"
    SUB_TITLE = "Kitchen"

    CSS = """
    Screen {
        layout: vertical;
    }

    #main-layout {
        height: 1fr;
    }

    #orders-pane {
        width: 3fr;
        border: round $primary;
        padding: 1;
    }

    #stats-pane {
        width: 2fr;
        border: round $secondary;
        padding: 1;
    }

    #orders-list {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #stats-panel {
        height: 1fr;
    }

    #status-bar {
        border: heavy $secondary;
        padding: 0 1;
        height: 4;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    BINDINGS = [
        ("j", "move_selection(1)", "Next"),
        ("k", "move_selection(-1)", "Previous"),
        ("down", "move_selection(1)", "Next"),
        ("up", "move_selection(-1)", "Previous"),
        ("f", "cycle_filter", "Filter"),
        ("a", "advance_status", "Advance"),
        ("c", "cancel_order", "Cancel order"),
        ("r", "refresh", "Refresh"),
        ("e", "export_stats", "Export stats"),
        ("p", "print_ticket", "Print ticket"),
        ("s", "print_stats", "Print stats"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, client: DashboardClient, export_dir: str = EXPORT_DIR) -> None:
        super().__init__()
        self.client = client
        self.export_dir = export_dir
        self.orders: list[Order] = []
        self.stats = StatsData.empty()
        self.filter_index = 0
        self.selected_index: int | None = None
        self.system_status = ""
        self.printer_ready = False

    @property
    def status_filter(self) -> str:
        return STATUS_FILTERS[self.filter_index]

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-layout"):
            with Vertical(id="orders-pane"):
                yield Static(id="orders-title", classes="pane-title")
                yield Static("(no orders)", id="orders-list")
            with Vertical(id="stats-pane"):
                yield Static("Kitchen Stats", classes="pane-title")
                yield Static(id="stats-panel")
                yield Static(id="status-bar")

    def on_mount(self) -> None:
        self.printer_ready, printer_status = check_printer_dependencies()
        logger.debug("printer status: %s", printer_status)
        self.action_refresh()
        if not self.printer_ready:
            self._set_status(printer_status)

    def action_refresh(self) -> None:
        orders = self.client.list_orders(self.status_filter)
        if orders.ok:
            self.orders = orders.value
            self.system_status = f"{len(self.orders)} orders"
        else:
            self.orders = []
            self.system_status = orders.error

        stats = self.client.fetch_stats()
        if stats.ok:
            self.stats = stats.value
        else:
            self.stats = StatsData.empty()
            if orders.ok:
                self.system_status = stats.error
        self._refresh_all()

    def action_cycle_filter(self) -> None:
        self.filter_index = (self.filter_index + 1) % len(STATUS_FILTERS)
        self.selected_index = None
        self.action_refresh()

    def action_move_selection(self, delta: int) -> None:
        if not self.orders:
            return
        if self.selected_index is None:
            self.selected_index = 0 if delta > 0 else len(self.orders) - 1
        else:
            self.selected_index = (self.selected_index + delta) % len(self.orders)
        self._refresh_orders()

    def action_advance_status(self) -> None:
        order = self._selected_order()
        if order is None:
            return
        target = next_status(order.status)
        if target is None:
            self._set_status(f"Order is already {order.status.value}")
            return
        self._update_status(order, target)

    def action_cancel_order(self) -> None:
        order = self._selected_order()
        if order is None:
            return
        self._update_status(order, OrderStatus.CANCELLED)

    def action_export_stats(self) -> None:
        csv_path, xlsx_path = export_paths(self.export_dir)
        try:
            export_stats_csv(self.stats, csv_path)
            export_stats_workbook(self.stats, xlsx_path)
        except OSError as exc:
            logger.warning("stats export failed: %s", exc)
            self._set_status(f"Export failed: {exc}")
            return
        self._set_status(f"Exported {csv_path.name} and {xlsx_path.name}")

    def action_print_ticket(self) -> None:
        order = self._selected_order()
        if order is None:
            return
        try:
            print_kitchen_ticket(order)
        except Exception as exc:
            logger.warning("ticket print failed for %s: %r", order.id, exc)
            self._set_status(f"Print failed: {exc}")
            return
        self._set_status(f"Printed ticket {order.id[-6:]}")

    def action_print_stats(self) -> None:
        try:
            print_stats_report(self.stats)
        except Exception as exc:
            logger.warning("stats print failed: %r", exc)
            self._set_status(f"Print failed: {exc}")
            return
        self._set_status("Printed stats report")

    def _update_status(self, order: Order, target: OrderStatus) -> None:
        if not can_transition(order.status, target):
            self._set_status(f"Cannot move order from {order.status.value} to {target.value}")
            return
        result = self.client.update_order_status(order.id, target.value)
        if not result.ok:
            self._set_status(result.error)
            return
        self.action_refresh()
        self._set_status(f"Order {order.id[-6:]} → {target.value}")

    def _selected_order(self) -> Order | None:
        if self.selected_index is None or not (0 <= self.selected_index < len(self.orders)):
            return None
        return self.orders[self.selected_index]

    def _set_status(self, message: str) -> None:
        self.system_status = message
        self._refresh_status_bar()

    def _refresh_all(self) -> None:
        self._refresh_orders()
        try:
            self.query_one("#stats-panel", Static).update(format_stats_panel(self.stats))
        except NoMatches:
            return
        self._refresh_status_bar()

    def _refresh_status_bar(self) -> None:
        try:
            bar = self.query_one("#status-bar", Static)
        except NoMatches:
            return
        bar.update(f"F filter, A advance, C cancel, R refresh, E export, P/S print\n{self.system_status or 'Ready'}")

    def _refresh_orders(self) -> None:
        try:
            title = self.query_one("#orders-title", Static)
            orders_widget = self.query_one("#orders-list", Static)
        except NoMatches:
            return
        title.update(f"Orders ({self.status_filter})")

        if not self.orders:
            self.selected_index = None
            orders_widget.update("(no orders)")
            return

        if self.selected_index is not None and self.selected_index >= len(self.orders):
            self.selected_index = len(self.orders) - 1

        # Cards span several lines; show roughly one card per four rows.
        rows = max(1, visible_rows(orders_widget) // 4)
        start, end = window_bounds(len(self.orders), rows, self.selected_index)

        lines = Text()
        if start > 0:
            lines.append("⋮\n", style="dim")
        for idx in range(start, end):
            if idx > start:
                lines.append("\n\n")
            lines.append("➤ " if idx == self.selected_index else "  ")
            lines.append_text(format_order_card(self.orders[idx]))
        if end < len(self.orders):
            lines.append("\n⋮", style="dim")

        orders_widget.update(lines)
