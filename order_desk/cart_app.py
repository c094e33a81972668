"""Waiter cart Textual app."""

from __future__ import annotations

import logging

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.events import Key
from textual.reactive import reactive
from textual.widgets import Header, Static

from order_desk.api import DashboardClient
from order_desk.data import filter_menu, menu_categories
from order_desk.export import format_money
from order_desk.manager import OrderManager
from order_desk.modals import InstructionsModal, TableNumberModal
from order_desk.models import MenuItemRef, OrderLineItem, OrderSubmission
from order_desk.rendering import format_line_item, format_total
from order_desk.result import Err, Result

logger = logging.getLogger(__name__)


def window_bounds(total: int, rows: int, selected: int | None) -> tuple[int, int]:
    """Visible [start, end) slice that keeps the selected row on screen."""
    if total <= 0:
        return (0, 0)

    rows = max(1, rows)
    if total <= rows:
        return (0, total)

    if selected is None:
        start = 0
    else:
        start = selected - rows // 2
        start = max(0, start)
        start = min(start, total - rows)

    return (start, start + rows)


def visible_rows(widget: Static) -> int:
    height = widget.size.height
    if height <= 0:
        return 8
    return max(1, height)


def apply_instructions(manager: OrderManager, item: OrderLineItem, text: str) -> Result[list[OrderLineItem], str]:
    """Save instructions for a cart line, failing if the line was removed meanwhile."""
    current = manager.load()
    if not current.ok:
        return current
    if all(line.item_id != item.item_id for line in current.value):
        return Err(f"{item.menu_item.name} is no longer in the order")
    return manager.update_instructions(item.item_id, text)


def next_category(menu: list[MenuItemRef], current: str | None) -> str | None:
    """Category after `current`, wrapping through None (all items)."""
    choices: list[str | None] = [None, *menu_categories(menu)]
    position = choices.index(current) if current in choices else 0
    return choices[(position + 1) % len(choices)]


class CartApp(App):
    """A Textual app for composing a table's order from the menu."""

    TITLE = "Order Desk"
    SUB_TITLE = "Waiter cart"

    CSS = """
    Screen {
        layout: vertical;
    }

    #main-layout {
        height: 1fr;
    }

    #cart-pane {
        width: 3fr;
        border: round $primary;
        padding: 1;
    }

    #menu-pane {
        width: 2fr;
        border: round $secondary;
        padding: 1;
    }

    #search-bar {
        border: heavy $secondary;
        padding: 0 1;
        margin-bottom: 1;
        height: 4;
    }

    #results {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #cart-list {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #cart-total {
        height: 1;
        margin-top: 1;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    input_state = reactive("normal")
    search_text = reactive("")
    selected_index = reactive(0)
    cart_selected_index = reactive(None)

    BINDINGS = [
        ("tab", "cycle_results(1)", "Next result"),
        ("up", "cycle_results(-1)", "Previous result"),
        ("down", "cycle_results(1)", "Next result"),
        ("enter", "add_selected", "Add item"),
        ("backspace", "backspace_search", "Delete search char"),
        Binding("ctrl+s", "submit_order", "Submit", priority=True),
        ("ctrl+c", "cancel_search", "Exit search"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        manager: OrderManager,
        client: DashboardClient | None = None,
        menu: list[MenuItemRef] | None = None,
    ) -> None:
        super().__init__()
        self.manager = manager
        self.client = client
        self.menu: list[MenuItemRef] = list(menu or [])
        self.cart_items: list[OrderLineItem] = []
        self.category: str | None = None
        self.system_status = ""

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-layout"):
            with Vertical(id="cart-pane"):
                yield Static("Current Order", classes="pane-title")
                yield Static("(no items yet)", id="cart-list")
                yield Static(id="cart-total")
            with Vertical(id="menu-pane"):
                yield Static(id="search-bar")
                yield Static(id="results")

    def on_mount(self) -> None:
        if not self.menu and self.client is not None:
            menu = self.client.fetch_menu()
            if menu.ok:
                self.menu = menu.value
            else:
                self.system_status = menu.error
        self._apply(self.manager.load())

    def on_key(self, event: Key) -> None:
        if isinstance(self.screen, (InstructionsModal, TableNumberModal)):
            return

        if not event.is_printable or not event.character or len(event.character) != 1:
            return

        key = event.character
        if self.input_state == "normal":
            handled = self._handle_normal_key(key.lower())
            if handled:
                event.stop()
            return

        self.search_text += key
        self.selected_index = 0
        self._refresh_search()
        event.stop()

    def _handle_normal_key(self, key: str) -> bool:
        if key in {"/", "s"}:
            self.input_state = "active"
            self.search_text = ""
            self.selected_index = 0
            self._refresh_search()
            return True
        if key == "j":
            self._move_cart_selection(1)
        elif key == "k":
            self._move_cart_selection(-1)
        elif key in {"+", "="}:
            self._change_selected_quantity(1)
        elif key == "-":
            self._change_selected_quantity(-1)
        elif key == "d":
            selected = self._selected_item()
            if selected is not None:
                self._apply(self.manager.remove(selected.item_id))
        elif key == "n":
            self._open_instructions_for_selected()
        elif key == "c":
            self._cycle_category()
        elif key == "x":
            cleared = self.manager.clear()
            if cleared.ok:
                self.cart_items = []
                self.system_status = "Order cleared"
            else:
                self.system_status = cleared.error
            self._refresh_all()
        else:
            return False
        return True

    def action_cancel_search(self) -> None:
        if self.input_state == "normal":
            return
        self.input_state = "normal"
        self.search_text = ""
        self.selected_index = 0
        self._refresh_search()

    def action_cycle_results(self, delta: int) -> None:
        if self.input_state != "active":
            return

        results = self._filtered_results()
        if not results:
            self.selected_index = 0
            self._refresh_results(results)
            return
        self.selected_index = (self.selected_index + delta) % len(results)
        self._refresh_results(results)

    def action_add_selected(self) -> None:
        if self.input_state != "active":
            return

        results = self._filtered_results()
        if not results:
            return

        menu_item = results[self.selected_index]
        result = self._apply(self.manager.add(OrderLineItem(menu_item=menu_item, quantity=1)))
        if result.ok:
            self.cart_selected_index = next(
                (idx for idx, item in enumerate(self.cart_items) if item.item_id == menu_item.id), None
            )
            self.system_status = f"Added {menu_item.name}"
            self._refresh_all()

    def action_backspace_search(self) -> None:
        if self.input_state != "active" or not self.search_text:
            return
        self.search_text = self.search_text[:-1]
        self.selected_index = 0
        self._refresh_search()

    def action_submit_order(self) -> None:
        if isinstance(self.screen, (InstructionsModal, TableNumberModal)):
            return
        if self.input_state != "normal":
            self.system_status = "Submit only in NORMAL mode (Ctrl+C to exit search)"
            self._refresh_search()
            return
        if not self.cart_items:
            self.system_status = "Nothing to submit"
            self._refresh_search()
            return
        if self.client is None:
            self.system_status = "Order API is not configured"
            self._refresh_search()
            return
        self.push_screen(TableNumberModal(), self._submit_for_table)

    def _submit_for_table(self, table_number: int | None) -> None:
        if table_number is None:
            return
        submission = OrderSubmission(
            items=list(self.cart_items),
            table_number=table_number,
            customer_name=f"Table {table_number}",
        )
        result = self.manager.submit(submission, self.client)
        if result.ok:
            self.cart_items = []
            self.cart_selected_index = None
            self.system_status = f"Submitted order {result.value}"
        else:
            self.system_status = result.error
        self._refresh_all()

    def _apply(self, result: Result[list[OrderLineItem], str]) -> Result[list[OrderLineItem], str]:
        if result.ok:
            self.cart_items = result.value
        else:
            self.system_status = result.error
            logger.debug("cart action failed: %s", result.error)
        self._refresh_all()
        return result

    def _filtered_results(self) -> list[MenuItemRef]:
        return filter_menu(self.menu, self.search_text, self.category)

    def _cycle_category(self) -> None:
        self.category = next_category(self.menu, self.category)
        self.selected_index = 0
        self.system_status = f"Category: {self.category or 'All'}"
        self._refresh_search()

    def _selected_item(self) -> OrderLineItem | None:
        if self.cart_selected_index is None:
            return None
        if not (0 <= self.cart_selected_index < len(self.cart_items)):
            return None
        return self.cart_items[self.cart_selected_index]

    def _move_cart_selection(self, delta: int) -> None:
        if not self.cart_items:
            return
        if self.cart_selected_index is None:
            self.cart_selected_index = 0 if delta > 0 else len(self.cart_items) - 1
        else:
            self.cart_selected_index = (self.cart_selected_index + delta) % len(self.cart_items)
        self._refresh_cart()

    def _change_selected_quantity(self, delta: int) -> None:
        selected = self._selected_item()
        if selected is None:
            return
        self._apply(self.manager.update_quantity(selected.item_id, selected.quantity + delta))

    def _open_instructions_for_selected(self) -> None:
        selected = self._selected_item()
        if selected is None:
            return

        def save(text: str | None) -> None:
            if text is not None:
                self._apply(apply_instructions(self.manager, selected, text))

        self.push_screen(InstructionsModal(selected), save)

    def _refresh_all(self) -> None:
        self._refresh_cart()
        self._refresh_search()

    def _refresh_cart(self) -> None:
        try:
            cart_widget = self.query_one("#cart-list", Static)
            total_widget = self.query_one("#cart-total", Static)
        except NoMatches:
            return

        total = self.manager.calculate_total()
        total_widget.update(format_total(total.value) if total.ok else Text(total.error, style="#ffb3b3"))

        if not self.cart_items:
            self.cart_selected_index = None
            cart_widget.update("(no items yet)")
            return

        if self.cart_selected_index is not None and self.cart_selected_index >= len(self.cart_items):
            self.cart_selected_index = len(self.cart_items) - 1

        start, end = window_bounds(len(self.cart_items), visible_rows(cart_widget), self.cart_selected_index)

        lines = Text()
        if start > 0:
            lines.append("⋮\n", style="dim")

        for idx in range(start, end):
            if idx > start:
                lines.append("\n")
            pointer = "➤ " if idx == self.cart_selected_index else "  "
            lines.append(pointer)
            lines.append(f"{idx + 1}. ")
            lines.append_text(format_line_item(self.cart_items[idx]))

        if end < len(self.cart_items):
            lines.append("\n⋮", style="dim")

        cart_widget.update(lines)

    def _refresh_search(self) -> None:
        self._refresh_search_bar()
        if self.input_state == "normal":
            self._refresh_results([])
            return
        self._refresh_results(self._filtered_results())

    def _refresh_search_bar(self) -> None:
        try:
            bar = self.query_one("#search-bar", Static)
        except NoMatches:
            return
        if self.input_state == "normal":
            status = self.system_status or "Ready"
            bar.update(f"/ search, C category, J/K select, +/- qty, D remove, N notes, X clear, Ctrl+S submit\n{status}")
            return

        text = Text()
        text.append("Search", style="bold")
        text.append(f": {self.search_text}")
        text.append(f"\n{self.category or 'All categories'}", style="dim")
        bar.update(text)

    def _refresh_results(self, results: list[MenuItemRef]) -> None:
        try:
            results_widget = self.query_one("#results", Static)
        except NoMatches:
            return
        if self.input_state == "normal":
            results_widget.update("")
            return

        if not results:
            results_widget.update("No results")
            return

        if self.selected_index >= len(results):
            self.selected_index = 0

        start, end = window_bounds(len(results), visible_rows(results_widget), self.selected_index)

        lines = Text()
        if start > 0:
            lines.append("⋮\n", style="dim")

        for idx in range(start, end):
            if idx > start:
                lines.append("\n")
            pointer = "➤ " if idx == self.selected_index else "  "
            lines.append(f"{pointer}{results[idx].name}")
            lines.append(f"  {format_money(results[idx].price)}", style="dim")

        if end < len(results):
            lines.append("\n⋮", style="dim")

        results_widget.update(lines)
