"""Modal dialogs for the waiter cart: table number and special instructions."""

from __future__ import annotations

from typing import Iterable

from textual.app import ComposeResult
from textual.containers import Container
from textual.screen import ModalScreen
from textual.widgets import Input, SelectionList, Static

from order_desk.constant import INSTRUCTION_PRESETS
from order_desk.data import available_instructions, join_instructions, split_instructions
from order_desk.models import OrderLineItem
from order_desk.rendering import format_line_item

MAX_TABLE_NUMBER = 999
_PRESET_PREFIX = "preset:"
_NOTE_PREFIX = "note:"

DIALOG_CSS = """
{screen} {{
    align: center middle;
    background: $background 60%;
}}

{screen} .dialog {{
    width: 64;
    height: auto;
    border: round $secondary;
    background: $panel;
    padding: 1 2;
}}

{screen} .dialog-title {{
    text-style: bold;
    margin-bottom: 1;
}}

{screen} .dialog-error {{
    color: #ffb3b3;
}}

{screen} .dialog-help {{
    color: #dddddd;
    margin-top: 1;
}}
"""


def parse_table_number(text: str) -> int | None:
    """Table number from user input, or None unless it is 1..MAX_TABLE_NUMBER."""
    text = text.strip()
    if not text.isdigit():
        return None
    number = int(text)
    if not 1 <= number <= MAX_TABLE_NUMBER:
        return None
    return number


def instruction_options(item: OrderLineItem) -> tuple[list[tuple[str, str, bool]], list[str]]:
    """Selection rows (label, value, checked) for an item, plus its free-form notes."""
    selected_presets, custom_notes = split_instructions(item.special_instructions)
    preset_ids = available_instructions(item.menu_item)
    preset_ids += [preset_id for preset_id in INSTRUCTION_PRESETS if preset_id in selected_presets - set(preset_ids)]
    options = [
        (INSTRUCTION_PRESETS[preset_id], f"{_PRESET_PREFIX}{preset_id}", preset_id in selected_presets)
        for preset_id in preset_ids
    ]
    options += [(note, f"{_NOTE_PREFIX}{note}", True) for note in custom_notes]
    return options, custom_notes


def instructions_from_selection(selected: Iterable[str], custom_notes: list[str]) -> str:
    """Instruction text for the checked preset and note options."""
    chosen = set(selected)
    presets = {value[len(_PRESET_PREFIX):] for value in chosen if value.startswith(_PRESET_PREFIX)}
    notes = [note for note in custom_notes if f"{_NOTE_PREFIX}{note}" in chosen]
    return join_instructions(presets, notes)


class TableNumberModal(ModalScreen[int | None]):
    """Ask for the table number before submitting the cart."""

    DEFAULT_CSS = DIALOG_CSS.format(screen="TableNumberModal")
    BINDINGS = [("escape", "cancel", "Cancel")]

    def compose(self) -> ComposeResult:
        with Container(classes="dialog"):
            yield Static("Table Number", classes="dialog-title")
            yield Input(placeholder=f"1-{MAX_TABLE_NUMBER}", type="integer", max_length=3, id="table-number")
            yield Static(id="table-number-error", classes="dialog-error")
            yield Static("Enter confirm. Esc cancel.", classes="dialog-help")

    def on_mount(self) -> None:
        self.query_one("#table-number", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        number = parse_table_number(event.value)
        if number is None:
            self.query_one("#table-number-error", Static).update(
                f"Table number must be between 1 and {MAX_TABLE_NUMBER}."
            )
            return
        self.dismiss(number)

    def action_cancel(self) -> None:
        self.dismiss(None)


class InstructionsModal(ModalScreen[str | None]):
    """Check preset instructions and add free-form notes for one cart line.

    Dismisses with the new instruction text, or None when nothing changed.
    """

    DEFAULT_CSS = DIALOG_CSS.format(screen="InstructionsModal")
    BINDINGS = [("escape", "save", "Save and close")]

    def __init__(self, item: OrderLineItem) -> None:
        super().__init__()
        self.item = item
        self._options, self.custom_notes = instruction_options(item)

    def compose(self) -> ComposeResult:
        with Container(classes="dialog"):
            yield Static("Special Instructions", classes="dialog-title")
            yield Static(format_line_item(self.item))
            yield SelectionList[str](*self._options, id="instructions-options")
            yield Input(placeholder="Other note, Enter to add", id="instructions-other")
            yield Static("Space toggle, Tab switch field, Esc save and close", classes="dialog-help")

    def on_mount(self) -> None:
        self.query_one(SelectionList).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        note = event.value.strip()
        event.input.value = ""
        if not note or note in self.custom_notes:
            return
        self.custom_notes.append(note)
        self.query_one(SelectionList).add_option((note, f"{_NOTE_PREFIX}{note}", True))

    def action_save(self) -> None:
        text = instructions_from_selection(self.query_one(SelectionList).selected, self.custom_notes)
        self.dismiss(text if text != self.item.special_instructions else None)
