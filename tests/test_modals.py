import pytest

from order_desk.modals import instruction_options, instructions_from_selection, parse_table_number

from conftest import make_item


@pytest.mark.parametrize(
    ("text", "expected"),
    [("7", 7), (" 12 ", 12), ("999", 999), ("0", None), ("1000", None), ("", None), ("-3", None), ("4b", None)],
)
def test_parse_table_number(text, expected):
    assert parse_table_number(text) == expected


def test_instructions_from_selection_keeps_note_order():
    selected = ["note:extra napkins", "preset:no_ice", "note:Sauce: mayo, ketchup"]

    text = instructions_from_selection(selected, ["Sauce: mayo, ketchup", "extra napkins", "unchecked"])

    assert text == "No ice, Sauce: mayo, ketchup, extra napkins"


def test_instruction_options_list_presets_and_existing_notes():
    item = make_item("D", name="Cola", category="Drinks", special_instructions="No nuts, Lemon slice, no straw")

    options, notes = instruction_options(item)

    assert notes == ["Lemon slice, no straw"]
    assert options == [
        ("No ice", "preset:no_ice", False),
        ("No nuts", "preset:no_nuts", True),
        ("Lemon slice, no straw", "note:Lemon slice, no straw", True),
    ]
