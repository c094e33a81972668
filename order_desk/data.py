"""Menu search and special-instruction helpers."""

from __future__ import annotations

from order_desk.constant import (
    CATEGORY_INSTRUCTION_DEFAULTS,
    FALLBACK_INSTRUCTIONS,
    INSTRUCTION_PRESETS,
    INSTRUCTION_SEPARATOR,
)
from order_desk.models import MenuItemRef


def filter_menu(items: list[MenuItemRef], query: str = "", category: str | None = None) -> list[MenuItemRef]:
    """Case-insensitive search over name, description and category."""
    q = query.strip().lower()
    results = []
    for item in items:
        if category and item.category != category:
            continue
        if q and q not in item.name.lower() and q not in item.description.lower() and q not in item.category.lower():
            continue
        results.append(item)
    return results


def menu_categories(items: list[MenuItemRef]) -> list[str]:
    """Distinct categories in first-seen order."""
    seen: dict[str, None] = {}
    for item in items:
        if item.category:
            seen.setdefault(item.category, None)
    return list(seen)


def available_instructions(item: MenuItemRef) -> list[str]:
    """Preset instruction ids offered for a menu item's category."""
    preset_ids = CATEGORY_INSTRUCTION_DEFAULTS.get(item.category, FALLBACK_INSTRUCTIONS)
    return [preset_id for preset_id in preset_ids if preset_id in INSTRUCTION_PRESETS]


def split_instructions(text: str) -> tuple[set[str], list[str]]:
    """Split an instruction string into preset ids and free-form notes.

    Only parts that exactly match a preset label are taken as presets. Runs of
    other parts are rejoined into one note, so a note may itself contain the
    separator.
    """
    by_label = {label.lower(): preset_id for preset_id, label in INSTRUCTION_PRESETS.items()}
    presets: set[str] = set()
    runs: list[list[str]] = [[]]
    for part in text.split(INSTRUCTION_SEPARATOR):
        preset_id = by_label.get(part.strip().lower())
        if preset_id is None:
            runs[-1].append(part)
            continue
        presets.add(preset_id)
        runs.append([])

    custom: list[str] = []
    for run in runs:
        note = INSTRUCTION_SEPARATOR.join(run).strip()
        if note and note not in custom:
            custom.append(note)
    return presets, custom


def join_instructions(preset_ids: set[str], custom_notes: list[str]) -> str:
    """Inverse of split_instructions; presets keep catalog order."""
    labels = [label for preset_id, label in INSTRUCTION_PRESETS.items() if preset_id in preset_ids]
    labels.extend(note for note in custom_notes if note.strip())
    return INSTRUCTION_SEPARATOR.join(labels)
