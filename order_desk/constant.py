"""Editable static instruction and status configuration."""

from __future__ import annotations

INSTRUCTION_PRESETS: dict[str, str] = {
    "no_onions": "No onions",
    "no_garlic": "No garlic",
    "no_nuts": "No nuts",
    "no_dairy": "No dairy",
    "gluten_free": "Gluten free",
    "extra_sauce": "Extra sauce",
    "sauce_on_side": "Sauce on the side",
    "less_spicy": "Less spicy",
    "extra_spicy": "Extra spicy",
    "well_done": "Well done",
    "medium_rare": "Medium rare",
    "no_ice": "No ice",
}

CATEGORY_INSTRUCTION_DEFAULTS: dict[str, list[str]] = {
    "Mains": ["no_onions", "no_garlic", "less_spicy", "extra_spicy", "well_done", "medium_rare", "sauce_on_side"],
    "Starters": ["no_onions", "no_nuts", "gluten_free", "sauce_on_side"],
    "Desserts": ["no_nuts", "no_dairy", "gluten_free"],
    "Drinks": ["no_ice"],
}

FALLBACK_INSTRUCTIONS: list[str] = ["no_onions", "no_nuts", "no_dairy", "gluten_free", "extra_sauce"]

INSTRUCTION_SEPARATOR = ", "

STATUS_STYLES: dict[str, str] = {
    "pending": "bold #1f1f1f on #f2c94c",
    "confirmed": "bold #ffffff on #2f6db5",
    "preparing": "bold #ffffff on #d9822b",
    "ready": "bold #0b1f0f on #5fbf72",
    "served": "bold #ffffff on #6b6b6b",
    "cancelled": "bold #ffffff on #b23a48",
}

ORDER_TYPE_LABELS: dict[str, str] = {
    "dine-in": "Dine-in",
    "takeaway": "Takeaway",
    "delivery": "Delivery",
}
