"""Rendering helpers for dish rows, tag badges and the filter bar."""

from __future__ import annotations

from rich.text import Text

from potluck.data import DIETARY_TAGS
from potluck.models import DishRecord, FilterSpec


def badge_style(tag: str) -> str:
    """Return a consistent badge style for dietary tags."""
    if tag == "vegan":
        return "bold #0b1f0f on #5fbf72"
    if tag == "gf":
        return "bold #1f1600 on #e0b040"
    return "bold #ffffff on #2f6db5"


def format_dish_label(record: DishRecord) -> Text:
    """Render "<dish> by <guest>"."""
    text = Text()
    text.append(record.dish_name, style="bold")
    text.append(f"  by {record.guest_name}", style="dim")
    return text


def format_dish_tags(record: DishRecord) -> Text:
    """Render true flags as compact badges."""
    text = Text()
    first = True
    for attr, label, tag in DIETARY_TAGS:
        if not getattr(record, attr):
            continue
        if not first:
            text.append(" ")
        text.append(f" {label} ", style=badge_style(tag))
        first = False
    return text


def format_filter_bar(spec: FilterSpec, *, typing_search: bool = False) -> Text:
    """Render the filter toggles and current search text."""
    text = Text()
    toggles = [
        ("v", "Vegan", "vegan", spec.only_vegan),
        ("g", "Gluten Free", "gf", spec.only_gluten_free),
        ("l", "Lactose Free", "lf", spec.only_lactose_free),
    ]
    for idx, (key, label, tag, active) in enumerate(toggles):
        if idx > 0:
            text.append("  ")
        checked = "[x]" if active else "[ ]"
        text.append(f"{key} {checked} ")
        text.append(label, style=badge_style(tag) if active else "")

    text.append("\n/ Search: ")
    text.append(spec.search_text)
    if typing_search:
        text.append("|", style="bold")
    return text


def format_status(help_lines: str, message: str) -> Text:
    """Render key help and the status line. User text is never parsed as markup."""
    text = Text(help_lines, style="dim")
    text.append("\n\n")
    text.append(message or "Ready")
    return text
