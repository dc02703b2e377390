"""Rich theme for the quoteflow CLI."""

from __future__ import annotations

from rich.theme import Theme

THEME = Theme(
    {
        "accent": "bright_blue",
        "step": "bold bright_blue",
        "subtitle": "dim",
        "border": "grey50",
        "info": "dim",
        "warning": "dark_orange",
        "success": "green3",
        "error": "bold red3",
        "field.error": "red3",
        "label": "dim",
        "value": "white",
        "required": "red3",
        "option": "white",
        "option.selected": "bold bright_blue",
    }
)
