"""Shared console for the quoteflow CLI."""

from __future__ import annotations

from rich.console import Console

from quoteflow.ui.theme import THEME

_CONSOLE = Console(theme=THEME, highlight=False)


def get_console() -> Console:
    return _CONSOLE
