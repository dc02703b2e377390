"""Interactive prompts used by the CLI flows."""

from __future__ import annotations

from typing import Sequence

import typer

from quoteflow.ui.render import render_warning


def prompt_choice(prompt: str, choices: Sequence[str], default: str) -> str:
    normalized_choices = {choice.lower(): choice for choice in choices}
    while True:
        response = typer.prompt(f"{prompt} ({'/'.join(choices)})", default=default)
        normalized = response.strip().lower()
        if normalized in normalized_choices:
            return normalized_choices[normalized]
        render_warning(f"Geçersiz seçim: {response}. Seçenekler: {', '.join(choices)}.")


def prompt_numbered(prompt: str, options: Sequence[str], default_index: int | None = None) -> int:
    """Ask for a 1-based option number and return the 0-based index."""
    default = str(default_index + 1) if default_index is not None else None
    while True:
        response = typer.prompt(prompt, default=default, show_default=default is not None)
        try:
            value = int(str(response).strip())
        except ValueError:
            render_warning("Lütfen bir numara girin.")
            continue
        if 1 <= value <= len(options):
            return value - 1
        render_warning(f"1 ile {len(options)} arasında bir değer girin.")


def prompt_text(prompt: str, default: str = "") -> str:
    return typer.prompt(prompt, default=default, show_default=bool(default))


def prompt_yes_no(prompt: str, default: bool = False) -> bool:
    default_value = "e" if default else "h"
    while True:
        response = typer.prompt(f"{prompt} (e/h)", default=default_value)
        normalized = response.strip().lower()
        if normalized in {"e", "evet", "y", "yes"}:
            return True
        if normalized in {"h", "hayır", "hayir", "n", "no"}:
            return False
        render_warning("Lütfen e veya h girin.")
