"""Render helpers for the quoteflow CLI."""

from __future__ import annotations

from typing import Mapping, Sequence

from rich import box
from rich.console import Group
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.table import Table
from rich.text import Text

from quoteflow.catalog import Category
from quoteflow.ui.console import get_console
from quoteflow.wizard.schema import FieldSchema, StepSchema


def _panel(body, title: str, *, border_style: str = "border") -> Panel:
    return Panel(
        body,
        title=Text(title, style="step"),
        title_align="left",
        box=box.ROUNDED,
        border_style=border_style,
        padding=(0, 2),
        expand=True,
    )


def render_banner(title: str, subtitle: str) -> None:
    console = get_console()
    console.print(_panel(Group(Text(subtitle, style="subtitle")), title))
    console.print()


def render_step_header(
    position: int,
    total: int,
    title: str,
    subtitle: str | None,
    progress: float,
) -> None:
    console = get_console()
    content = [
        ProgressBar(total=100, completed=round(progress * 100), style="border", complete_style="accent"),
    ]
    if subtitle:
        content.append(Text(subtitle, style="subtitle"))
    console.print(_panel(Group(*content), f"Adım {position}/{total} · {title}"))


def render_field_label(field: FieldSchema) -> None:
    label = Text(field.label, style="value")
    if field.required:
        label.append(" *", style="required")
    if field.description:
        label.append(f"\n{field.description}", style="subtitle")
    get_console().print(label)


def render_field_error(text: str) -> None:
    get_console().print(text, style="field.error", markup=False)


def render_choice_options(field: FieldSchema, selected: str | None) -> None:
    console = get_console()
    for index, option in enumerate(field.options, start=1):
        marker = "(x)" if option.option_id == selected else "( )"
        style = "option.selected" if option.option_id == selected else "option"
        line = Text(f"{index:>2} {marker} {option.title}", style=style)
        if option.description:
            line.append(f" · {option.description}", style="subtitle")
        console.print(line)


def render_info(text: str) -> None:
    get_console().print(text, style="info", markup=False)


def render_warning(text: str) -> None:
    get_console().print(text, style="warning", markup=False)


def render_success(text: str, detail: str | None = None) -> None:
    console = get_console()
    if detail is None:
        console.print(text, style="success", markup=False)
        return
    console.print(
        Panel(
            Group(Text(text, style="success"), Text(detail, style="subtitle")),
            box=box.ROUNDED,
            border_style="success",
            padding=(0, 2),
            expand=True,
        )
    )


def render_error(text: str) -> None:
    get_console().print(
        Panel(
            Text(text, style="error"),
            box=box.ROUNDED,
            border_style="error",
            padding=(0, 2),
            expand=True,
        )
    )


def render_summary_table(rows: Mapping[str, str] | Sequence[tuple[str, str]], title: str = "Özet") -> None:
    console = get_console()
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column(style="label", no_wrap=True, justify="right")
    table.add_column(style="value")
    items = rows.items() if hasattr(rows, "items") else rows
    for key, value in items:
        table.add_row(Text(str(key), style="label"), Text(str(value), style="value"))
    console.print()
    console.print(_panel(table, title))


def render_validation_panel(title: str, issues: Sequence[str], *, style: str) -> None:
    lines = [Text(f"- {issue}", style=style) for issue in issues]
    get_console().print(_panel(Group(*lines), title))


def render_category_table(categories: Sequence[Category]) -> None:
    table = Table(box=box.SIMPLE_HEAD, pad_edge=False)
    table.add_column("#", style="label", justify="right")
    table.add_column("Kategori", style="value", no_wrap=True)
    table.add_column("Açıklama", style="subtitle")
    for index, category in enumerate(categories, start=1):
        table.add_row(str(index), category.name, category.description)
    get_console().print(table)


def render_steps_overview(steps: Sequence[StepSchema]) -> None:
    console = get_console()
    for step in steps:
        table = Table(box=None, pad_edge=False, show_header=True)
        table.add_column("id", style="accent", no_wrap=True)
        table.add_column("label", style="value")
        table.add_column("kind", style="label", no_wrap=True)
        table.add_column("flags", style="label")
        for field in step.fields:
            flags = []
            if field.required:
                flags.append("required")
            if field.restricted_to_privileged_user:
                flags.append("pro")
            if field.units:
                flags.append("units=" + "/".join(field.units))
            table.add_row(field.id, field.label, field.kind, ", ".join(flags))
        group = [table]
        if step.subtitle:
            group.insert(0, Text(step.subtitle, style="subtitle"))
        console.print(_panel(Group(*group), f"{step.step} · {step.title}"))
