"""CLI entrypoint for quoteflow."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Optional

import typer

from quoteflow.catalog import Category, find_category, load_categories, resolve_category
from quoteflow.config import Settings, load_settings
from quoteflow.env import load_dotenv
from quoteflow.flows import (
    DISPUTE_REASONS,
    DisputeFlow,
    ReportFlow,
    dispute_submitter,
    quote_submitter,
    report_submitter,
)
from quoteflow.geolocation import GeolocationProvider, StaticGeolocation, create_provider
from quoteflow.log import configure_logging
from quoteflow.messages import (
    BUTTON_SUBMITTING,
    DISPUTE_RECEIVED,
    DISPUTE_RECEIVED_DETAIL,
    GEO_PENDING,
    REPORT_RECEIVED,
    REPORT_RECEIVED_DETAIL,
)
from quoteflow.remote.client import SubmitClient, create_client
from quoteflow.submission import ERROR, SUCCESS
from quoteflow.ui.progress import status_spinner
from quoteflow.ui.prompts import prompt_choice, prompt_numbered, prompt_text, prompt_yes_no
from quoteflow.ui.render import (
    render_banner,
    render_category_table,
    render_choice_options,
    render_error,
    render_field_error,
    render_field_label,
    render_info,
    render_step_header,
    render_steps_overview,
    render_success,
    render_summary_table,
    render_validation_panel,
    render_warning,
)
from quoteflow.wizard import QuoteWizard, load_quote_steps
from quoteflow.wizard.schema import (
    BOOLEAN_SWITCH,
    LOCATION,
    QUANTITY_WITH_UNIT,
    SINGLE_CHOICE_CARD,
    TEXT_KINDS,
    FieldSchema,
)
from quoteflow.wizard.steps import load_and_validate_steps

app = typer.Typer(add_completion=False, help="Compose quote requests and file reports.")
steps_app = typer.Typer(add_completion=False, help="Inspect and validate wizard steps.")
app.add_typer(steps_app, name="steps")

_USE_LOCATION = "?"
_NEXT = "ileri"
_PUBLISH = "yayınla"


@app.callback(invoke_without_command=True)
def root(ctx: typer.Context) -> None:
    """quoteflow CLI."""
    load_dotenv()
    settings = load_settings()
    configure_logging(settings.log_level)
    ctx.obj = settings
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)


@app.command("post")
def post(
    ctx: typer.Context,
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Category name or id."),
    draft: Optional[Path] = typer.Option(None, "--draft", help="JSON record used to prefill answers."),
    pro: bool = typer.Option(False, "--pro/--no-pro", help="Acting user holds a pro membership."),
    author_id: Optional[str] = typer.Option(None, "--author-id", envvar="QUOTEFLOW_USER_ID"),
    lat: Optional[float] = typer.Option(None, "--lat", help="Fixed latitude for location lookups."),
    lon: Optional[float] = typer.Option(None, "--lon", help="Fixed longitude for location lookups."),
) -> None:
    """Interactive wizard that publishes a quote request."""
    settings: Settings = ctx.obj
    _render_notes(settings)
    render_banner("quoteflow", "Teklif talebi oluştur")

    initial_data = _load_draft(draft) if draft else None
    categories, warning = load_categories()
    if warning:
        render_warning(warning)
    if category:
        match = find_category(categories, category)
        if match is None:
            render_error(f"Bilinmeyen kategori: {category}")
            raise typer.Exit(code=1)
        selected = match
    elif initial_data:
        hint = initial_data.get("category_id")
        selected = resolve_category(categories, hint if isinstance(hint, str) else None)
    else:
        selected = _choose_category(categories)
    render_info(f"Kategori: {selected.name}")
    if (lat is None) != (lon is None):
        render_error("--lat ve --lon birlikte verilmelidir.")
        raise typer.Exit(code=1)
    if lat is not None and lon is not None:
        geolocation: GeolocationProvider = StaticGeolocation(lat, lon)
    else:
        geolocation = create_provider(settings.geolocation_url, timeout_s=settings.timeout_s)

    status = asyncio.run(
        _run_quote_wizard(
            settings,
            category=selected,
            initial_data=initial_data,
            privileged=pro,
            author_id=author_id,
            geolocation=geolocation,
        )
    )
    if status == ERROR:
        raise typer.Exit(code=1)


@app.command("report")
def report(
    ctx: typer.Context,
    job_id: str = typer.Option(..., "--job-id"),
    reporter_id: Optional[str] = typer.Option(None, "--reporter-id", envvar="QUOTEFLOW_USER_ID"),
    reason: Optional[str] = typer.Option(None, "--reason"),
) -> None:
    """Report a listing with a reason."""
    settings: Settings = ctx.obj
    _render_notes(settings)
    render_banner("İlanı Rapor Et", "Lütfen bu ilanı neden uygunsuz bulduğunuzu açıklayın.")
    status = asyncio.run(_run_report(settings, job_id=job_id, reporter_id=reporter_id, reason=reason))
    if status != SUCCESS:
        raise typer.Exit(code=1)


@app.command("dispute")
def dispute(
    ctx: typer.Context,
    job_id: str = typer.Option(..., "--job-id"),
    reporter_id: str = typer.Option(..., "--reporter-id", envvar="QUOTEFLOW_USER_ID"),
    reason: Optional[str] = typer.Option(None, "--reason", help="One of the fixed dispute reasons."),
    details: Optional[str] = typer.Option(None, "--details"),
) -> None:
    """Report a dispute about a job to the admin team."""
    settings: Settings = ctx.obj
    _render_notes(settings)
    render_banner("Sorun Bildir", "İşle ilgili yaşadığınız anlaşmazlığı yönetici ekibimize bildirin.")
    if reason is not None and reason not in DISPUTE_REASONS:
        render_error(f"Geçersiz neden: {reason}. Seçenekler: {', '.join(DISPUTE_REASONS)}")
        raise typer.Exit(code=1)
    status = asyncio.run(
        _run_dispute(settings, job_id=job_id, reporter_id=reporter_id, reason=reason, details=details)
    )
    if status != SUCCESS:
        raise typer.Exit(code=1)


@app.command("categories")
def categories_list() -> None:
    """List service categories."""
    categories, warning = load_categories()
    if warning:
        render_warning(warning)
    render_category_table(categories)


@steps_app.command("show")
def steps_show() -> None:
    """Show the quote wizard steps in use."""
    render_steps_overview(load_quote_steps())


@steps_app.command("validate")
def steps_validate(path: str = typer.Option(..., "--path", "-p")) -> None:
    """Validate a steps file without running the wizard."""
    result = load_and_validate_steps(Path(path))
    errors = [f"{issue.path}: {issue.message}" for issue in result.errors]
    warnings = [f"{issue.path}: {issue.message}" for issue in result.warnings]

    if errors:
        render_validation_panel("INVALID", errors, style="error")
        raise typer.Exit(code=1)

    if warnings:
        render_validation_panel("VALID (with warnings)", warnings, style="warning")
    else:
        render_validation_panel("VALID", ["No issues found."], style="success")


async def _run_quote_wizard(
    settings: Settings,
    *,
    category: Category,
    initial_data: dict[str, Any] | None,
    privileged: bool,
    author_id: str | None,
    geolocation: GeolocationProvider,
) -> str:
    client = _build_client(settings)
    wizard = QuoteWizard(
        category=category,
        submit=quote_submitter(client, author_id=author_id, privileged=privileged),
        privileged=privileged,
        initial_data=initial_data,
        geolocation=geolocation,
        close_delay_s=settings.quote_close_delay_s,
    )
    try:
        while not wizard.closed:
            state = wizard.state
            position, total = state.step_position()
            step = state.current_step
            render_step_header(position, total, step.title, step.subtitle, state.progress)
            for field in state.visible_fields():
                await _collect_field(wizard, field)

            forward = _PUBLISH if state.is_last_step else _NEXT
            choices = [forward, "kapat"] if state.is_first_step else [forward, "geri", "kapat"]
            action = prompt_choice("Devam", choices, forward)
            if action == "geri":
                wizard.back()
                continue
            if action == "kapat":
                wizard.close()
                break
            if not state.is_last_step:
                if not wizard.next():
                    render_warning("Lütfen zorunlu alanları doldurun.")
                continue

            render_summary_table(_summary_rows(wizard))
            with status_spinner(BUTTON_SUBMITTING):
                status = await wizard.confirm()
            if status == SUCCESS:
                render_success(wizard.primary_label(), "İlanınız incelemeye gönderildi.")
                await wizard.wait_closed()
                return SUCCESS
            if wizard.errors:
                render_warning("Lütfen zorunlu alanları doldurun.")
            elif status == ERROR:
                render_error(wizard.submission.error_message or "")
        return wizard.status
    finally:
        wizard.close()
        await client.aclose()


async def _collect_field(wizard: QuoteWizard, field: FieldSchema) -> None:
    render_field_label(field)
    error = wizard.errors.get(field.id)
    if error:
        render_field_error(error)
    current = wizard.answer(field.id)

    if field.kind in TEXT_KINDS:
        wizard.change(field.id, prompt_text(field.placeholder or field.label, current))
    elif field.kind == QUANTITY_WITH_UNIT:
        value = prompt_text(field.placeholder or field.label, str(current["value"]))
        unit = current["unit"]
        if len(field.units) > 1:
            unit = prompt_choice("Birim", list(field.units), unit)
        wizard.change(field.id, {"value": value, "unit": unit})
    elif field.kind == SINGLE_CHOICE_CARD:
        render_choice_options(field, current)
        ids = field.option_ids
        default_index = ids.index(current) if current in ids else None
        wizard.change(field.id, ids[prompt_numbered("Seçiminiz", ids, default_index)])
    elif field.kind == LOCATION:
        await _collect_location(wizard, field, current)
    elif field.kind == BOOLEAN_SWITCH:
        wizard.change(field.id, prompt_yes_no(field.label, bool(current)))
    else:
        raise ValueError(f"Unsupported field kind: {field.kind}")


async def _collect_location(wizard: QuoteWizard, field: FieldSchema, current: dict[str, Any]) -> None:
    hint = f"{field.placeholder or field.label} (konumunuzu kullanmak için '{_USE_LOCATION}')"
    while True:
        text = prompt_text(hint, current.get("text", ""))
        if text.strip() != _USE_LOCATION:
            if text != current.get("text", ""):
                wizard.change(field.id, {"text": text})
            return
        with status_spinner(GEO_PENDING):
            lookup = await wizard.request_location(field.id)
        if lookup.error:
            render_field_error(lookup.error)
            continue
        current = wizard.answer(field.id)
        render_info(f"Konum: {current.get('text', '')}")
        return


async def _run_report(
    settings: Settings,
    *,
    job_id: str,
    reporter_id: str | None,
    reason: str | None,
) -> str:
    client = _build_client(settings)
    flow = ReportFlow(
        report_submitter(client, job_id=job_id, reporter_id=reporter_id),
        close_delay_s=settings.report_close_delay_s,
    )
    try:
        if reason is not None:
            flow.set_reason(reason)
        while True:
            if not flow.reason.strip():
                flow.set_reason(prompt_text("Neden"))
            with status_spinner("Gönderiliyor..."):
                status = await flow.submit()
            if status == SUCCESS:
                render_success(REPORT_RECEIVED, REPORT_RECEIVED_DETAIL)
                await flow.wait_closed()
                return status
            render_error(flow.error or "")
            if status != ERROR:
                continue
            if not prompt_yes_no("Tekrar denensin mi?", True):
                return status
    finally:
        flow.dispose()
        await client.aclose()


async def _run_dispute(
    settings: Settings,
    *,
    job_id: str,
    reporter_id: str,
    reason: str | None,
    details: str | None,
) -> str:
    client = _build_client(settings)
    flow = DisputeFlow(
        dispute_submitter(client, job_id=job_id, reporter_id=reporter_id),
        close_delay_s=settings.dispute_close_delay_s,
    )
    try:
        if reason is None:
            for index, option in enumerate(DISPUTE_REASONS, start=1):
                render_info(f"{index:>2} {option}")
            reason = DISPUTE_REASONS[prompt_numbered("Sorunun Konusu", DISPUTE_REASONS, 0)]
        flow.select_reason(reason)
        if details is not None:
            flow.set_details(details)
        while True:
            if not flow.details.strip():
                flow.set_details(prompt_text("Detaylar"))
            with status_spinner("Gönderiliyor..."):
                status = await flow.submit()
            if status == SUCCESS:
                render_success(DISPUTE_RECEIVED, DISPUTE_RECEIVED_DETAIL)
                await flow.wait_closed()
                return status
            render_error(flow.error or "")
            if status != ERROR:
                continue
            if not prompt_yes_no("Tekrar denensin mi?", True):
                return status
    finally:
        flow.dispose()
        await client.aclose()


def _summary_rows(wizard: QuoteWizard) -> list[tuple[str, str]]:
    rows = [("Kategori", wizard.category.name)]
    for step in wizard.state.steps:
        for field in step.visible_fields(wizard.state.privileged):
            rows.append((field.label, _display_value(wizard.answer(field.id))))
    return rows


def _display_value(value: Any) -> str:
    if isinstance(value, dict):
        if "unit" in value:
            return f"{value['value']} {value['unit']}".strip()
        return str(value.get("text", ""))
    if isinstance(value, bool):
        return "Evet" if value else "Hayır"
    if value is None:
        return "-"
    return str(value) or "-"


def _build_client(settings: Settings) -> SubmitClient:
    return create_client(settings.submit_mode, **settings.client_kwargs())


def _choose_category(categories: list[Category]) -> Category:
    render_category_table(categories)
    index = prompt_numbered("Hangi hizmete ihtiyacın var?", [item.name for item in categories])
    return categories[index]


def _load_draft(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        render_error(f"Taslak okunamadı: {exc}")
        raise typer.Exit(code=1) from exc
    if not isinstance(data, dict):
        render_error("Taslak bir JSON nesnesi olmalıdır.")
        raise typer.Exit(code=1)
    return data


def _render_notes(settings: Settings) -> None:
    for note in settings.notes:
        render_warning(note)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
