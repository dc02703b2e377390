"""Step definitions: built-in quote steps and file overrides."""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
import os
from importlib import resources
from pathlib import Path

from quoteflow.wizard.schema import StepSchema, parse_steps

logger = logging.getLogger(__name__)

STEPS_ENV_VAR = "QUOTEFLOW_STEPS_PATH"


@dataclass(frozen=True)
class ValidationIssue:
    path: str
    message: str


@dataclass(frozen=True)
class ValidationResult:
    steps: tuple[StepSchema, ...] | None
    errors: list[ValidationIssue]
    warnings: list[ValidationIssue]


def load_quote_steps() -> tuple[StepSchema, ...]:
    override = os.getenv(STEPS_ENV_VAR)
    if override:
        result = load_and_validate_steps(Path(override))
        if result.steps is not None:
            return result.steps
        for issue in result.errors:
            logger.warning("Ignoring %s: %s: %s", STEPS_ENV_VAR, issue.path, issue.message)
    return builtin_quote_steps()


def builtin_quote_steps() -> tuple[StepSchema, ...]:
    data = resources.files(__package__).joinpath("quote_steps.json").read_text(encoding="utf-8")
    return parse_steps(json.loads(data))


def load_and_validate_steps(path: Path) -> ValidationResult:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return ValidationResult(None, [ValidationIssue("steps", f"Steps file not found: {path}")], [])
    except (OSError, json.JSONDecodeError) as exc:
        return ValidationResult(None, [ValidationIssue("steps", f"Invalid JSON: {exc}")], [])
    try:
        steps = parse_steps(raw)
    except (ValueError, TypeError) as exc:
        return ValidationResult(None, [ValidationIssue("steps", str(exc))], [])
    return ValidationResult(steps, [], collect_warnings(steps))


def collect_warnings(steps: tuple[StepSchema, ...]) -> list[ValidationIssue]:
    warnings: list[ValidationIssue] = []
    previous: int | None = None
    for idx, step in enumerate(steps):
        if previous is not None and step.step <= previous:
            warnings.append(
                ValidationIssue(f"steps[{idx}].step", f"Step number {step.step} does not increase.")
            )
        previous = step.step
        for fidx, field in enumerate(step.fields):
            if field.required and field.restricted_to_privileged_user:
                warnings.append(
                    ValidationIssue(
                        f"steps[{idx}].fields[{fidx}]",
                        f"'{field.id}' is required but only enforced for privileged users.",
                    )
                )
    return warnings
