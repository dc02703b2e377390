"""Required-field validation for wizard steps."""

from __future__ import annotations

from typing import Any, Mapping

from quoteflow.messages import REQUIRED_FIELD
from quoteflow.wizard.schema import (
    BOOLEAN_SWITCH,
    LOCATION,
    QUANTITY_WITH_UNIT,
    SINGLE_CHOICE_CARD,
    TEXT_KINDS,
    FieldSchema,
    StepSchema,
)


def is_empty(field: FieldSchema, value: Any) -> bool:
    if value is None:
        return True
    if field.kind in TEXT_KINDS:
        return _blank(value)
    if field.kind == QUANTITY_WITH_UNIT:
        if isinstance(value, Mapping):
            return _blank(value.get("value"))
        return _blank(value)
    if field.kind == LOCATION:
        if isinstance(value, Mapping):
            return _blank(value.get("text"))
        return _blank(value)
    if field.kind in (BOOLEAN_SWITCH, SINGLE_CHOICE_CARD):
        return False
    raise ValueError(f"Unsupported field kind: {field.kind}")


def validate_step(
    step: StepSchema,
    answers: Mapping[str, Any],
    *,
    privileged: bool = False,
) -> dict[str, str]:
    """Return ``{field_id: message}`` for each required field left empty.

    Fields restricted to privileged users are skipped entirely when
    ``privileged`` is false.
    """
    errors: dict[str, str] = {}
    for field in step.fields:
        if not field.visible_to(privileged) or not field.required:
            continue
        if is_empty(field, answers.get(field.id)):
            errors[field.id] = REQUIRED_FIELD.format(label=field.label)
    return errors


def _blank(value: Any) -> bool:
    if value is None:
        return True
    return str(value).strip() == ""
