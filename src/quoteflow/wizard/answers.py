"""Answer value shapes per field kind, plus initial-data projection."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from quoteflow.wizard.schema import (
    BOOLEAN_SWITCH,
    LOCATION,
    QUANTITY_WITH_UNIT,
    SINGLE_CHOICE_CARD,
    TEXT_KINDS,
    FieldSchema,
    StepSchema,
)

logger = logging.getLogger(__name__)

_TRUE_STRINGS = {"true", "1", "yes", "y", "on", "evet"}
_FALSE_STRINGS = {"false", "0", "no", "n", "off", "hayır", "hayir", ""}


def coerce_answer(field: FieldSchema, raw: Any) -> Any:
    """Normalize ``raw`` into the stored shape for ``field``.

    Raises ``ValueError`` when ``raw`` cannot represent a value of the
    field's kind.
    """
    if field.kind in TEXT_KINDS:
        if isinstance(raw, str):
            return raw
        if raw is None or isinstance(raw, (dict, list)):
            raise ValueError(f"Field '{field.id}' expects text.")
        return _format_scalar(raw)
    if field.kind == QUANTITY_WITH_UNIT:
        if isinstance(raw, Mapping):
            value = raw.get("value")
            unit = raw.get("unit")
        else:
            value = raw
            unit = None
        if isinstance(value, (dict, list)):
            raise ValueError(f"Field '{field.id}' expects a scalar quantity.")
        if unit not in field.units:
            unit = field.default_unit
        return {"value": "" if value is None else _format_scalar(value), "unit": unit}
    if field.kind == SINGLE_CHOICE_CARD:
        option_id = raw if isinstance(raw, str) else None
        if option_id not in field.option_ids:
            raise ValueError(f"Field '{field.id}' has no option {raw!r}.")
        return option_id
    if field.kind == LOCATION:
        if isinstance(raw, str):
            return {"text": raw}
        if not isinstance(raw, Mapping):
            raise ValueError(f"Field '{field.id}' expects a location.")
        text = raw.get("text")
        location: dict[str, Any] = {"text": "" if text is None else str(text)}
        for key in ("latitude", "longitude"):
            coordinate = raw.get(key)
            if coordinate is not None:
                location[key] = float(coordinate)
        return location
    if field.kind == BOOLEAN_SWITCH:
        if isinstance(raw, bool):
            return raw
        if isinstance(raw, (int, float)):
            return bool(raw)
        if isinstance(raw, str):
            normalized = raw.strip().lower()
            if normalized in _TRUE_STRINGS:
                return True
            if normalized in _FALSE_STRINGS:
                return False
        raise ValueError(f"Field '{field.id}' expects a boolean.")
    raise ValueError(f"Unsupported field kind: {field.kind}")


def read_answer(field: FieldSchema, answers: Mapping[str, Any]) -> Any:
    """Return the value an input control shows for ``field``."""
    value = answers.get(field.id)
    if field.kind in TEXT_KINDS:
        return "" if value is None else str(value)
    if field.kind == QUANTITY_WITH_UNIT:
        current = value if isinstance(value, Mapping) else {}
        amount = current.get("value")
        unit = current.get("unit") or field.default_unit
        return {"value": "" if amount is None else amount, "unit": unit}
    if field.kind == SINGLE_CHOICE_CARD:
        return value
    if field.kind == LOCATION:
        if isinstance(value, Mapping):
            return dict(value)
        return {"text": "" if value is None else str(value)}
    if field.kind == BOOLEAN_SWITCH:
        return bool(value)
    raise ValueError(f"Unsupported field kind: {field.kind}")


def project_initial_data(
    steps: Iterable[StepSchema],
    initial_data: Mapping[str, Any] | None,
) -> dict[str, Any]:
    """Project a flat draft record into answer shapes.

    Keys that name no field and values that do not fit their field are
    dropped.
    """
    answers: dict[str, Any] = {}
    if not initial_data:
        return answers
    for step in steps:
        for field in step.fields:
            raw = initial_data.get(field.id)
            if raw is None:
                continue
            try:
                answers[field.id] = coerce_answer(field, raw)
            except (TypeError, ValueError) as exc:
                logger.debug("Dropping prefill for %s: %s", field.id, exc)
    return answers


def _format_scalar(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
