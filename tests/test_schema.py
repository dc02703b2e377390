from __future__ import annotations

import json
from pathlib import Path

import pytest

from quoteflow.wizard.schema import (
    LOCATION,
    QUANTITY_WITH_UNIT,
    FieldSchema,
    StepSchema,
    ensure_unique_field_ids,
    find_field,
    parse_steps,
)
from quoteflow.wizard.steps import STEPS_ENV_VAR, load_and_validate_steps, load_quote_steps


def test_builtin_steps_shape(steps) -> None:
    assert [step.step for step in steps] == [2, 3, 4, 5]
    quantity = find_field(steps, "quantity")
    assert quantity is not None
    assert quantity.kind == QUANTITY_WITH_UNIT
    assert quantity.units == ("Adet", "Metre")
    assert quantity.default_unit == "Adet"
    urgent = find_field(steps, "isUrgent")
    assert urgent is not None and urgent.restricted_to_privileged_user
    assert find_field(steps, "location").kind == LOCATION


def test_visible_fields_hide_restricted_for_regular_users(steps) -> None:
    details_step = steps[2]
    assert "isUrgent" not in [field.id for field in details_step.visible_fields(False)]
    assert "isUrgent" in [field.id for field in details_step.visible_fields(True)]


def test_field_rejects_units_on_text_kind() -> None:
    with pytest.raises(ValueError):
        FieldSchema(id="title", label="Title", kind="short-text", units=("m",))


def test_field_rejects_unknown_kind() -> None:
    with pytest.raises(ValueError):
        FieldSchema(id="x", label="X", kind="slider")


def test_duplicate_field_ids_rejected() -> None:
    first = StepSchema(step=1, title="A", fields=(FieldSchema(id="title", label="T", kind="short-text"),))
    second = StepSchema(step=2, title="B", fields=(FieldSchema(id="title", label="T", kind="long-text"),))
    with pytest.raises(ValueError, match="Duplicate field id"):
        ensure_unique_field_ids([first, second])


def test_parse_steps_accepts_wire_aliases() -> None:
    steps = parse_steps(
        {
            "steps": [
                {
                    "step": 1,
                    "title": "Detay",
                    "fields": [{"id": "urgent", "label": "Acil", "type": "boolean-switch", "proOnly": True}],
                }
            ]
        }
    )
    field = steps[0].fields[0]
    assert field.kind == "boolean-switch"
    assert field.restricted_to_privileged_user


def test_parse_steps_reports_field_path() -> None:
    with pytest.raises(ValueError, match=r"steps\[0\]\.fields\[0\]"):
        parse_steps([{"title": "A", "fields": [{"id": "q", "kind": "quantity-with-unit"}]}])


def test_step_round_trips_through_dict(steps) -> None:
    assert parse_steps([step.to_dict() for step in steps]) == steps


def test_validate_file_reports_warnings(tmp_path: Path) -> None:
    path = tmp_path / "steps.json"
    path.write_text(
        json.dumps(
            [
                {"step": 3, "title": "A", "fields": [{"id": "a", "kind": "short-text"}]},
                {
                    "step": 2,
                    "title": "B",
                    "fields": [{"id": "b", "kind": "short-text", "required": True, "proOnly": True}],
                },
            ]
        ),
        encoding="utf-8",
    )
    result = load_and_validate_steps(path)
    assert result.errors == []
    assert {issue.path for issue in result.warnings} == {"steps[1].step", "steps[1].fields[0]"}


def test_validate_missing_file(tmp_path: Path) -> None:
    result = load_and_validate_steps(tmp_path / "missing.json")
    assert result.steps is None
    assert "not found" in result.errors[0].message


def test_env_override_falls_back_when_invalid(tmp_path: Path, monkeypatch) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    monkeypatch.setenv(STEPS_ENV_VAR, str(path))
    assert [step.step for step in load_quote_steps()] == [2, 3, 4, 5]


def test_env_override_used_when_valid(tmp_path: Path, monkeypatch) -> None:
    path = tmp_path / "steps.json"
    path.write_text(
        json.dumps([{"step": 1, "title": "Tek", "fields": [{"id": "note", "kind": "long-text"}]}]),
        encoding="utf-8",
    )
    monkeypatch.setenv(STEPS_ENV_VAR, str(path))
    steps = load_quote_steps()
    assert len(steps) == 1
    assert steps[0].field_ids() == ["note"]


def test_non_integer_step_number_is_invalid(tmp_path: Path) -> None:
    path = tmp_path / "steps.json"
    path.write_text(
        json.dumps([{"step": {"n": 1}, "title": "A", "fields": [{"id": "a", "kind": "short-text"}]}]),
        encoding="utf-8",
    )
    result = load_and_validate_steps(path)
    assert result.steps is None
    assert "steps[0].step must be an integer" in result.errors[0].message


@pytest.mark.parametrize("key", ["required", "proOnly"])
def test_string_flags_rejected(key: str) -> None:
    with pytest.raises(ValueError, match=r"steps\[0\]\.fields\[0\]"):
        parse_steps([{"title": "A", "fields": [{"id": "a", "kind": "short-text", key: "false"}]}])


def test_env_override_with_bad_step_number_falls_back(tmp_path: Path, monkeypatch) -> None:
    path = tmp_path / "steps.json"
    path.write_text(
        json.dumps([{"step": [1], "title": "A", "fields": [{"id": "a", "kind": "short-text"}]}]),
        encoding="utf-8",
    )
    monkeypatch.setenv(STEPS_ENV_VAR, str(path))
    assert [step.step for step in load_quote_steps()] == [2, 3, 4, 5]
