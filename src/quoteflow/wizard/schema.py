"""Field and step schemas for the quote wizard."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Literal

SHORT_TEXT = "short-text"
LONG_TEXT = "long-text"
QUANTITY_WITH_UNIT = "quantity-with-unit"
SINGLE_CHOICE_CARD = "single-choice-card"
LOCATION = "location"
BOOLEAN_SWITCH = "boolean-switch"

FieldKind = Literal[
    "short-text",
    "long-text",
    "quantity-with-unit",
    "single-choice-card",
    "location",
    "boolean-switch",
]

FIELD_KINDS: tuple[str, ...] = (
    SHORT_TEXT,
    LONG_TEXT,
    QUANTITY_WITH_UNIT,
    SINGLE_CHOICE_CARD,
    LOCATION,
    BOOLEAN_SWITCH,
)
TEXT_KINDS = frozenset({SHORT_TEXT, LONG_TEXT})


@dataclass(frozen=True)
class ChoiceOption:
    option_id: str
    title: str
    description: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.option_id,
            "title": self.title,
            "description": self.description,
        }


@dataclass(frozen=True)
class FieldSchema:
    """One wizard input.

    ``units`` only applies to ``quantity-with-unit`` fields and ``options`` to
    ``single-choice-card`` fields; both must be empty for every other kind.
    """

    id: str
    label: str
    kind: str
    required: bool = False
    restricted_to_privileged_user: bool = False
    placeholder: str | None = None
    description: str | None = None
    units: tuple[str, ...] = ()
    options: tuple[ChoiceOption, ...] = ()

    def __post_init__(self) -> None:
        if not self.id or not self.id.strip():
            raise ValueError("Field id must be a non-empty string.")
        if self.kind not in FIELD_KINDS:
            raise ValueError(f"Field '{self.id}' has unsupported kind '{self.kind}'.")
        if self.kind == QUANTITY_WITH_UNIT and not self.units:
            raise ValueError(f"Field '{self.id}' must declare at least one unit.")
        if self.kind != QUANTITY_WITH_UNIT and self.units:
            raise ValueError(f"Field '{self.id}' declares units but is not a quantity field.")
        if self.kind == SINGLE_CHOICE_CARD and not self.options:
            raise ValueError(f"Field '{self.id}' must declare at least one option.")
        if self.kind != SINGLE_CHOICE_CARD and self.options:
            raise ValueError(f"Field '{self.id}' declares options but is not a choice field.")

    @property
    def default_unit(self) -> str | None:
        return self.units[0] if self.units else None

    @property
    def option_ids(self) -> list[str]:
        return [option.option_id for option in self.options]

    def visible_to(self, privileged: bool) -> bool:
        return privileged or not self.restricted_to_privileged_user

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {
            "id": self.id,
            "label": self.label,
            "kind": self.kind,
            "required": self.required,
            "restricted_to_privileged_user": self.restricted_to_privileged_user,
        }
        if self.placeholder is not None:
            payload["placeholder"] = self.placeholder
        if self.description is not None:
            payload["description"] = self.description
        if self.units:
            payload["units"] = list(self.units)
        if self.options:
            payload["options"] = [option.to_dict() for option in self.options]
        return payload


@dataclass(frozen=True)
class StepSchema:
    step: int
    title: str
    fields: tuple[FieldSchema, ...] = field(default_factory=tuple)
    subtitle: str | None = None

    def visible_fields(self, privileged: bool) -> list[FieldSchema]:
        return [item for item in self.fields if item.visible_to(privileged)]

    def field_ids(self) -> list[str]:
        return [item.id for item in self.fields]

    def to_dict(self) -> dict:
        return {
            "step": self.step,
            "title": self.title,
            "subtitle": self.subtitle,
            "fields": [item.to_dict() for item in self.fields],
        }


def ensure_unique_field_ids(steps: Iterable[StepSchema]) -> None:
    seen: dict[str, int] = {}
    for step in steps:
        for item in step.fields:
            if item.id in seen:
                raise ValueError(
                    f"Duplicate field id '{item.id}' in steps {seen[item.id]} and {step.step}."
                )
            seen[item.id] = step.step


def find_field(steps: Iterable[StepSchema], field_id: str) -> FieldSchema | None:
    for step in steps:
        for item in step.fields:
            if item.id == field_id:
                return item
    return None


def parse_steps(data: Any) -> tuple[StepSchema, ...]:
    """Build step schemas from decoded JSON.

    Accepts either a list of steps or an object with a ``steps`` list. Keys
    follow the wire format (``proOnly``/``type`` are accepted as aliases of
    ``restricted_to_privileged_user``/``kind``).
    """
    if isinstance(data, dict):
        data = data.get("steps")
    if not isinstance(data, list):
        raise ValueError("Steps must be a list of step objects.")
    steps: list[StepSchema] = []
    for idx, raw in enumerate(data):
        if not isinstance(raw, dict):
            raise ValueError(f"steps[{idx}] must be an object.")
        title = raw.get("title")
        if not isinstance(title, str) or not title.strip():
            raise ValueError(f"steps[{idx}] missing 'title'.")
        raw_fields = raw.get("fields")
        if not isinstance(raw_fields, list) or not raw_fields:
            raise ValueError(f"steps[{idx}] must declare a non-empty 'fields' list.")
        number = raw.get("step", idx + 1)
        if isinstance(number, bool) or not isinstance(number, int):
            raise ValueError(f"steps[{idx}].step must be an integer.")
        subtitle = raw.get("subtitle")
        steps.append(
            StepSchema(
                step=number,
                title=title.strip(),
                subtitle=subtitle.strip() if isinstance(subtitle, str) and subtitle.strip() else None,
                fields=tuple(
                    _parse_field(item, f"steps[{idx}].fields[{fidx}]")
                    for fidx, item in enumerate(raw_fields)
                ),
            )
        )
    if not steps:
        raise ValueError("Steps list is empty.")
    result = tuple(steps)
    ensure_unique_field_ids(result)
    return result


def _parse_field(raw: Any, path: str) -> FieldSchema:
    if not isinstance(raw, dict):
        raise ValueError(f"{path} must be an object.")
    field_id = raw.get("id")
    if not isinstance(field_id, str) or not field_id.strip():
        raise ValueError(f"{path} missing 'id'.")
    kind = raw.get("kind", raw.get("type"))
    if not isinstance(kind, str):
        raise ValueError(f"{path} missing 'kind'.")
    label = raw.get("label")
    if not isinstance(label, str) or not label.strip():
        label = field_id
    units = raw.get("units") or []
    if not isinstance(units, list) or not all(isinstance(unit, str) for unit in units):
        raise ValueError(f"{path}.units must be a list of strings.")
    options: list[ChoiceOption] = []
    for oidx, option in enumerate(raw.get("options") or []):
        if not isinstance(option, dict) or not isinstance(option.get("id"), str):
            raise ValueError(f"{path}.options[{oidx}] must be an object with an 'id'.")
        options.append(
            ChoiceOption(
                option_id=option["id"],
                title=str(option.get("title") or option["id"]),
                description=str(option.get("description") or ""),
            )
        )
    required = raw.get("required", False)
    if not isinstance(required, bool):
        raise ValueError(f"{path}.required must be a boolean.")
    restricted = raw.get("restricted_to_privileged_user", raw.get("proOnly", False))
    if not isinstance(restricted, bool):
        raise ValueError(f"{path}.restricted_to_privileged_user must be a boolean.")
    try:
        return FieldSchema(
            id=field_id.strip(),
            label=label.strip(),
            kind=kind,
            required=required,
            restricted_to_privileged_user=restricted,
            placeholder=raw.get("placeholder"),
            description=raw.get("description"),
            units=tuple(units),
            options=tuple(options),
        )
    except ValueError as exc:
        raise ValueError(f"{path}: {exc}") from exc
