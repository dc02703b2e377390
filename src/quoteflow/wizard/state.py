"""Wizard state for the quote flow."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from quoteflow.wizard.schema import FieldSchema, StepSchema


@dataclass
class WizardState:
    steps: tuple[StepSchema, ...]
    privileged: bool = False
    step_index: int = 0
    answers: dict[str, Any] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def step_count(self) -> int:
        return len(self.steps)

    @property
    def current_step(self) -> StepSchema:
        return self.steps[self.step_index]

    @property
    def is_first_step(self) -> bool:
        return self.step_index == 0

    @property
    def is_last_step(self) -> bool:
        return self.step_index == self.step_count - 1

    @property
    def progress(self) -> float:
        # Category selection is an implicit first step ahead of the schema steps.
        return (self.step_index + 2) / (self.step_count + 1)

    def step_position(self) -> tuple[int, int]:
        return self.step_index + 2, self.step_count + 1

    def visible_fields(self) -> list[FieldSchema]:
        return self.current_step.visible_fields(self.privileged)

    def clear_answers(self) -> None:
        self.answers = {}
        self.errors = {}
