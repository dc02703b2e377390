"""Quote wizard controller: navigation, answers and final submission."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Iterable, Mapping

from quoteflow.catalog import Category
from quoteflow.geolocation import GeolocationProvider, LocationLookup
from quoteflow.messages import (
    BUTTON_NEXT,
    BUTTON_PUBLISH,
    BUTTON_RETRY,
    BUTTON_SUBMITTING,
    BUTTON_SUCCESS,
    QUOTE_SUBMIT_FAILED,
)
from quoteflow.submission import (
    ERROR,
    SUBMITTING,
    SUCCESS,
    SubmissionLifecycle,
    SubmissionStatus,
    SubmitOperation,
)
from quoteflow.wizard.answers import coerce_answer, project_initial_data, read_answer
from quoteflow.wizard.schema import (
    LOCATION,
    FieldSchema,
    StepSchema,
    ensure_unique_field_ids,
    find_field,
)
from quoteflow.wizard.state import WizardState
from quoteflow.wizard.steps import load_quote_steps
from quoteflow.wizard.validation import validate_step

logger = logging.getLogger(__name__)

PREVIOUS = "previous"
CLOSE = "close"

QUOTE_CLOSE_DELAY_S = 1.5

_BUTTON_LABELS = {
    SUBMITTING: BUTTON_SUBMITTING,
    SUCCESS: BUTTON_SUCCESS,
    ERROR: BUTTON_RETRY,
}


class QuoteWizard:
    """Drives one quote request from the first schema step to submission.

    ``back`` on the first step closes the wizard rather than moving to a
    negative index. While the submission is in flight or has succeeded only
    ``back`` and ``close`` have any effect.
    """

    def __init__(
        self,
        *,
        category: Category,
        submit: SubmitOperation,
        steps: Iterable[StepSchema] | None = None,
        privileged: bool = False,
        initial_data: Mapping[str, Any] | None = None,
        geolocation: GeolocationProvider | None = None,
        on_close: Callable[[], None] | None = None,
        close_delay_s: float = QUOTE_CLOSE_DELAY_S,
    ) -> None:
        resolved_steps = tuple(steps) if steps is not None else load_quote_steps()
        if not resolved_steps:
            raise ValueError("Wizard requires at least one step.")
        ensure_unique_field_ids(resolved_steps)
        self.category = category
        self.state = WizardState(
            steps=resolved_steps,
            privileged=privileged,
            answers=project_initial_data(resolved_steps, initial_data),
        )
        self.submission = SubmissionLifecycle(
            submit,
            close_delay_s=close_delay_s,
            default_error=QUOTE_SUBMIT_FAILED,
            on_close=self.close,
            name="quote submission",
        )
        self._geolocation = geolocation
        self._lookups: dict[str, LocationLookup] = {}
        self._on_close = on_close
        self._closed = False
        self._closed_event = asyncio.Event()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def is_busy(self) -> bool:
        return self.submission.is_busy

    @property
    def controls_enabled(self) -> bool:
        return not self._closed and not self.is_busy

    @property
    def status(self) -> SubmissionStatus:
        return self.submission.status

    @property
    def errors(self) -> dict[str, str]:
        return self.state.errors

    @property
    def answers(self) -> dict[str, Any]:
        return self.state.answers

    def primary_label(self) -> str:
        if not self.state.is_last_step:
            return BUTTON_NEXT
        return _BUTTON_LABELS.get(self.status, BUTTON_PUBLISH)

    def answer(self, field_id: str) -> Any:
        return read_answer(self._field(field_id), self.state.answers)

    def next(self) -> bool:
        """Validate the current step and move forward; True when the step changed."""
        if not self.controls_enabled:
            return False
        errors = self._validate_current()
        if errors:
            self.state.errors = errors
            return False
        self.state.errors = {}
        if self.state.is_last_step:
            return False
        self._leave_current_step()
        self.state.step_index += 1
        return True

    def back(self) -> str:
        if self._closed:
            return CLOSE
        self.state.errors = {}
        if self.state.step_index > 0:
            self._leave_current_step()
            self.state.step_index -= 1
            return PREVIOUS
        self.close()
        return CLOSE

    def change(self, field_id: str, value: Any) -> bool:
        if not self.controls_enabled:
            return False
        field = self._field(field_id)
        self.state.answers[field_id] = coerce_answer(field, value)
        self.state.errors.pop(field_id, None)
        return True

    async def confirm(self) -> SubmissionStatus:
        if not self.state.is_last_step:
            raise ValueError("Confirm is only available on the last step.")
        if not self.controls_enabled:
            return self.status
        errors = self._validate_current()
        if errors:
            self.state.errors = errors
            return self.status
        self.state.errors = {}
        return await self.submission.submit(self.build_payload())

    async def advance(self) -> SubmissionStatus | bool:
        """Primary button: ``next`` on intermediate steps, ``confirm`` on the last."""
        if self.state.is_last_step:
            return await self.confirm()
        return self.next()

    def build_payload(self) -> dict[str, Any]:
        visible = {
            field.id
            for step in self.state.steps
            for field in step.visible_fields(self.state.privileged)
        }
        payload: dict[str, Any] = {"category_id": self.category.id}
        for key, value in self.state.answers.items():
            if key in visible:
                payload[key] = value
        return payload

    def location_lookup(self, field_id: str) -> LocationLookup:
        field = self._field(field_id)
        if field.kind != LOCATION:
            raise ValueError(f"Field '{field_id}' is not a location field.")
        return self._lookups.setdefault(field_id, LocationLookup())

    async def request_location(self, field_id: str) -> LocationLookup:
        lookup = self.location_lookup(field_id)
        if not self.controls_enabled or lookup.pending:
            return lookup
        coordinates = await lookup.run(self._geolocation)
        if coordinates is None:
            return lookup
        if self._closed or field_id not in self.state.current_step.field_ids():
            logger.debug("Location for %s resolved after the field was left", field_id)
            return lookup
        self.state.answers[field_id] = coordinates.to_location()
        self.state.errors.pop(field_id, None)
        return lookup

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        for lookup in self._lookups.values():
            lookup.abandon()
        self.submission.dispose()
        self.state.clear_answers()
        self._closed_event.set()
        logger.debug("Quote wizard closed for category %s", self.category.id)
        if self._on_close is not None:
            self._on_close()

    async def wait_closed(self) -> None:
        await self._closed_event.wait()

    def _validate_current(self) -> dict[str, str]:
        return validate_step(
            self.state.current_step,
            self.state.answers,
            privileged=self.state.privileged,
        )

    def _leave_current_step(self) -> None:
        for field_id in self.state.current_step.field_ids():
            lookup = self._lookups.get(field_id)
            if lookup is not None:
                lookup.abandon()

    def _field(self, field_id: str) -> FieldSchema:
        field = find_field(self.state.steps, field_id)
        if field is not None and field.visible_to(self.state.privileged):
            return field
        raise ValueError(f"Unknown field '{field_id}'.")
