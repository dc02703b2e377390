"""Single-step report/dispute flows and the record submitters behind every flow."""

from __future__ import annotations

import logging
from typing import Any, Callable

from quoteflow.messages import (
    DISPUTE_DETAILS_REQUIRED,
    DISPUTE_SUBMIT_FAILED,
    DISPUTE_SUBMIT_FAILED_PREFIX,
    LOGIN_REQUIRED_POST,
    LOGIN_REQUIRED_REPORT,
    REPORT_REASON_REQUIRED,
    REPORT_SUBMIT_FAILED,
)
from quoteflow.remote.client import SubmitClient
from quoteflow.remote.types import SubmitError
from quoteflow.submission import SubmissionLifecycle, SubmissionStatus, SubmitOperation

logger = logging.getLogger(__name__)

REPORT_CLOSE_DELAY_S = 2.0
DISPUTE_CLOSE_DELAY_S = 2.5

DISPUTE_REASONS: tuple[str, ...] = (
    "Ödeme Sorunu",
    "İş Kalitesi Yetersiz",
    "İletişim Problemi",
    "Anlaşmaya Uyulmadı",
    "Diğer",
)


class _SingleStepFlow:
    def __init__(
        self,
        submit: SubmitOperation,
        *,
        close_delay_s: float,
        default_error: str,
        on_close: Callable[[], None] | None,
        name: str,
    ) -> None:
        self.submission = SubmissionLifecycle(
            submit,
            close_delay_s=close_delay_s,
            default_error=default_error,
            on_close=on_close,
            name=name,
        )
        self._validation_error: str | None = None

    @property
    def status(self) -> SubmissionStatus:
        return self.submission.status

    @property
    def is_busy(self) -> bool:
        return self.submission.is_busy

    @property
    def error(self) -> str | None:
        return self._validation_error or self.submission.error_message

    async def submit(self) -> SubmissionStatus:
        if not self.submission.can_submit():
            return self.status
        problem = self._validate()
        if problem is not None:
            self._validation_error = problem
            return self.status
        self._validation_error = None
        return await self.submission.submit(self._payload())

    async def wait_closed(self) -> None:
        await self.submission.wait_closed()

    def reset(self) -> None:
        self._validation_error = None
        self._clear_inputs()
        self.submission.reset()

    def dispose(self) -> None:
        self.submission.dispose()

    def _validate(self) -> str | None:
        raise NotImplementedError

    def _payload(self) -> dict[str, Any]:
        raise NotImplementedError

    def _clear_inputs(self) -> None:
        raise NotImplementedError


class ReportFlow(_SingleStepFlow):
    """Report a listing or profile with a free-text reason."""

    def __init__(
        self,
        submit: SubmitOperation,
        *,
        close_delay_s: float = REPORT_CLOSE_DELAY_S,
        on_close: Callable[[], None] | None = None,
    ) -> None:
        super().__init__(
            submit,
            close_delay_s=close_delay_s,
            default_error=REPORT_SUBMIT_FAILED,
            on_close=on_close,
            name="report",
        )
        self.reason = ""

    def set_reason(self, reason: str) -> bool:
        if self.is_busy:
            return False
        self.reason = reason
        return True

    def _validate(self) -> str | None:
        if not self.reason.strip():
            return REPORT_REASON_REQUIRED
        return None

    def _payload(self) -> dict[str, Any]:
        return {"reason": self.reason}

    def _clear_inputs(self) -> None:
        self.reason = ""


class DisputeFlow(_SingleStepFlow):
    """Raise a dispute about a job: a fixed reason plus required details."""

    def __init__(
        self,
        submit: SubmitOperation,
        *,
        close_delay_s: float = DISPUTE_CLOSE_DELAY_S,
        on_close: Callable[[], None] | None = None,
    ) -> None:
        super().__init__(
            submit,
            close_delay_s=close_delay_s,
            default_error=DISPUTE_SUBMIT_FAILED,
            on_close=on_close,
            name="dispute",
        )
        self.reason = DISPUTE_REASONS[0]
        self.details = ""

    def select_reason(self, reason: str) -> bool:
        if reason not in DISPUTE_REASONS:
            raise ValueError(f"Unknown dispute reason: {reason}")
        if self.is_busy:
            return False
        self.reason = reason
        return True

    def set_details(self, details: str) -> bool:
        if self.is_busy:
            return False
        self.details = details
        return True

    def _validate(self) -> str | None:
        if not self.details.strip():
            return DISPUTE_DETAILS_REQUIRED
        return None

    def _payload(self) -> dict[str, Any]:
        return {"reason": self.reason, "details": self.details}

    def _clear_inputs(self) -> None:
        self.reason = DISPUTE_REASONS[0]
        self.details = ""


def quote_submitter(
    client: SubmitClient,
    *,
    author_id: str | None,
    privileged: bool,
) -> SubmitOperation:
    """Map a wizard payload onto a ``job_listings`` record."""

    async def submit(payload: dict[str, Any]) -> None:
        if not author_id:
            raise SubmitError(reason=LOGIN_REQUIRED_POST)
        answers = {key: value for key, value in payload.items() if key != "category_id"}
        location = answers.get("location")
        if isinstance(location, str):
            location = {"text": location}
        record = {
            "author_id": author_id,
            "category_id": payload.get("category_id"),
            "title": answers.get("title"),
            "details": answers.get("details"),
            "location": location,
            "wizard_answers": answers,
            "budget": answers.get("budget"),
            "isUrgent": bool(answers.get("isUrgent")) if privileged else False,
            "status": "pending_review",
        }
        receipt = await client.submit("job_listings", record)
        logger.info("Job listing submitted (request_id=%s)", receipt.request_id)

    return submit


def report_submitter(
    client: SubmitClient,
    *,
    job_id: str,
    reporter_id: str | None,
) -> SubmitOperation:
    async def submit(payload: dict[str, Any]) -> None:
        if not reporter_id:
            raise SubmitError(reason=LOGIN_REQUIRED_REPORT)
        record = {
            "job_id": job_id,
            "reporter_id": reporter_id,
            "reason": payload["reason"],
            "status": "open",
        }
        receipt = await client.submit("reports", record)
        logger.info("Report submitted for job %s (request_id=%s)", job_id, receipt.request_id)

    return submit


def dispute_submitter(
    client: SubmitClient,
    *,
    job_id: str,
    reporter_id: str,
) -> SubmitOperation:
    async def submit(payload: dict[str, Any]) -> None:
        record = {
            "job_id": job_id,
            "reporter_id": reporter_id,
            "reason": payload["reason"],
            "details": payload.get("details", ""),
            "status": "open",
        }
        try:
            receipt = await client.submit("disputes", record)
        except SubmitError as exc:
            raise SubmitError(
                reason=f"{DISPUTE_SUBMIT_FAILED_PREFIX}{exc.reason}",
                status_code=exc.status_code,
                response_text=exc.response_text,
                request_id=exc.request_id,
            ) from exc
        logger.info("Dispute submitted for job %s (request_id=%s)", job_id, receipt.request_id)

    return submit
