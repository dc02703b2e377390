"""Async submission lifecycle shared by the quote, report and dispute flows."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Literal

logger = logging.getLogger(__name__)

IDLE = "idle"
SUBMITTING = "submitting"
SUCCESS = "success"
ERROR = "error"

SubmissionStatus = Literal["idle", "submitting", "success", "error"]
SubmitOperation = Callable[[dict[str, Any]], Awaitable[Any]]

_MAX_REASON_LENGTH = 200


class SubmissionLifecycle:
    """Four-state machine around one asynchronous submit call.

    ``idle -> submitting -> success | error`` with ``error -> submitting`` on
    retry. After ``success`` a single close callback fires once
    ``close_delay_s`` elapses. ``dispose`` cancels that callback and turns any
    result still in flight into a no-op.
    """

    def __init__(
        self,
        operation: SubmitOperation,
        *,
        close_delay_s: float,
        default_error: str,
        on_close: Callable[[], None] | None = None,
        name: str = "submission",
    ) -> None:
        self._operation = operation
        self._close_delay_s = max(0.0, close_delay_s)
        self._default_error = default_error
        self._on_close = on_close
        self._name = name
        self._status: SubmissionStatus = IDLE
        self._error_message: str | None = None
        self._attempt = 0
        self._close_handle: asyncio.TimerHandle | None = None
        self._closed = asyncio.Event()
        self._disposed = False

    @property
    def status(self) -> SubmissionStatus:
        return self._status

    @property
    def error_message(self) -> str | None:
        return self._error_message

    @property
    def is_busy(self) -> bool:
        return self._status in (SUBMITTING, SUCCESS)

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def can_submit(self) -> bool:
        return not self._disposed and self._status in (IDLE, ERROR)

    async def submit(self, payload: dict[str, Any]) -> SubmissionStatus:
        if not self.can_submit():
            logger.debug("%s: submit ignored while %s", self._name, self._status)
            return self._status

        self._attempt += 1
        attempt = self._attempt
        self._error_message = None
        self._transition(SUBMITTING)
        try:
            await self._operation(payload)
        except Exception as exc:  # noqa: BLE001
            if not self._is_current(attempt):
                logger.debug("%s: discarding late failure", self._name)
                return self._status
            logger.warning("%s failed", self._name, exc_info=True)
            self._error_message = failure_reason(exc, self._default_error)
            self._transition(ERROR)
            return self._status

        if not self._is_current(attempt):
            logger.debug("%s: discarding late success", self._name)
            return self._status
        self._transition(SUCCESS)
        self._close_handle = asyncio.get_running_loop().call_later(self._close_delay_s, self._fire_close)
        return self._status

    async def wait_closed(self) -> None:
        await self._closed.wait()

    def reset(self) -> None:
        """Return to ``idle`` for a reopened flow; a call still in flight is ignored."""
        if self._disposed:
            return
        self._cancel_close()
        self._attempt += 1
        self._error_message = None
        self._closed.clear()
        self._transition(IDLE)

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self._attempt += 1
        self._cancel_close()
        logger.debug("%s: disposed in state %s", self._name, self._status)

    def _is_current(self, attempt: int) -> bool:
        return not self._disposed and attempt == self._attempt

    def _transition(self, status: SubmissionStatus) -> None:
        logger.debug("%s: %s -> %s", self._name, self._status, status)
        self._status = status

    def _cancel_close(self) -> None:
        if self._close_handle is not None:
            self._close_handle.cancel()
            self._close_handle = None

    def _fire_close(self) -> None:
        self._close_handle = None
        if self._disposed:
            return
        self._closed.set()
        if self._on_close is not None:
            self._on_close()


def failure_reason(exc: BaseException, default: str) -> str:
    reason = getattr(exc, "reason", None)
    if not isinstance(reason, str) or not reason.strip():
        reason = str(exc)
    lines = [line.strip() for line in reason.splitlines() if line.strip()]
    if not lines:
        return default
    return lines[0][:_MAX_REASON_LENGTH]
