from __future__ import annotations

import asyncio

import pytest

from quoteflow.remote.types import SubmitError
from quoteflow.submission import ERROR, IDLE, SUBMITTING, SUCCESS, SubmissionLifecycle, failure_reason


@pytest.mark.asyncio
async def test_failure_then_retry_then_auto_close(operation) -> None:
    closed: list[bool] = []
    lifecycle = SubmissionLifecycle(
        operation,
        close_delay_s=0.01,
        default_error="fallback",
        on_close=lambda: closed.append(True),
    )
    operation.failures.append("network down")

    assert await lifecycle.submit({"a": 1}) == ERROR
    assert lifecycle.error_message == "network down"
    assert not lifecycle.is_busy

    assert await lifecycle.submit({"a": 1}) == SUCCESS
    assert lifecycle.error_message is None
    assert lifecycle.is_busy
    await asyncio.wait_for(lifecycle.wait_closed(), timeout=1)
    assert closed == [True]


@pytest.mark.asyncio
async def test_second_submit_while_in_flight_is_ignored(operation) -> None:
    operation.gate = asyncio.Event()
    lifecycle = SubmissionLifecycle(operation, close_delay_s=10, default_error="fallback")

    first = asyncio.create_task(lifecycle.submit({"n": 1}))
    await asyncio.sleep(0)
    assert lifecycle.status == SUBMITTING
    assert await lifecycle.submit({"n": 2}) == SUBMITTING

    operation.gate.set()
    assert await first == SUCCESS
    assert operation.payloads == [{"n": 1}]
    assert await lifecycle.submit({"n": 3}) == SUCCESS
    assert len(operation.payloads) == 1
    lifecycle.dispose()


@pytest.mark.asyncio
async def test_dispose_discards_late_result(operation) -> None:
    operation.gate = asyncio.Event()
    closed: list[bool] = []
    lifecycle = SubmissionLifecycle(
        operation,
        close_delay_s=0,
        default_error="fallback",
        on_close=lambda: closed.append(True),
    )
    task = asyncio.create_task(lifecycle.submit({}))
    await asyncio.sleep(0)
    lifecycle.dispose()
    operation.gate.set()
    assert await task == SUBMITTING
    await asyncio.sleep(0.02)
    assert closed == []
    assert not lifecycle.closed


@pytest.mark.asyncio
async def test_dispose_cancels_pending_close(operation) -> None:
    closed: list[bool] = []
    lifecycle = SubmissionLifecycle(
        operation,
        close_delay_s=0.02,
        default_error="fallback",
        on_close=lambda: closed.append(True),
    )
    assert await lifecycle.submit({}) == SUCCESS
    lifecycle.dispose()
    await asyncio.sleep(0.05)
    assert closed == []


@pytest.mark.asyncio
async def test_reset_returns_to_idle(operation) -> None:
    lifecycle = SubmissionLifecycle(operation, close_delay_s=10, default_error="fallback")
    operation.failures.append("boom")
    await lifecycle.submit({})
    lifecycle.reset()
    assert lifecycle.status == IDLE
    assert lifecycle.error_message is None
    assert lifecycle.can_submit()


@pytest.mark.asyncio
async def test_blank_failure_uses_default(operation) -> None:
    async def fail(_payload) -> None:
        raise RuntimeError("")

    lifecycle = SubmissionLifecycle(fail, close_delay_s=0, default_error="İlan gönderilemedi.")
    assert await lifecycle.submit({}) == ERROR
    assert lifecycle.error_message == "İlan gönderilemedi."


def test_failure_reason_prefers_reason_attribute() -> None:
    exc = SubmitError(reason="Yetkisiz", status_code=401)
    assert failure_reason(exc, "x") == "Yetkisiz"
    assert failure_reason(ValueError("first\nsecond"), "x") == "first"
    assert len(failure_reason(ValueError("a" * 500), "x")) == 200
