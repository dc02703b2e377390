"""Mock client for offline use and tests."""

from __future__ import annotations

import asyncio
from pathlib import Path
import time
from typing import Any

from quoteflow.remote.types import SubmitError, SubmitReceipt
from quoteflow.storage import append_jsonl, compute_hash


class MockClient:
    def __init__(
        self,
        *,
        latency_ms: int = 15,
        jitter_ms: int = 10,
        error_rate: float = 0.0,
        fail_with: str | None = None,
        outbox_path: Path | str | None = None,
    ) -> None:
        self._latency_ms = latency_ms
        self._jitter_ms = jitter_ms
        self._error_rate = error_rate
        self._fail_with = fail_with
        self._outbox_path = Path(outbox_path) if outbox_path else None
        self.records: list[tuple[str, dict[str, Any]]] = []

    async def submit(self, collection: str, record: dict[str, Any]) -> SubmitReceipt:
        digest = compute_hash({"collection": collection, "record": record})
        start = time.monotonic()
        await asyncio.sleep(_simulated_delay_s(digest, self._latency_ms, self._jitter_ms))
        if self._fail_with is not None:
            raise SubmitError(reason=self._fail_with, status_code=500)
        if self._error_rate > 0 and _should_error(digest, self._error_rate):
            raise SubmitError(reason="MockClient simulated transient error.", status_code=503)

        self.records.append((collection, dict(record)))
        if self._outbox_path is not None:
            append_jsonl(self._outbox_path, {"collection": collection, "record": record})
        latency_ms = int((time.monotonic() - start) * 1000)
        return SubmitReceipt(
            collection=collection,
            record=record,
            latency_ms=latency_ms,
            request_id=f"mock-{digest[:12]}",
        )

    async def aclose(self) -> None:
        return


def _simulated_delay_s(digest: str, latency_ms: int, jitter_ms: int) -> float:
    jitter = int(digest[:2], 16) % max(1, jitter_ms + 1)
    return (latency_ms + jitter) / 1000.0


def _should_error(digest: str, error_rate: float) -> bool:
    threshold = int(error_rate * 255)
    return int(digest[2:4], 16) < threshold
