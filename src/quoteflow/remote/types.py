"""Submission receipt and error types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class SubmitReceipt:
    collection: str
    record: dict[str, Any]
    latency_ms: int
    request_id: str | None = None
    response: dict[str, Any] = field(default_factory=dict)


@dataclass
class SubmitError(RuntimeError):
    reason: str
    status_code: int | None = None
    response_text: str = ""
    request_id: str | None = None

    def __str__(self) -> str:
        return self.reason
