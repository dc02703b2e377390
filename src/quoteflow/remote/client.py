"""Client interface for the remote record store."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from quoteflow.remote.types import SubmitReceipt


@runtime_checkable
class SubmitClient(Protocol):
    async def submit(self, collection: str, record: dict[str, Any]) -> SubmitReceipt:
        """Insert ``record`` into ``collection`` or raise ``SubmitError``."""

    async def aclose(self) -> None:
        """Release any underlying client resources."""


def create_client(mode: str, **kwargs: Any) -> SubmitClient:
    if mode == "mock":
        from quoteflow.remote.mock import MockClient

        return MockClient(**kwargs)
    if mode == "remote":
        from quoteflow.remote.http import HttpClient

        return HttpClient(**kwargs)
    raise ValueError(f"Unsupported submit mode: {mode}")
