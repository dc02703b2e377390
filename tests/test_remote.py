from __future__ import annotations

import json

import httpx
import pytest

from quoteflow.remote.http import HttpClient
from quoteflow.remote.types import SubmitError


def _client(handler) -> HttpClient:
    return HttpClient(
        base_url="https://api.example.test",
        api_key="secret",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_posts_record_with_bearer_token() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json={"id": "rec-1"}, headers={"x-request-id": "req-9"})

    async with _client(handler) as client:
        receipt = await client.submit("reports", {"reason": "Spam"})

    assert receipt.request_id == "req-9"
    assert receipt.response == {"id": "rec-1"}
    assert seen[0].url.path == "/reports"
    assert seen[0].headers["Authorization"] == "Bearer secret"
    assert json.loads(seen[0].content) == {"reason": "Spam"}


@pytest.mark.asyncio
async def test_error_reason_from_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"message": "reason is required"})

    async with _client(handler) as client:
        with pytest.raises(SubmitError) as excinfo:
            await client.submit("reports", {})
    assert excinfo.value.reason == "reason is required"
    assert excinfo.value.status_code == 400


@pytest.mark.asyncio
async def test_error_without_body_uses_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable")

    async with _client(handler) as client:
        with pytest.raises(SubmitError, match="HTTP 503"):
            await client.submit("reports", {})


@pytest.mark.asyncio
async def test_transport_error_wrapped() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("network down", request=request)

    async with _client(handler) as client:
        with pytest.raises(SubmitError, match="network down"):
            await client.submit("reports", {})


def test_missing_credentials(monkeypatch) -> None:
    monkeypatch.delenv("QUOTEFLOW_API_KEY", raising=False)
    with pytest.raises(ValueError):
        HttpClient(base_url="https://api.example.test")
