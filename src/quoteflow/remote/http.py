"""HTTP-backed record store client."""

from __future__ import annotations

import os
import time
from typing import Any

import httpx

from quoteflow.remote.types import SubmitError, SubmitReceipt


class HttpClient:
    def __init__(
        self,
        *,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout_s: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        resolved_key = api_key or os.environ.get("QUOTEFLOW_API_KEY")
        if not resolved_key:
            raise ValueError("QUOTEFLOW_API_KEY is required for HttpClient.")
        resolved_url = base_url or os.environ.get("QUOTEFLOW_API_URL")
        if not resolved_url:
            raise ValueError("QUOTEFLOW_API_URL is required for HttpClient.")
        self._api_key = resolved_key
        self._client = httpx.AsyncClient(base_url=resolved_url, timeout=timeout_s, transport=transport)

    async def submit(self, collection: str, record: dict[str, Any]) -> SubmitReceipt:
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        start = time.monotonic()
        try:
            response = await self._client.post(f"/{collection}", json=record, headers=headers)
        except httpx.HTTPError as exc:
            raise SubmitError(reason=str(exc) or exc.__class__.__name__) from exc
        latency_ms = int((time.monotonic() - start) * 1000)
        request_id = _extract_request_id(response.headers)

        if response.status_code < 200 or response.status_code >= 300:
            raise SubmitError(
                reason=_extract_reason(response),
                status_code=response.status_code,
                response_text=response.text,
                request_id=request_id,
            )

        return SubmitReceipt(
            collection=collection,
            record=record,
            latency_ms=latency_ms,
            request_id=request_id,
            response=_safe_json(response),
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


def _extract_request_id(headers: httpx.Headers) -> str | None:
    return headers.get("x-request-id") or headers.get("request-id")


def _extract_reason(response: httpx.Response) -> str:
    payload = _safe_json(response)
    for key in ("message", "error", "msg", "detail"):
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return f"HTTP {response.status_code}"


def _safe_json(response: httpx.Response) -> dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        return {}
    if isinstance(data, dict):
        return data
    return {"data": data}
