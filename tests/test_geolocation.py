from __future__ import annotations

import asyncio

import httpx
import pytest

from conftest import fill_all_steps
from quoteflow.geolocation import (
    PERMISSION_DENIED,
    POSITION_UNAVAILABLE,
    TIMEOUT,
    Coordinates,
    GeolocationError,
    HttpGeolocation,
    LocationLookup,
    StaticGeolocation,
    UnsupportedGeolocation,
)
from quoteflow.messages import GEO_PERMISSION_DENIED, GEO_UNKNOWN, GEO_UNSUPPORTED


class FailingGeolocation:
    def __init__(self, kind: str) -> None:
        self.kind = kind

    async def locate(self) -> Coordinates:
        raise GeolocationError(self.kind)


class GatedGeolocation:
    def __init__(self) -> None:
        self.gate = asyncio.Event()

    async def locate(self) -> Coordinates:
        await self.gate.wait()
        return Coordinates(latitude=41.0, longitude=29.0)


@pytest.mark.asyncio
async def test_permission_denied_leaves_text_untouched(make_wizard) -> None:
    wizard = make_wizard(geolocation=FailingGeolocation(PERMISSION_DENIED))
    fill_all_steps(wizard)
    wizard.change("location", "Kadıköy")
    lookup = await wizard.request_location("location")
    assert lookup.error == GEO_PERMISSION_DENIED
    assert lookup.error_kind == PERMISSION_DENIED
    assert wizard.answer("location") == {"text": "Kadıköy"}
    wizard.change("location", "Moda")
    assert wizard.answer("location") == {"text": "Moda"}


@pytest.mark.asyncio
async def test_resolved_position_written_to_answer(make_wizard) -> None:
    wizard = make_wizard(geolocation=StaticGeolocation(40.99, 29.03))
    fill_all_steps(wizard)
    lookup = await wizard.request_location("location")
    assert lookup.error is None
    assert wizard.answer("location") == {"text": "40.99, 29.03", "latitude": 40.99, "longitude": 29.03}


@pytest.mark.asyncio
async def test_missing_capability_reports_unsupported(make_wizard) -> None:
    wizard = make_wizard()
    fill_all_steps(wizard)
    lookup = await wizard.request_location("location")
    assert lookup.error == GEO_UNSUPPORTED
    lookup = await wizard.request_location("location")
    assert lookup.error == GEO_UNSUPPORTED


@pytest.mark.asyncio
async def test_result_dropped_after_close(make_wizard) -> None:
    provider = GatedGeolocation()
    wizard = make_wizard(geolocation=provider)
    fill_all_steps(wizard)
    task = asyncio.create_task(wizard.request_location("location"))
    await asyncio.sleep(0)
    assert wizard.location_lookup("location").pending
    wizard.close()
    provider.gate.set()
    lookup = await task
    assert lookup.coordinates is None
    assert wizard.answers == {}


@pytest.mark.asyncio
async def test_result_dropped_after_leaving_step(make_wizard) -> None:
    provider = GatedGeolocation()
    wizard = make_wizard(geolocation=provider)
    fill_all_steps(wizard)
    wizard.change("location", "Kadıköy")
    task = asyncio.create_task(wizard.request_location("location"))
    await asyncio.sleep(0)
    wizard.back()
    provider.gate.set()
    await task
    assert wizard.answers["location"] == {"text": "Kadıköy"}


@pytest.mark.asyncio
async def test_lookup_abandon_resets_pending() -> None:
    provider = GatedGeolocation()
    lookup = LocationLookup()
    task = asyncio.create_task(lookup.run(provider))
    await asyncio.sleep(0)
    lookup.abandon()
    assert not lookup.pending
    provider.gate.set()
    assert await task is None


@pytest.mark.asyncio
async def test_unsupported_provider() -> None:
    lookup = LocationLookup()
    assert await lookup.run(UnsupportedGeolocation()) is None
    assert lookup.error == GEO_UNSUPPORTED


@pytest.mark.asyncio
async def test_http_provider_maps_statuses(monkeypatch) -> None:
    responses = {
        "https://geo.test/ok": httpx.Response(200, json={"lat": 41.1, "lon": 29.2}),
        "https://geo.test/denied": httpx.Response(403),
        "https://geo.test/broken": httpx.Response(200, json={"city": "İstanbul"}),
    }

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/slow":
            raise httpx.ReadTimeout("timed out", request=request)
        return responses[str(request.url)]

    real_client = httpx.AsyncClient

    def patched(*args, **kwargs):
        kwargs["transport"] = httpx.MockTransport(handler)
        return real_client(*args, **kwargs)

    monkeypatch.setattr(httpx, "AsyncClient", patched)

    coordinates = await HttpGeolocation("https://geo.test/ok").locate()
    assert coordinates == Coordinates(latitude=41.1, longitude=29.2)

    expectations = {
        "https://geo.test/denied": PERMISSION_DENIED,
        "https://geo.test/broken": POSITION_UNAVAILABLE,
        "https://geo.test/slow": TIMEOUT,
    }
    for url, kind in expectations.items():
        with pytest.raises(GeolocationError) as excinfo:
            await HttpGeolocation(url).locate()
        assert excinfo.value.kind == kind


class BrokenGeolocation:
    def __init__(self) -> None:
        self.calls = 0

    async def locate(self) -> Coordinates:
        self.calls += 1
        raise OSError("device gone")


@pytest.mark.asyncio
async def test_unexpected_provider_failure_keeps_lookup_usable(make_wizard) -> None:
    provider = BrokenGeolocation()
    wizard = make_wizard(geolocation=provider)
    fill_all_steps(wizard)
    lookup = await wizard.request_location("location")
    assert lookup.status == "error"
    assert lookup.error == GEO_UNKNOWN
    assert wizard.answer("location") == {"text": "İstanbul, Kadıköy"}
    await wizard.request_location("location")
    assert provider.calls == 2


@pytest.mark.asyncio
async def test_http_provider_rejects_malformed_url() -> None:
    with pytest.raises(GeolocationError) as excinfo:
        await HttpGeolocation("http://exa mple.com:abc/").locate()
    assert excinfo.value.kind == POSITION_UNAVAILABLE
