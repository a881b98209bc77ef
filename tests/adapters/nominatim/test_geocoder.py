from __future__ import annotations

import asyncio
import sqlite3
from typing import TYPE_CHECKING, Any

import httpx
import pytest

from tests.helpers.http import RecordingHandler, mock_client
from tests.helpers.projects import RecordingSleep
from thesisync.adapters.nominatim import NominatimGeocoder, build_query
from thesisync.config import ResilienceConfig, RetryPolicy, SyncConfig
from thesisync.domain.model import Coordinates

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

SEARCH_URL = "https://geocoder.test/search"
NO_RETRY = ResilienceConfig(name="geocoding-test", retry=RetryPolicy(total=0))


def _place(lat: str = "56.1496", lon: str = "10.2134") -> dict[str, Any]:
    return {"lat": lat, "lon": lon, "display_name": "Aarhus, Denmark", "place_id": 1}


def _run(
    handler: Callable[[httpx.Request], httpx.Response],
    scenario: Callable[[NominatimGeocoder], Awaitable[Any]],
    sleep: RecordingSleep | None = None,
) -> Any:
    async def main() -> Any:
        async with mock_client(NO_RETRY, handler) as http:
            geocoder = NominatimGeocoder(
                http, url=SEARCH_URL, delay_seconds=1.0, sleep=sleep or RecordingSleep()
            )
            return await scenario(geocoder)

    return asyncio.run(main())


@pytest.mark.parametrize(
    ("name", "city", "country", "expected"),
    [
        ("Vestas", "Aarhus", "Denmark", "Aarhus, Denmark"),
        ("Vestas", None, "Denmark", "Denmark"),
        ("Vestas", "Aarhus", None, "Vestas"),
        ("", None, None, ""),
    ],
)
def test_build_query_uses_most_specific_description(
    name: str, city: str | None, country: str | None, expected: str
) -> None:
    assert build_query(name=name, city=city, country=country) == expected


def test_geocode_returns_first_result_and_sends_query() -> None:
    handler = RecordingHandler(lambda _: httpx.Response(200, json=[_place()]))

    coordinates = _run(handler, lambda geocoder: geocoder.geocode("Aarhus, Denmark"))

    assert coordinates == Coordinates(lat=56.1496, lng=10.2134)
    params = handler.requests[0].url.params
    assert params["q"] == "Aarhus, Denmark"
    assert params["format"] == "json"
    assert params["limit"] == "1"


def test_geocode_location_memoizes_per_query() -> None:
    handler = RecordingHandler(lambda _: httpx.Response(200, json=[_place()]))
    sleep = RecordingSleep()

    async def scenario(
        geocoder: NominatimGeocoder,
    ) -> tuple[Coordinates | None, Coordinates | None, int]:
        first = await geocoder.geocode_location(name="Vestas", city="Aarhus", country="Denmark")
        second = await geocoder.geocode_location(name="Other", city="Aarhus", country="Denmark")
        return first, second, geocoder.calls

    first, second, calls = _run(handler, scenario, sleep)

    assert first == second == Coordinates(lat=56.1496, lng=10.2134)
    assert calls == 1
    assert len(handler.requests) == 1
    assert sleep.delays == [1.0]


def test_geocode_empty_result_is_memoized_as_none() -> None:
    handler = RecordingHandler(lambda _: httpx.Response(200, json=[]))

    async def scenario(geocoder: NominatimGeocoder) -> list[Coordinates | None]:
        return [
            await geocoder.geocode_location(name="X", city=None, country="Atlantis"),
            await geocoder.geocode_location(name="Y", city=None, country="Atlantis"),
        ]

    assert _run(handler, scenario) == [None, None]
    assert len(handler.requests) == 1


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(503),
        httpx.Response(200, content=b"not json"),
        httpx.Response(200, json=[{"display_name": "no coordinates"}]),
        httpx.Response(200, json=[_place(lat="123.0")]),
    ],
    ids=["server-error", "not-json", "missing-coordinates", "out-of-range"],
)
def test_geocode_failures_yield_none_and_still_delay(response: httpx.Response) -> None:
    sleep = RecordingSleep()

    result = _run(lambda _: response, lambda geocoder: geocoder.geocode("Aalborg, Denmark"), sleep)

    assert result is None
    assert sleep.delays == [1.0]


def test_geocode_transport_error_yields_none() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    assert _run(handler, lambda geocoder: geocoder.geocode("Aalborg, Denmark")) is None


def test_geocode_cache_storage_error_yields_none() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        raise sqlite3.OperationalError("unable to open database file")

    sleep = RecordingSleep()

    result = _run(handler, lambda geocoder: geocoder.geocode("Aalborg, Denmark"), sleep)

    assert result is None
    assert sleep.delays == [1.0]


def test_geocode_location_without_description_skips_request() -> None:
    handler = RecordingHandler(lambda _: httpx.Response(200, json=[_place()]))

    result = _run(
        handler, lambda geocoder: geocoder.geocode_location(name="", city=None, country=None)
    )

    assert result is None
    assert handler.requests == []


def test_geocoder_default_delay_follows_sync_config() -> None:
    handler = RecordingHandler(lambda _: httpx.Response(200, json=[_place()]))
    sleep = RecordingSleep()

    async def main() -> None:
        async with mock_client(NO_RETRY, handler) as http:
            await NominatimGeocoder(http, url=SEARCH_URL, sleep=sleep).geocode("Aarhus, Denmark")

    asyncio.run(main())

    assert sleep.delays == [SyncConfig().geocode_delay_seconds]
