"""Best-effort geocoding through a Nominatim-compatible search endpoint."""

from __future__ import annotations

import asyncio
import sqlite3
from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from thesisync.config.geocoding import DEFAULT_GEOCODER_URL
from thesisync.config.sync import DEFAULT_GEOCODE_DELAY_SECONDS
from thesisync.domain.model import Coordinates

from .schema import SearchResults

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from thesisync.adapters.http_resilience import ResilientClient

log = getLogger(__name__)


def build_query(*, name: str, city: str | None, country: str | None) -> str:
    """Most specific description available: ``city, country``, else country, else name."""

    if city and country:
        return f"{city}, {country}"
    return (country or name or "").strip()


class NominatimGeocoder:
    """Resolves a location description to coordinates; never raises on lookup failure.

    Results are memoized per query for the lifetime of the instance and a fixed delay
    follows every network call regardless of its outcome.
    """

    def __init__(
        self,
        client: ResilientClient,
        *,
        url: str = DEFAULT_GEOCODER_URL,
        delay_seconds: float = DEFAULT_GEOCODE_DELAY_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._client = client
        self._url = url
        self._delay_seconds = delay_seconds
        self._sleep = sleep
        self._memo: dict[str, Coordinates | None] = {}
        self.calls = 0

    async def geocode_location(
        self,
        *,
        name: str,
        city: str | None,
        country: str | None,
    ) -> Coordinates | None:
        query = build_query(name=name, city=city, country=country)
        if not query:
            return None
        if query in self._memo:
            return self._memo[query]
        coordinates = await self.geocode(query)
        self._memo[query] = coordinates
        return coordinates

    async def geocode(self, query: str) -> Coordinates | None:
        self.calls += 1
        params = {"q": query, "format": "json", "limit": "1"}
        try:
            response = await self._client.get(self._url, params=params)
            response.raise_for_status()
            places = SearchResults.validate_python(response.json())
        except (httpx.HTTPError, sqlite3.Error, ValueError) as exc:
            log.warning(f"Geocoding failed for {query!r}: {exc}")
            return None
        finally:
            await self._sleep(self._delay_seconds)

        if not places:
            log.warning(f"No geocoding result for {query!r}")
            return None
        place = places[0]
        if not (-90.0 <= place.lat <= 90.0 and -180.0 <= place.lon <= 180.0):
            log.warning(f"Geocoding returned out-of-range coordinates for {query!r}")
            return None
        return Coordinates(lat=place.lat, lng=place.lon)
