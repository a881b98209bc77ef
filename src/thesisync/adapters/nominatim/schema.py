"""Pydantic models describing Nominatim search results."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, TypeAdapter


class NominatimPlace(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    lat: float
    lon: float
    display_name: str | None = None
    place_id: int | None = None
    importance: float | None = None


SearchResults = TypeAdapter(list[NominatimPlace])
