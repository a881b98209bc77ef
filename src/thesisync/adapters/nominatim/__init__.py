"""Public interface for the Nominatim geocoding adapter."""

from __future__ import annotations

from .client import NominatimGeocoder, build_query
from .schema import NominatimPlace, SearchResults

__all__ = ["NominatimGeocoder", "NominatimPlace", "SearchResults", "build_query"]
