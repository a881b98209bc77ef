"""Geocoding service configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_flag, env_or_default, optional_env_var
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_GEOCODER_URL = "https://nominatim.openstreetmap.org/search"
DEFAULT_GEOCODER_USER_AGENT = "AAU-Student-Project-Portal/1.0"


def _has_results(payload: object) -> bool:
    return isinstance(payload, list) and len(payload) > 0


@dataclass(frozen=True, slots=True)
class GeocodingConfig:
    enabled: bool
    url: str
    resilience: ResilienceConfig


def build_geocoding_resilience(
    *,
    user_agent: str = DEFAULT_GEOCODER_USER_AGENT,
    cache_path: str | None = None,
) -> ResilienceConfig:
    cache = (
        CacheConfig(backend="sqlite", sqlite_path=cache_path, should_cache=_has_results)
        if cache_path
        else CacheConfig(backend="memory", should_cache=_has_results)
    )
    return ResilienceConfig(
        name="geocoding",
        ratelimit=RateLimit(max_calls=1, per_seconds=1.0),
        retry=RetryPolicy(total=2),
        cache=cache,
        default_headers={"User-Agent": user_agent, "Accept": "application/json"},
    )


def get_geocoding_config() -> GeocodingConfig:
    url = env_or_default("GEOCODER_URL", DEFAULT_GEOCODER_URL)
    user_agent = env_or_default("GEOCODER_USER_AGENT", DEFAULT_GEOCODER_USER_AGENT)
    return GeocodingConfig(
        enabled=env_flag("SYNC_GEOCODING", default=True),
        url=url,
        resilience=build_geocoding_resilience(
            user_agent=user_agent,
            cache_path=optional_env_var("GEOCODER_CACHE_PATH"),
        ),
    )
