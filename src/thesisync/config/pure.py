"""Pure research-information API configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_or_default, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_PURE_BASE_URL = "https://vbn.aau.dk/ws/api/524"
DEFAULT_PORTAL_BASE_URL = "https://vbn.aau.dk"


@dataclass(frozen=True, slots=True)
class PureConfig:
    """Holds Pure API configuration values."""

    api_key: str
    resilience: ResilienceConfig
    portal_base_url: str = DEFAULT_PORTAL_BASE_URL

    @property
    def base_url(self) -> str:
        return self.resilience.base_url or DEFAULT_PURE_BASE_URL

    def project_url(self, project_id: str) -> str:
        return f"{self.portal_base_url.rstrip('/')}/en/publications/{project_id}"

    def person_url(self, profile_id: str) -> str:
        return f"{self.portal_base_url.rstrip('/')}/da/persons/{profile_id}"


def build_pure_resilience(api_key: str, base_url: str = DEFAULT_PURE_BASE_URL) -> ResilienceConfig:
    # Trailing slash keeps httpx from dropping the last base_url segment on relative paths
    normalized = base_url if base_url.endswith("/") else f"{base_url}/"
    return ResilienceConfig(
        name="pure",
        base_url=normalized,
        ratelimit=RateLimit(max_calls=4, per_seconds=1.0),
        retry=RetryPolicy(),
        default_headers={"api-key": api_key, "Accept": "application/json"},
    )


def get_pure_config() -> PureConfig:
    values = require_env_vars(("PURE_API_KEY",))
    api_key = values["PURE_API_KEY"]
    base_url = env_or_default("PURE_API_BASE_URL", DEFAULT_PURE_BASE_URL)
    portal = env_or_default("PORTAL_BASE_URL", DEFAULT_PORTAL_BASE_URL)
    return PureConfig(
        api_key=api_key,
        resilience=build_pure_resilience(api_key, base_url),
        portal_base_url=portal,
    )
