"""Configuration types for resilient HTTP clients."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

import httpx

if TYPE_CHECKING:
    from collections.abc import Mapping

ShouldCacheHook = Callable[[object], bool]

DEFAULT_MAX_RETRIES = 5
DEFAULT_BACKOFF_FACTOR = 0.5
DEFAULT_MAX_BACKOFF_WAIT = 5.0
DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """Bounded exponential backoff for idempotent reads; exhaustion is fatal for listings."""

    total: int = DEFAULT_MAX_RETRIES
    backoff_factor: float = DEFAULT_BACKOFF_FACTOR
    max_backoff_wait: float = DEFAULT_MAX_BACKOFF_WAIT
    respect_retry_after_header: bool = True
    allowed_methods: frozenset[str] = field(default_factory=lambda: frozenset({"GET", "HEAD"}))
    status_forcelist: frozenset[int] = field(
        default_factory=lambda: frozenset({429, 500, 502, 503, 504})
    )
    retry_on_exceptions: tuple[type[httpx.HTTPError], ...] = (
        httpx.TimeoutException,
        httpx.NetworkError,
        httpx.RemoteProtocolError,
    )
    backoff_jitter: float = 1.0


@dataclass(slots=True, frozen=True)
class RateLimit:
    """Token bucket shared by every request made through one client."""

    max_calls: int
    per_seconds: float

    def __post_init__(self) -> None:
        if self.max_calls <= 0 or self.per_seconds <= 0:
            raise ValueError("Rate limit needs positive max_calls and per_seconds")


@dataclass(slots=True, frozen=True)
class CacheConfig:
    """hishel response cache; ``should_cache`` sees the decoded JSON body."""

    enabled: bool = True
    backend: Literal["sqlite", "memory"] = "memory"
    sqlite_path: str | None = None
    default_ttl_seconds: float | None = None
    refresh_ttl_on_access: bool = True
    should_cache: ShouldCacheHook | None = None


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    """Everything needed to build one ``ResilientClient`` for an upstream service."""

    name: str
    base_url: str | None = None
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    cache: CacheConfig | None = None
    default_headers: Mapping[str, str] | None = None
