"""Synchronization defaults for the thesis project sync."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import ConfigurationError

DEFAULT_PAGE_SIZE = 100
DEFAULT_PAGE_DELAY_SECONDS = 0.5
DEFAULT_LOOKUP_DELAY_SECONDS = 0.1
DEFAULT_GEOCODE_DELAY_SECONDS = 1.0
DEFAULT_ENRICH_CONCURRENCY = 1
DEFAULT_PROGRESS_INTERVAL = 25
DEFAULT_PARTNER_LIMIT = 100


@dataclass(frozen=True, slots=True)
class SyncConfig:
    page_size: int = DEFAULT_PAGE_SIZE
    page_delay_seconds: float = DEFAULT_PAGE_DELAY_SECONDS
    lookup_delay_seconds: float = DEFAULT_LOOKUP_DELAY_SECONDS
    geocode_delay_seconds: float = DEFAULT_GEOCODE_DELAY_SECONDS
    enrich_concurrency: int = DEFAULT_ENRICH_CONCURRENCY
    progress_interval: int = DEFAULT_PROGRESS_INTERVAL
    partner_limit: int | None = DEFAULT_PARTNER_LIMIT
    max_records: int | None = None

    def __post_init__(self) -> None:
        if self.page_size <= 0:
            raise ConfigurationError("Page size must be positive")
        if self.enrich_concurrency < 1:
            raise ConfigurationError("Enrichment concurrency must be at least 1")
        if self.progress_interval <= 0:
            raise ConfigurationError("Progress interval must be positive")
        for name in ("page_delay_seconds", "lookup_delay_seconds", "geocode_delay_seconds"):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} must be non-negative")
        if self.max_records is not None and self.max_records <= 0:
            raise ConfigurationError("Max records must be positive")


def get_sync_config(**overrides: object) -> SyncConfig:
    """Return sync defaults with ``overrides`` applied, ignoring ``None`` values."""

    values = {key: value for key, value in overrides.items() if value is not None}
    return SyncConfig(**values)  # type: ignore[arg-type]
