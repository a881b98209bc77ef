"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from contextlib import AsyncExitStack
from logging import getLogger
from typing import TYPE_CHECKING

from thesisync.adapters.artifacts import JsonArtifactWriter
from thesisync.adapters.http_resilience import ResilientClient
from thesisync.adapters.nominatim import NominatimGeocoder
from thesisync.adapters.pure import PaginatedProjectFetcher, PureClient
from thesisync.config import (
    get_geocoding_config,
    get_pure_config,
    get_storage_config,
    get_sync_config,
)
from thesisync.domain.enrichment import ProjectEnricher
from thesisync.domain.entity_cache import EntityCache
from thesisync.domain.sync import SyncPipeline

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import date, datetime
    from pathlib import Path

    import httpx

    from thesisync.config import GeocodingConfig, PureConfig, StorageConfig, SyncConfig
    from thesisync.domain.sync import SyncReport

log = getLogger(__name__)


def sync_thesis_projects(
    *,
    output_dir: str | Path | None = None,
    page_size: int | None = None,
    concurrency: int | None = None,
    geocoding: bool | None = None,
    max_records: int | None = None,
    pure_config: PureConfig | None = None,
    geocoding_config: GeocodingConfig | None = None,
    sync_config: SyncConfig | None = None,
) -> SyncReport:
    """Run one full sync with configuration from the environment plus explicit overrides.

    Configuration is resolved before any network call, so a missing API key fails fast.
    """

    pure = pure_config or get_pure_config()
    geocoder_settings = geocoding_config or get_geocoding_config()
    storage = get_storage_config(output_dir=output_dir)
    settings = sync_config or get_sync_config(
        page_size=page_size,
        enrich_concurrency=concurrency,
        max_records=max_records,
    )
    use_geocoding = geocoder_settings.enabled if geocoding is None else geocoding

    log.info(
        f"Starting thesis project sync: base_url={pure.base_url}, "
        f"output_dir={storage.resolve_output_dir()}, page_size={settings.page_size}, "
        f"concurrency={settings.enrich_concurrency}, geocoding={use_geocoding}, "
        f"max_records={settings.max_records}"
    )

    return asyncio.run(
        run_sync(
            pure=pure,
            storage=storage,
            settings=settings,
            geocoding=geocoder_settings if use_geocoding else None,
        )
    )


async def run_sync(
    *,
    pure: PureConfig,
    storage: StorageConfig,
    settings: SyncConfig,
    geocoding: GeocodingConfig | None = None,
    pure_transport: httpx.AsyncBaseTransport | None = None,
    geocoding_transport: httpx.AsyncBaseTransport | None = None,
    today: date | None = None,
    clock: Callable[[], datetime] | None = None,
) -> SyncReport:
    """Wire adapters and domain services for one run and execute the pipeline.

    Both HTTP clients, and with them the entity cache and geocoder memo, live exactly
    as long as this coroutine.
    """

    async with AsyncExitStack() as stack:
        pure_http = await stack.enter_async_context(
            ResilientClient(pure.resilience, transport=pure_transport)
        )
        pure_client = PureClient(pure_http, today=today)

        geocoder: NominatimGeocoder | None = None
        if geocoding is not None:
            geocoding_http = await stack.enter_async_context(
                ResilientClient(geocoding.resilience, transport=geocoding_transport)
            )
            geocoder = NominatimGeocoder(
                geocoding_http,
                url=geocoding.url,
                delay_seconds=settings.geocode_delay_seconds,
            )

        cache = EntityCache(
            organizations=pure_client,
            persons=pure_client,
            delay_seconds=settings.lookup_delay_seconds,
        )
        enricher = ProjectEnricher(
            cache=cache,
            project_url=pure.project_url,
            person_url=pure.person_url,
            geocoder=geocoder,
            today=today,
        )
        fetcher = PaginatedProjectFetcher(
            pure_client,
            page_size=settings.page_size,
            page_delay_seconds=settings.page_delay_seconds,
            max_records=settings.max_records,
        )
        pipeline = SyncPipeline(
            source=fetcher,
            enricher=enricher,
            writer=JsonArtifactWriter(storage.resolve_output_dir()),
            concurrency=settings.enrich_concurrency,
            progress_interval=settings.progress_interval,
            partner_limit=settings.partner_limit,
            clock=clock,
        )
        return await pipeline.run()
