"""Orchestrator sequencing fetch, enrich, aggregate and write for one run."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from thesisync.domain.aggregation import aggregate
from thesisync.domain.enrichment import is_collaboration_candidate
from thesisync.domain.entity_cache import CacheStats
from thesisync.domain.ports.persistence import ArtifactBundle

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from pathlib import Path

    from thesisync.domain.enrichment import ProjectEnricher
    from thesisync.domain.model import EnrichedProject, SourceProject
    from thesisync.domain.ports.fetching import ProjectSource
    from thesisync.domain.ports.persistence import ArtifactWriter

log = getLogger(__name__)

DEFAULT_PROGRESS_INTERVAL = 25


class SyncState(StrEnum):
    PENDING = "pending"
    FETCHING = "fetching"
    ENRICHING = "enriching"
    AGGREGATING = "aggregating"
    WRITING = "writing"
    DONE = "done"
    FAILED = "failed"


@dataclass(slots=True)
class SyncReport:
    """Running counts for one run; returned on success, attached to ``SyncError`` on failure."""

    state: SyncState = SyncState.PENDING
    started_at: datetime | None = None
    finished_at: datetime | None = None
    fetched: int = 0
    processed: int = 0
    included: int = 0
    skipped: int = 0
    failed: int = 0
    cache: CacheStats = field(default_factory=CacheStats)
    geocode_requests: int = 0
    artifacts: dict[str, Path] = field(default_factory=dict)

    @property
    def duration_seconds(self) -> float | None:
        if self.started_at is None or self.finished_at is None:
            return None
        return (self.finished_at - self.started_at).total_seconds()


class SyncError(RuntimeError):
    """Raised when a run reaches the failed state."""

    def __init__(self, message: str, *, stage: SyncState, report: SyncReport) -> None:
        super().__init__(message)
        self.stage = stage
        self.report = report


def _utc_now() -> datetime:
    return datetime.now(UTC)


class SyncPipeline:
    """Fetching, Enriching, Aggregating, Writing, Done; Failed from any stage but Enriching.

    Records are enriched in source order. With ``concurrency`` above one, up to that many
    records are enriched at once; output order still follows the source and the entity
    cache deduplicates in-flight lookups.
    """

    def __init__(
        self,
        *,
        source: ProjectSource,
        enricher: ProjectEnricher,
        writer: ArtifactWriter,
        concurrency: int = 1,
        progress_interval: int = DEFAULT_PROGRESS_INTERVAL,
        partner_limit: int | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self._source = source
        self._enricher = enricher
        self._writer = writer
        self._concurrency = concurrency
        self._progress_interval = max(progress_interval, 1)
        self._partner_limit = partner_limit
        self._clock = clock or _utc_now
        self.report = SyncReport()

    async def run(self) -> SyncReport:
        report = self.report
        report.started_at = self._clock()

        self._enter(SyncState.FETCHING)
        try:
            raw_projects = await self._source.fetch_all(is_collaboration_candidate)
        except Exception as exc:
            raise self._fail("Fetching source projects failed", exc) from exc
        report.fetched = len(raw_projects)
        log.info("Fetched %s candidate projects", report.fetched)

        self._enter(SyncState.ENRICHING)
        projects = await self._enrich_all(raw_projects)

        self._enter(SyncState.AGGREGATING)
        try:
            aggregated = aggregate(projects, partner_limit=self._partner_limit)
        except Exception as exc:
            raise self._fail("Aggregating enriched projects failed", exc) from exc

        self._enter(SyncState.WRITING)
        bundle = ArtifactBundle(
            generated_at=self._clock(),
            projects=projects,
            metadata=aggregated.metadata,
            organizations=aggregated.organizations,
        )
        try:
            report.artifacts = dict(self._writer.write(bundle))
        except Exception as exc:
            raise self._fail("Writing artifacts failed", exc) from exc

        self._enter(SyncState.DONE)
        report.finished_at = self._clock()
        self._log_summary()
        return report

    async def _enrich_all(self, raw_projects: Sequence[SourceProject]) -> list[EnrichedProject]:
        if self._concurrency == 1:
            results = [await self._enrich_one(raw) for raw in raw_projects]
        else:
            semaphore = asyncio.Semaphore(self._concurrency)

            async def bounded(raw: SourceProject) -> EnrichedProject | None:
                async with semaphore:
                    return await self._enrich_one(raw)

            results = await asyncio.gather(*(bounded(raw) for raw in raw_projects))
        return [project for project in results if project is not None]

    async def _enrich_one(self, raw: SourceProject) -> EnrichedProject | None:
        report = self.report
        try:
            project = await self._enricher.enrich(raw)
        except Exception:
            report.failed += 1
            log.exception("Enrichment of project %s failed; skipping it", raw.id)
            project = None
        else:
            if project is None:
                report.skipped += 1
            else:
                report.included += 1
        report.processed += 1
        self._sync_counters()
        if report.processed % self._progress_interval == 0:
            log.info(
                "Progress: %s/%s processed, %s included, %s cached entities",
                report.processed,
                report.fetched,
                report.included,
                report.cache.misses,
            )
        return project

    def _enter(self, state: SyncState) -> None:
        log.debug("Sync state %s -> %s", self.report.state, state)
        self.report.state = state

    def _fail(self, message: str, exc: Exception) -> SyncError:
        stage = self.report.state
        self.report.state = SyncState.FAILED
        self.report.finished_at = self._clock()
        self._sync_counters()
        log.error("%s: %s", message, exc)
        self._log_summary()
        return SyncError(f"{message}: {exc}", stage=stage, report=self.report)

    def _sync_counters(self) -> None:
        self.report.cache = self._enricher.cache_stats
        self.report.geocode_requests = self._enricher.geocode_requests

    def _log_summary(self) -> None:
        report = self.report
        duration = report.duration_seconds
        log.info(
            "Sync %s in %ss: fetched=%s, included=%s, skipped=%s, failed=%s, "
            "lookups=%s (hits=%s, misses=%s, failures=%s), geocode_requests=%s",
            report.state,
            "?" if duration is None else f"{duration:.1f}",
            report.fetched,
            report.included,
            report.skipped,
            report.failed,
            report.cache.lookups,
            report.cache.hits,
            report.cache.misses,
            report.cache.failures,
            report.geocode_requests,
        )
        for name, path in sorted(report.artifacts.items()):
            log.info("Artifact %s: %s (%s)", name, path, _size_kb(path))


def _size_kb(path: Path) -> str:
    try:
        return f"{path.stat().st_size / 1024:.2f} KB"
    except OSError:
        return "? KB"
