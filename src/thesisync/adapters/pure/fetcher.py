"""Offset-paginated retrieval of the full student-project listing."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from thesisync.config.sync import DEFAULT_PAGE_DELAY_SECONDS, DEFAULT_PAGE_SIZE

from .translator import parse_student_project

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from thesisync.domain.model import SourceProject
    from thesisync.domain.ports.fetching import ProjectPredicate, ProjectSource

    from .client import PureClient

log = getLogger(__name__)


def _default_sleep(seconds: float) -> Awaitable[None]:
    return asyncio.sleep(seconds)


@dataclass(slots=True)
class PaginatedProjectFetcher:
    """Walk the listing endpoint until the reported total has been retrieved.

    The first page doubles as count discovery. The predicate runs on each page after it
    arrives because the upstream cannot filter on collaboration server-side, so the
    reported total is the unfiltered count.
    """

    client: PureClient
    page_size: int = DEFAULT_PAGE_SIZE
    page_delay_seconds: float = DEFAULT_PAGE_DELAY_SECONDS
    max_records: int | None = None
    sleep: Callable[[float], Awaitable[None]] = field(default=_default_sleep)

    async def fetch_all(self, predicate: ProjectPredicate | None = None) -> list[SourceProject]:
        collected: list[SourceProject] = []
        offset = 0
        retrieved = 0
        total: int | None = None
        page_number = 0

        while True:
            page = await self.client.fetch_page(offset=offset, size=self.page_size)
            page_number += 1
            if total is None:
                total = page.count
                log.info(f"Upstream reports {total} student projects")

            items = page.items
            if self.max_records is not None:
                items = items[: max(self.max_records - retrieved, 0)]
            retrieved += len(items)

            kept = 0
            for item in items:
                project = self._translate(item)
                if project is None:
                    continue
                if predicate is None or predicate(project):
                    collected.append(project)
                    kept += 1

            log.info(
                f"Fetched page {page_number} (offset {offset}): {len(items)} records, "
                f"{kept} kept, {retrieved}/{total} retrieved"
            )

            if retrieved >= total:
                break
            if self.max_records is not None and retrieved >= self.max_records:
                log.info(f"Stopping after {retrieved} records (max_records={self.max_records})")
                break
            if not page.items:
                log.warning(
                    f"Empty page at offset {offset} before reaching the reported total "
                    f"({retrieved}/{total}); stopping"
                )
                break

            offset += len(page.items)
            await self.sleep(self.page_delay_seconds)

        return collected

    @staticmethod
    def _translate(item: dict[str, Any]) -> SourceProject | None:
        try:
            return parse_student_project(item)
        except ValidationError as exc:
            log.warning(
                f"Skipping malformed project {item.get('uuid', '<no uuid>')}: "
                f"{exc.error_count()} validation errors"
            )
            return None


if TYPE_CHECKING:

    def _source_check(fetcher: PaginatedProjectFetcher) -> ProjectSource:
        return fetcher
