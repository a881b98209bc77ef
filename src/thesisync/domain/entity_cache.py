"""Run-scoped memoization of organization and person lookups."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, Final, cast

from thesisync.domain.ports.lookup import EntityLookupError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from thesisync.domain.model import ResolvedOrganization, ResolvedPerson
    from thesisync.domain.ports.lookup import OrganizationLookup, PersonLookup

log = getLogger(__name__)

type Sleep = Callable[[float], Awaitable[None]]


class EntityKind(StrEnum):
    ORGANIZATION = "organization"
    PERSON = "person"


class _NotFound:
    __slots__ = ()

    def __repr__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND: Final = _NotFound()

type _Entry = ResolvedOrganization | ResolvedPerson | _NotFound


@dataclass(slots=True)
class CacheStats:
    hits: int = 0
    misses: int = 0
    failures: int = 0

    @property
    def lookups(self) -> int:
        return self.hits + self.misses


class EntityCache:
    """Memoizes secondary-entity lookups for the duration of one run.

    The first request for an identifier performs the network call and stores the
    outcome, including a not-found sentinel, so failed identifiers are never retried
    within the run. Concurrent requests for an identifier that is still loading await
    the same in-flight lookup. A fixed delay follows every network call, never a hit.
    """

    def __init__(
        self,
        *,
        organizations: OrganizationLookup,
        persons: PersonLookup,
        delay_seconds: float = 0.0,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._organizations = organizations
        self._persons = persons
        self._delay_seconds = delay_seconds
        self._sleep = sleep
        self._entries: dict[tuple[EntityKind, str], _Entry] = {}
        self._pending: dict[tuple[EntityKind, str], asyncio.Task[_Entry]] = {}
        self.stats = CacheStats()

    async def resolve_organization(self, organization_id: str) -> ResolvedOrganization | None:
        entry = await self._resolve(
            EntityKind.ORGANIZATION,
            organization_id,
            self._organizations.fetch_organization,
        )
        return None if isinstance(entry, _NotFound) else cast("ResolvedOrganization", entry)

    async def resolve_person(self, person_id: str) -> ResolvedPerson | None:
        entry = await self._resolve(EntityKind.PERSON, person_id, self._persons.fetch_person)
        return None if isinstance(entry, _NotFound) else cast("ResolvedPerson", entry)

    async def _resolve(
        self,
        kind: EntityKind,
        identifier: str,
        loader: Callable[[str], Awaitable[ResolvedOrganization | ResolvedPerson | None]],
    ) -> _Entry:
        key = (kind, identifier)
        entry = self._entries.get(key)
        if entry is not None:
            self.stats.hits += 1
            return entry

        pending = self._pending.get(key)
        if pending is not None:
            self.stats.hits += 1
            return await pending

        task = asyncio.ensure_future(self._load(kind, identifier, loader))
        self._pending[key] = task
        try:
            return await task
        finally:
            self._pending.pop(key, None)

    async def _load(
        self,
        kind: EntityKind,
        identifier: str,
        loader: Callable[[str], Awaitable[ResolvedOrganization | ResolvedPerson | None]],
    ) -> _Entry:
        self.stats.misses += 1
        entry: _Entry
        try:
            result = await loader(identifier)
        except EntityLookupError as exc:
            self.stats.failures += 1
            log.warning("Could not resolve %s %s: %s", kind, identifier, exc)
            entry = NOT_FOUND
        else:
            if result is None:
                log.warning("%s %s not found upstream", kind.capitalize(), identifier)
                entry = NOT_FOUND
            else:
                entry = result
        finally:
            await self._sleep(self._delay_seconds)

        self._entries[(kind, identifier)] = entry
        return entry
