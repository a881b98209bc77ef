"""Turn one source project into the normalized record published downstream."""

from __future__ import annotations

from datetime import UTC, date, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from thesisync.domain.model import (
    Collaboration,
    Coordinates,
    EducationProgram,
    EnrichedProject,
    Location,
    Supervisor,
)
from thesisync.domain.text import DEFAULT_LOCALES, resolve_keywords

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from thesisync.domain.entity_cache import CacheStats, EntityCache
    from thesisync.domain.model import PersonRef, ResolvedOrganization, SourceProject
    from thesisync.domain.ports.lookup import Geocoder

log = getLogger(__name__)

UNKNOWN_PROGRAM = EducationProgram(name="Unknown", code="unknown")
UNKNOWN_TYPE = "Unknown"
UNKNOWN_COLLABORATION_TYPE = "unknown"


def is_collaboration_candidate(project: SourceProject) -> bool:
    """Inclusion filter: the record is flagged as collaborative and names collaborators."""

    return project.has_collaboration and bool(project.collaborator_ids)


def parse_coordinates(point: str | None) -> Coordinates | None:
    """Parse an embedded ``"lat,lng"`` string; anything malformed yields None."""

    if not point:
        return None
    parts = point.split(",")
    if len(parts) != 2:
        return None
    try:
        lat, lng = float(parts[0]), float(parts[1])
    except ValueError:
        log.debug("Ignoring malformed coordinate string %r", point)
        return None
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0):
        log.debug("Ignoring out-of-range coordinate string %r", point)
        return None
    return Coordinates(lat=lat, lng=lng)


def resolve_education_program(
    project: SourceProject,
    locales: Sequence[str] = DEFAULT_LOCALES,
) -> EducationProgram:
    """First education association, else the managing unit, else the unknown program."""

    for ref in (project.education, project.managing_unit):
        if ref is None:
            continue
        name = ref.name.resolve(locales)
        code = ref.code or (ref.identifier[:8] if ref.identifier else None)
        if name or code:
            return EducationProgram(name=name or UNKNOWN_PROGRAM.name, code=code or "unknown")
    return UNKNOWN_PROGRAM


class ProjectEnricher:
    """Enrichment engine: resolves text, people, partners and locations for a record."""

    def __init__(
        self,
        *,
        cache: EntityCache,
        project_url: Callable[[str], str],
        person_url: Callable[[str], str],
        geocoder: Geocoder | None = None,
        locales: Sequence[str] = DEFAULT_LOCALES,
        today: date | None = None,
    ) -> None:
        self._cache = cache
        self._project_url = project_url
        self._person_url = person_url
        self._geocoder = geocoder
        self._locales = tuple(locales)
        self._today = today or datetime.now(UTC).date()
        self.geocode_requests = 0

    @property
    def cache_stats(self) -> CacheStats:
        return self._cache.stats

    async def enrich(self, raw: SourceProject) -> EnrichedProject | None:
        if not is_collaboration_candidate(raw):
            return None

        collaborations: list[Collaboration] = []
        for organization_id in raw.collaborator_ids:
            collaboration = await self._collaboration(organization_id)
            if collaboration is not None:
                collaborations.append(collaboration)
        if not collaborations:
            log.debug("Dropping project %s: no collaborator could be resolved", raw.id)
            return None

        supervisors: list[Supervisor] = []
        for ref in raw.supervisors:
            supervisor = await self._supervisor(ref)
            if supervisor is not None:
                supervisors.append(supervisor)

        keywords = resolve_keywords(raw.keyword_groups, self._locales)
        campus = raw.campus.resolve(self._locales) if raw.campus is not None else ""

        return EnrichedProject(
            id=raw.id,
            title=raw.title.resolve(self._locales),
            abstract=raw.abstract.resolve(self._locales) or None,
            type=raw.type_label.resolve(self._locales) or UNKNOWN_TYPE,
            year=raw.publication_year or self._today.year,
            education_program=resolve_education_program(raw, self._locales),
            authors=tuple(name for name in raw.authors if name),
            supervisors=tuple(supervisors),
            project_url=raw.document_url or self._project_url(raw.id),
            collaborations=tuple(collaborations),
            keywords=keywords or None,
            campus=campus or None,
        )

    async def _supervisor(self, ref: PersonRef) -> Supervisor | None:
        person = await self._cache.resolve_person(ref.person_id) if ref.person_id else None
        if person is None:
            # Unresolved supervisors keep the embedded name but no link or status
            return Supervisor(name=ref.embedded_name) if ref.embedded_name else None

        name = person.name or ref.embedded_name
        if not name:
            return None
        link = self._person_url(person.profile_id or person.id) if person.is_active else None
        return Supervisor(
            name=name,
            profile_url=link,
            is_active=person.is_active,
            orcid=person.orcid,
        )

    async def _collaboration(self, organization_id: str) -> Collaboration | None:
        organization = await self._cache.resolve_organization(organization_id)
        if organization is None or not organization.name.strip():
            return None
        return Collaboration(
            name=organization.name,
            type=organization.type or UNKNOWN_COLLABORATION_TYPE,
            location=await self._locate(organization),
        )

    async def _locate(self, organization: ResolvedOrganization) -> Location | None:
        address = organization.address
        coordinates = parse_coordinates(address.point)
        if coordinates is None and self._geocoder is not None and (address.city or address.country):
            self.geocode_requests += 1
            coordinates = await self._geocoder.geocode_location(
                name=organization.name,
                city=address.city,
                country=address.country,
            )
        if not (address.city or address.country or coordinates):
            return None
        return Location(country=address.country, city=address.city, coordinates=coordinates)
