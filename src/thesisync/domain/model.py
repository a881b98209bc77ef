"""Domain records flowing through the sync pipeline.

Source records (``SourceProject`` and its references) are produced by the upstream
adapter with their localized text still unresolved. Resolved entities are what the
entity cache memoizes, and enriched records are what the artifacts serialize.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .text import LocalizedKeywords, LocalizedText


# --- source side -----------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PersonRef:
    """Supervisor reference: a person identifier plus whatever name the record embeds."""

    person_id: str | None
    embedded_name: str | None = None


@dataclass(frozen=True, slots=True)
class EducationRef:
    identifier: str | None
    name: LocalizedText
    code: str | None = None


@dataclass(frozen=True, slots=True)
class SourceProject:
    """Raw thesis project as reported by the upstream listing endpoint."""

    id: str
    title: LocalizedText
    abstract: LocalizedText
    type_label: LocalizedText
    publication_year: int | None
    authors: tuple[str, ...] = ()
    supervisors: tuple[PersonRef, ...] = ()
    has_collaboration: bool = False
    collaborator_ids: tuple[str, ...] = ()
    education: EducationRef | None = None
    managing_unit: EducationRef | None = None
    keyword_groups: tuple[LocalizedKeywords, ...] = ()
    campus: LocalizedText | None = None
    document_url: str | None = None


# --- resolved entities -----------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Coordinates:
    lat: float
    lng: float


@dataclass(frozen=True, slots=True)
class Address:
    country: str | None = None
    city: str | None = None
    point: str | None = None


@dataclass(frozen=True, slots=True)
class ResolvedOrganization:
    id: str
    name: str
    type: str
    address: Address = field(default_factory=Address)


@dataclass(frozen=True, slots=True)
class AffiliationPeriod:
    start: date | None = None
    end: date | None = None

    def is_current(self, today: date) -> bool:
        return self.end is None or self.end >= today


@dataclass(frozen=True, slots=True)
class ResolvedPerson:
    id: str
    name: str
    profile_id: str | None = None
    orcid: str | None = None
    is_active: bool = False

    @classmethod
    def from_affiliations(
        cls,
        *,
        id: str,  # noqa: A002
        name: str,
        affiliations: tuple[AffiliationPeriod, ...],
        today: date,
        profile_id: str | None = None,
        orcid: str | None = None,
    ) -> ResolvedPerson:
        active = any(period.is_current(today) for period in affiliations)
        return cls(id=id, name=name, profile_id=profile_id, orcid=orcid, is_active=active)


# --- enriched output -------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class EducationProgram:
    name: str
    code: str


@dataclass(frozen=True, slots=True)
class Supervisor:
    name: str
    profile_url: str | None = None
    is_active: bool | None = None
    orcid: str | None = None


@dataclass(frozen=True, slots=True)
class Location:
    country: str | None = None
    city: str | None = None
    coordinates: Coordinates | None = None


@dataclass(frozen=True, slots=True)
class Collaboration:
    name: str
    type: str
    location: Location | None = None


@dataclass(frozen=True, slots=True)
class EnrichedProject:
    id: str
    title: str
    type: str
    year: int
    education_program: EducationProgram
    project_url: str
    collaborations: tuple[Collaboration, ...]
    abstract: str | None = None
    authors: tuple[str, ...] = ()
    supervisors: tuple[Supervisor, ...] = ()
    keywords: tuple[str, ...] | None = None
    campus: str | None = None

    @property
    def has_collaboration(self) -> bool:
        return bool(self.collaborations)


# --- aggregates ------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class OrganizationEntry:
    id: str
    name: str
    type: str
    country: str | None
    project_count: int


@dataclass(frozen=True, slots=True)
class YearRange:
    min: int | None
    max: int | None
    available: tuple[int, ...]


@dataclass(frozen=True, slots=True)
class FacetCount:
    """One entry of a count-by-category list; ``type`` is set for partner facets."""

    name: str
    count: int
    type: str | None = None


@dataclass(frozen=True, slots=True)
class ProgramCount:
    name: str
    code: str
    count: int


@dataclass(frozen=True, slots=True)
class Statistics:
    total_projects: int
    total_collaborations: int
    unique_partners: int
    unique_countries: int


@dataclass(frozen=True, slots=True)
class Metadata:
    years: YearRange
    education_programs: tuple[ProgramCount, ...]
    project_types: tuple[FacetCount, ...]
    collaboration_types: tuple[FacetCount, ...]
    countries: tuple[FacetCount, ...]
    campuses: tuple[FacetCount, ...]
    partners: tuple[FacetCount, ...]
    statistics: Statistics


@dataclass(frozen=True, slots=True)
class AggregationResult:
    metadata: Metadata
    organizations: tuple[OrganizationEntry, ...]
