"""Reusable fakes and builders for thesis-project tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from thesisync.domain.model import (
    Address,
    Collaboration,
    Coordinates,
    EducationProgram,
    EnrichedProject,
    Location,
    PersonRef,
    ResolvedOrganization,
    ResolvedPerson,
    SourceProject,
)
from thesisync.domain.ports.lookup import EntityLookupError
from thesisync.domain.text import LocalizedText

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence


def make_source_project(
    project_id: str = "project-1",
    *,
    title: str = "Wind turbine blade monitoring",
    collaborator_ids: Sequence[str] = ("org-1",),
    has_collaboration: bool = True,
    supervisors: Sequence[PersonRef] = (),
    year: int | None = 2023,
) -> SourceProject:
    return SourceProject(
        id=project_id,
        title=LocalizedText.of(en_GB=title),
        abstract=LocalizedText(),
        type_label=LocalizedText.of(en_GB="Master thesis"),
        publication_year=year,
        authors=("Ada Student",),
        supervisors=tuple(supervisors),
        has_collaboration=has_collaboration,
        collaborator_ids=tuple(collaborator_ids),
    )


def make_organization(
    organization_id: str = "org-1",
    *,
    name: str = "Vestas Wind Systems",
    type: str = "Company",  # noqa: A002
    country: str | None = "Denmark",
    city: str | None = "Aarhus",
    point: str | None = "56.1629,10.2039",
) -> ResolvedOrganization:
    return ResolvedOrganization(
        id=organization_id,
        name=name,
        type=type,
        address=Address(country=country, city=city, point=point),
    )


def make_enriched_project(
    project_id: str = "project-1",
    *,
    year: int = 2023,
    type: str = "Master thesis",  # noqa: A002
    program: EducationProgram | None = None,
    partners: Sequence[tuple[str, str, str | None]] = (
        ("Vestas Wind Systems", "Company", "Denmark"),
    ),
    campus: str | None = "Aalborg",
) -> EnrichedProject:
    return EnrichedProject(
        id=project_id,
        title=f"Project {project_id}",
        type=type,
        year=year,
        education_program=program or EducationProgram(name="Computer Science", code="cs"),
        project_url=f"https://vbn.aau.dk/en/publications/{project_id}",
        collaborations=tuple(
            Collaboration(
                name=name,
                type=partner_type,
                location=Location(country=country, coordinates=Coordinates(56.0, 10.0))
                if country
                else None,
            )
            for name, partner_type, country in partners
        ),
        campus=campus,
    )


@dataclass(slots=True)
class FakeLookups:
    """In-memory organization and person lookups that count calls per identifier."""

    organizations: Mapping[str, ResolvedOrganization] = field(default_factory=dict)
    persons: Mapping[str, ResolvedPerson] = field(default_factory=dict)
    failing: set[str] = field(default_factory=set)
    calls: list[str] = field(default_factory=list)

    async def fetch_organization(self, organization_id: str) -> ResolvedOrganization | None:
        self.calls.append(organization_id)
        if organization_id in self.failing:
            raise EntityLookupError("boom", identifier=organization_id)
        return self.organizations.get(organization_id)

    async def fetch_person(self, person_id: str) -> ResolvedPerson | None:
        self.calls.append(person_id)
        if person_id in self.failing:
            raise EntityLookupError("boom", identifier=person_id)
        return self.persons.get(person_id)


@dataclass(slots=True)
class FakeGeocoder:
    result: Coordinates | None = None
    queries: list[tuple[str, str | None, str | None]] = field(default_factory=list)

    async def geocode_location(
        self,
        *,
        name: str,
        city: str | None,
        country: str | None,
    ) -> Coordinates | None:
        self.queries.append((name, city, country))
        return self.result


@dataclass(slots=True)
class RecordingSleep:
    delays: list[float] = field(default_factory=list)

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
