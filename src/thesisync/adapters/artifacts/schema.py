"""Pydantic models for the published JSON documents and their construction from domain data."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from collections.abc import Sequence

    from thesisync.domain.model import (
        Collaboration,
        EnrichedProject,
        FacetCount,
        Metadata,
        OrganizationEntry,
    )
    from thesisync.domain.ports.persistence import ArtifactBundle

ARTIFACT_VERSION = "1.0.0"


def format_timestamp(value: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a ``Z`` suffix."""

    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ArtifactModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class AuthorOut(ArtifactModel):
    name: str


class SupervisorOut(ArtifactModel):
    name: str
    vbn_url: str | None = None
    is_active: bool | None = None
    orcid: str | None = None


class EducationProgramOut(ArtifactModel):
    name: str
    code: str


class CoordinatesOut(ArtifactModel):
    lat: float
    lng: float


class LocationOut(ArtifactModel):
    country: str | None = None
    city: str | None = None
    coordinates: CoordinatesOut | None = None


class CollaborationOut(ArtifactModel):
    name: str
    type: str
    location: LocationOut | None = None


class ProjectOut(ArtifactModel):
    id: str
    title: str
    abstract: str | None = None
    type: str
    year: int
    campus: str | None = None
    education_program: EducationProgramOut
    authors: list[AuthorOut]
    supervisors: list[SupervisorOut]
    project_url: str
    has_collaboration: bool
    collaborations: list[CollaborationOut]
    keywords: list[str] | None = None


class ProjectsDocument(ArtifactModel):
    version: str = ARTIFACT_VERSION
    last_updated: str
    total_count: int
    projects: list[ProjectOut]


class YearRangeOut(ArtifactModel):
    min: int | None
    max: int | None
    available: list[int]


class ProgramOption(ArtifactModel):
    name: str
    code: str
    count: int


class TypeOption(ArtifactModel):
    type: str
    count: int


class NamedOption(ArtifactModel):
    name: str
    count: int


class PartnerOption(ArtifactModel):
    name: str
    type: str
    count: int


class FiltersOut(ArtifactModel):
    years: YearRangeOut
    education_programs: list[ProgramOption]
    project_types: list[TypeOption]
    collaboration_types: list[TypeOption]
    countries: list[NamedOption]
    campuses: list[NamedOption]
    partners: list[PartnerOption]


class StatisticsOut(ArtifactModel):
    total_projects: int
    total_collaborations: int
    unique_partners: int
    unique_countries: int


class MetadataDocument(ArtifactModel):
    version: str = ARTIFACT_VERSION
    last_updated: str
    filters: FiltersOut
    statistics: StatisticsOut


class OrganizationOut(ArtifactModel):
    id: str
    name: str
    type: str
    country: str | None = None
    project_count: int


class OrganizationsDocument(ArtifactModel):
    version: str = ARTIFACT_VERSION
    last_updated: str
    total_count: int
    organizations: list[OrganizationOut]


def _collaboration_out(collaboration: Collaboration) -> CollaborationOut:
    location = collaboration.location
    return CollaborationOut(
        name=collaboration.name,
        type=collaboration.type,
        location=LocationOut(
            country=location.country,
            city=location.city,
            coordinates=(
                CoordinatesOut(lat=location.coordinates.lat, lng=location.coordinates.lng)
                if location.coordinates
                else None
            ),
        )
        if location
        else None,
    )


def project_out(project: EnrichedProject) -> ProjectOut:
    return ProjectOut(
        id=project.id,
        title=project.title,
        abstract=project.abstract,
        type=project.type,
        year=project.year,
        campus=project.campus,
        education_program=EducationProgramOut(
            name=project.education_program.name,
            code=project.education_program.code,
        ),
        authors=[AuthorOut(name=name) for name in project.authors],
        supervisors=[
            SupervisorOut(
                name=supervisor.name,
                vbn_url=supervisor.profile_url,
                is_active=supervisor.is_active,
                orcid=supervisor.orcid,
            )
            for supervisor in project.supervisors
        ],
        project_url=project.project_url,
        has_collaboration=project.has_collaboration,
        collaborations=[_collaboration_out(item) for item in project.collaborations],
        keywords=list(project.keywords) if project.keywords is not None else None,
    )


def _type_options(facets: tuple[FacetCount, ...]) -> list[TypeOption]:
    return [TypeOption(type=facet.name, count=facet.count) for facet in facets]


def _named_options(facets: tuple[FacetCount, ...]) -> list[NamedOption]:
    return [NamedOption(name=facet.name, count=facet.count) for facet in facets]


def metadata_document(metadata: Metadata, *, last_updated: str) -> MetadataDocument:
    return MetadataDocument(
        last_updated=last_updated,
        filters=FiltersOut(
            years=YearRangeOut(
                min=metadata.years.min,
                max=metadata.years.max,
                available=list(metadata.years.available),
            ),
            education_programs=[
                ProgramOption(name=program.name, code=program.code, count=program.count)
                for program in metadata.education_programs
            ],
            project_types=_type_options(metadata.project_types),
            collaboration_types=_type_options(metadata.collaboration_types),
            countries=_named_options(metadata.countries),
            campuses=_named_options(metadata.campuses),
            partners=[
                PartnerOption(
                    name=partner.name,
                    type=partner.type or "unknown",
                    count=partner.count,
                )
                for partner in metadata.partners
            ],
        ),
        statistics=StatisticsOut(
            total_projects=metadata.statistics.total_projects,
            total_collaborations=metadata.statistics.total_collaborations,
            unique_partners=metadata.statistics.unique_partners,
            unique_countries=metadata.statistics.unique_countries,
        ),
    )


def organizations_document(
    organizations: Sequence[OrganizationEntry],
    *,
    last_updated: str,
) -> OrganizationsDocument:
    return OrganizationsDocument(
        last_updated=last_updated,
        total_count=len(organizations),
        organizations=[
            OrganizationOut(
                id=entry.id,
                name=entry.name,
                type=entry.type,
                country=entry.country,
                project_count=entry.project_count,
            )
            for entry in organizations
        ],
    )


def build_documents(
    bundle: ArtifactBundle,
) -> tuple[ProjectsDocument, MetadataDocument, OrganizationsDocument]:
    """Build the three documents, all stamped with the bundle's run timestamp."""

    last_updated = format_timestamp(bundle.generated_at)
    projects = ProjectsDocument(
        last_updated=last_updated,
        total_count=len(bundle.projects),
        projects=[project_out(project) for project in bundle.projects],
    )
    return (
        projects,
        metadata_document(bundle.metadata, last_updated=last_updated),
        organizations_document(bundle.organizations, last_updated=last_updated),
    )
