"""Translate Pure API payloads into domain records."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from thesisync.domain.model import (
    Address,
    AffiliationPeriod,
    EducationRef,
    PersonRef,
    ResolvedOrganization,
    ResolvedPerson,
    SourceProject,
)
from thesisync.domain.text import DEFAULT_LOCALES, LocalizedKeywords, LocalizedText

from .schema import (
    ClassificationPayload,
    ExternalOrganizationPayload,
    KeywordGroupPayload,
    OrganizationRefPayload,
    PersonNamePayload,
    PersonPayload,
    StudentProjectPayload,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import date

type StudentProjectInput = StudentProjectPayload | Mapping[str, Any]
type OrganizationInput = ExternalOrganizationPayload | Mapping[str, Any]
type PersonInput = PersonPayload | Mapping[str, Any]


def person_display_name(
    name: PersonNamePayload | None,
    locales: Sequence[str] = DEFAULT_LOCALES,
) -> str:
    """``firstName lastName`` when structured, else the localized formatted name."""

    if name is None:
        return ""
    structured = " ".join(part.strip() for part in (name.first_name, name.last_name) if part)
    if structured.strip():
        return structured.strip()
    return LocalizedText.coerce(name.text).resolve(locales).strip()


def classification_label(
    classification: ClassificationPayload | None,
    locales: Sequence[str] = DEFAULT_LOCALES,
) -> str:
    """Localized term, else the last segment of the classification URI, else empty."""

    if classification is None:
        return ""
    term = LocalizedText.coerce(classification.term).resolve(locales).strip()
    if term:
        return term
    if classification.uri:
        return classification.uri.rstrip("/").rsplit("/", 1)[-1]
    return ""


def parse_student_project(payload: StudentProjectInput) -> SourceProject:
    project = (
        payload
        if isinstance(payload, StudentProjectPayload)
        else StudentProjectPayload.model_validate(payload)
    )

    collaborator_ids = tuple(
        dict.fromkeys(
            collaborator.external_organisation.uuid
            for collaborator in project.external_collaborators
            if collaborator.external_organisation is not None
            and collaborator.external_organisation.uuid
        )
    )

    return SourceProject(
        id=project.uuid.strip(),
        title=LocalizedText.coerce(project.title),
        abstract=LocalizedText.coerce(project.abstract),
        type_label=_classification_text(project.type),
        publication_year=project.publication_date.year if project.publication_date else None,
        authors=tuple(
            name
            for name in (person_display_name(author.name) for author in project.authors)
            if name
        ),
        supervisors=tuple(
            PersonRef(
                person_id=supervisor.person.uuid if supervisor.person else None,
                embedded_name=person_display_name(
                    supervisor.person.name if supervisor.person else supervisor.name
                )
                or None,
            )
            for supervisor in project.supervisors
        ),
        has_collaboration=project.external_collaboration,
        collaborator_ids=collaborator_ids,
        education=_education_ref(project),
        managing_unit=_managing_unit_ref(project.managing_organization),
        keyword_groups=_keyword_groups(project.keyword_groups),
        campus=LocalizedText.coerce(project.campus) if project.campus is not None else None,
        document_url=_document_url(project),
    )


def parse_organization(
    payload: OrganizationInput,
    locales: Sequence[str] = DEFAULT_LOCALES,
) -> ResolvedOrganization:
    organization = (
        payload
        if isinstance(payload, ExternalOrganizationPayload)
        else ExternalOrganizationPayload.model_validate(payload)
    )

    address = organization.primary_address
    if address is None:
        resolved_address = Address()
    else:
        geo = address.geo_location
        resolved_address = Address(
            country=classification_label(address.country, locales) or None,
            city=LocalizedText.coerce(address.city).resolve(locales).strip() or None,
            point=(geo.point or geo.calculated_point) if geo else None,
        )

    return ResolvedOrganization(
        id=organization.uuid,
        name=LocalizedText.coerce(organization.name).resolve(locales).strip(),
        type=classification_label(organization.type, locales),
        address=resolved_address,
    )


def parse_person(
    payload: PersonInput,
    *,
    today: date,
    locales: Sequence[str] = DEFAULT_LOCALES,
) -> ResolvedPerson:
    person = (
        payload if isinstance(payload, PersonPayload) else PersonPayload.model_validate(payload)
    )

    periods = tuple(
        AffiliationPeriod(start=association.period.start_date, end=association.period.end_date)
        for association in person.associations
        if association.period is not None
    )
    pretty_ids = [identifier for identifier in person.pretty_url_identifiers if identifier.strip()]

    return ResolvedPerson.from_affiliations(
        id=person.uuid,
        name=person_display_name(person.name, locales),
        affiliations=periods,
        today=today,
        profile_id=pretty_ids[0] if pretty_ids else person.external_id,
        orcid=person.orcid,
    )


def _classification_text(classification: ClassificationPayload | None) -> LocalizedText:
    if classification is None:
        return LocalizedText()
    return LocalizedText.coerce(classification.term)


def _education_ref(project: StudentProjectPayload) -> EducationRef | None:
    for association in project.education_associations:
        education = association.education
        if education is None:
            continue
        return EducationRef(
            identifier=education.uuid,
            name=LocalizedText.coerce(education.name),
            code=education.code,
        )
    return None


def _managing_unit_ref(unit: OrganizationRefPayload | None) -> EducationRef | None:
    if unit is None:
        return None
    return EducationRef(identifier=unit.uuid, name=LocalizedText.coerce(unit.name))


def _keyword_groups(groups: list[KeywordGroupPayload]) -> tuple[LocalizedKeywords, ...]:
    containers: list[LocalizedKeywords] = []
    for group in groups:
        for container in group.keyword_containers:
            entries = tuple(
                (keywords.locale or "", tuple(keywords.free_keywords))
                for keywords in container.free_keywords
                if keywords.free_keywords
            )
            if entries:
                containers.append(LocalizedKeywords(entries))
    return tuple(containers)


def _document_url(project: StudentProjectPayload) -> str | None:
    for document in project.documents:
        if document.url:
            return document.url
    for version in project.electronic_versions:
        if version.link is not None and version.link.href:
            return version.link.href
    return None
