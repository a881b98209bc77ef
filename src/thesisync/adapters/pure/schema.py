"""Pydantic models describing the Pure API payloads."""

from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _none_to_empty(value: object) -> object:
    # Pure sends `null` for empty collections as often as it omits them
    return [] if value is None else value


def _parse_pure_date(value: object) -> object:
    # Pure emits both plain dates and full timestamps with offsets
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        return date.fromisoformat(stripped[:10])
    return value


class PureBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ClassificationPayload(PureBaseModel):
    """``{uri, term}`` classification; ``term`` is localized text."""

    uri: str | None = None
    term: Any = None


class PersonNamePayload(PureBaseModel):
    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    text: Any = None


class PublicationDatePayload(PureBaseModel):
    year: int | None = None


class OrganizationRefPayload(PureBaseModel):
    uuid: str | None = None
    name: Any = None

    _normalize_uuid = field_validator("uuid", mode="before")(_blank_to_none)


class AuthorPayload(PureBaseModel):
    name: PersonNamePayload | None = None


class SupervisorPersonPayload(PureBaseModel):
    uuid: str | None = None
    name: PersonNamePayload | None = None

    _normalize_uuid = field_validator("uuid", mode="before")(_blank_to_none)


class SupervisorPayload(PureBaseModel):
    person: SupervisorPersonPayload | None = None
    name: PersonNamePayload | None = None


class ExternalCollaboratorPayload(PureBaseModel):
    external_organisation: OrganizationRefPayload | None = Field(
        default=None,
        alias="externalOrganisation",
    )


class EducationPayload(PureBaseModel):
    uuid: str | None = None
    code: str | None = None
    name: Any = None

    _normalize_ids = field_validator("uuid", "code", mode="before")(_blank_to_none)


class EducationAssociationPayload(PureBaseModel):
    education: EducationPayload | None = None
    semester: EducationPayload | None = None


class DocumentPayload(PureBaseModel):
    url: str | None = None

    _normalize_url = field_validator("url", mode="before")(_blank_to_none)


class LinkPayload(PureBaseModel):
    href: str | None = None

    _normalize_href = field_validator("href", mode="before")(_blank_to_none)


class ElectronicVersionPayload(PureBaseModel):
    link: LinkPayload | None = None


class FreeKeywordsPayload(PureBaseModel):
    locale: str | None = None
    free_keywords: list[str] = Field(default_factory=list[str], alias="freeKeywords")

    _empty_keywords = field_validator("free_keywords", mode="before")(_none_to_empty)


class KeywordContainerPayload(PureBaseModel):
    free_keywords: list[FreeKeywordsPayload] = Field(
        default_factory=list[FreeKeywordsPayload],
        alias="freeKeywords",
    )

    _empty_keywords = field_validator("free_keywords", mode="before")(_none_to_empty)


class KeywordGroupPayload(PureBaseModel):
    keyword_containers: list[KeywordContainerPayload] = Field(
        default_factory=list[KeywordContainerPayload],
        alias="keywordContainers",
    )

    _empty_containers = field_validator("keyword_containers", mode="before")(_none_to_empty)


class StudentProjectPayload(PureBaseModel):
    uuid: str
    title: Any = None
    abstract: Any = None
    type: ClassificationPayload | None = None
    publication_date: PublicationDatePayload | None = Field(default=None, alias="publicationDate")
    managing_organization: OrganizationRefPayload | None = Field(
        default=None,
        alias="managingOrganization",
    )
    authors: list[AuthorPayload] = Field(default_factory=list[AuthorPayload])
    supervisors: list[SupervisorPayload] = Field(default_factory=list[SupervisorPayload])
    external_collaboration: bool = Field(default=False, alias="externalCollaboration")
    external_collaborators: list[ExternalCollaboratorPayload] = Field(
        default_factory=list[ExternalCollaboratorPayload],
        alias="externalCollaborators",
    )
    education_associations: list[EducationAssociationPayload] = Field(
        default_factory=list[EducationAssociationPayload],
        alias="educationAssociations",
    )
    documents: list[DocumentPayload] = Field(default_factory=list[DocumentPayload])
    electronic_versions: list[ElectronicVersionPayload] = Field(
        default_factory=list[ElectronicVersionPayload],
        alias="electronicVersions",
    )
    keyword_groups: list[KeywordGroupPayload] = Field(
        default_factory=list[KeywordGroupPayload],
        alias="keywordGroups",
    )
    campus: Any = None

    _empty_lists = field_validator(
        "authors",
        "supervisors",
        "external_collaborators",
        "education_associations",
        "documents",
        "electronic_versions",
        "keyword_groups",
        mode="before",
    )(_none_to_empty)

    @field_validator("uuid", mode="before")
    @classmethod
    def _require_uuid(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            raise ValueError("uuid must not be blank")
        return value

    @field_validator("external_collaboration", mode="before")
    @classmethod
    def _none_is_false(cls, value: object) -> object:
        return False if value is None else value


class PageInformationPayload(PureBaseModel):
    offset: int = 0
    size: int = 0


class StudentProjectPage(PureBaseModel):
    """One listing page. Items stay raw so a malformed record can be skipped alone."""

    count: int
    page_information: PageInformationPayload | None = Field(default=None, alias="pageInformation")
    items: list[dict[str, Any]] = Field(default_factory=list[dict[str, Any]])

    _empty_items = field_validator("items", mode="before")(_none_to_empty)


class GeoLocationPayload(PureBaseModel):
    point: str | None = None
    calculated_point: str | None = Field(default=None, alias="calculatedPoint")

    _normalize_points = field_validator("point", "calculated_point", mode="before")(_blank_to_none)


class AddressPayload(PureBaseModel):
    city: Any = None
    country: ClassificationPayload | None = None
    geo_location: GeoLocationPayload | None = Field(default=None, alias="geoLocation")


class ExternalOrganizationPayload(PureBaseModel):
    uuid: str
    name: Any = None
    type: ClassificationPayload | None = None
    address: AddressPayload | None = None
    addresses: list[AddressPayload] = Field(default_factory=list[AddressPayload])

    _empty_addresses = field_validator("addresses", mode="before")(_none_to_empty)

    @property
    def primary_address(self) -> AddressPayload | None:
        if self.address is not None:
            return self.address
        return self.addresses[0] if self.addresses else None


class PeriodPayload(PureBaseModel):
    start_date: date | None = Field(default=None, alias="startDate")
    end_date: date | None = Field(default=None, alias="endDate")

    _parse_dates = field_validator("start_date", "end_date", mode="before")(_parse_pure_date)


class StaffAssociationPayload(PureBaseModel):
    period: PeriodPayload | None = None


class PersonPayload(PureBaseModel):
    uuid: str
    name: PersonNamePayload | None = None
    external_id: str | None = Field(default=None, alias="externalId")
    pretty_url_identifiers: list[str] = Field(
        default_factory=list[str],
        alias="prettyURLIdentifiers",
    )
    orcid: str | None = None
    staff_organization_associations: list[StaffAssociationPayload] = Field(
        default_factory=list[StaffAssociationPayload],
        alias="staffOrganizationAssociations",
    )
    staff_organisation_associations: list[StaffAssociationPayload] = Field(
        default_factory=list[StaffAssociationPayload],
        alias="staffOrganisationAssociations",
    )

    _normalize_ids = field_validator("external_id", "orcid", mode="before")(_blank_to_none)
    _empty_lists = field_validator(
        "pretty_url_identifiers",
        "staff_organization_associations",
        "staff_organisation_associations",
        mode="before",
    )(_none_to_empty)

    @property
    def associations(self) -> list[StaffAssociationPayload]:
        return [*self.staff_organization_associations, *self.staff_organisation_associations]
