"""Ports for secondary-entity lookups (organizations, persons, geocoding)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from thesisync.domain.model import Coordinates, ResolvedOrganization, ResolvedPerson


class EntityLookupError(RuntimeError):
    """Raised by lookup adapters when a secondary entity could not be retrieved."""

    def __init__(self, message: str, *, identifier: str) -> None:
        super().__init__(message)
        self.identifier = identifier


@runtime_checkable
class OrganizationLookup(Protocol):
    async def fetch_organization(self, organization_id: str) -> ResolvedOrganization | None:
        """Return the organization, ``None`` when it does not exist upstream."""
        ...


@runtime_checkable
class PersonLookup(Protocol):
    async def fetch_person(self, person_id: str) -> ResolvedPerson | None:
        """Return the person, ``None`` when it does not exist upstream."""
        ...


@runtime_checkable
class Geocoder(Protocol):
    async def geocode_location(
        self,
        *,
        name: str,
        city: str | None,
        country: str | None,
    ) -> Coordinates | None: ...


__all__ = ["EntityLookupError", "Geocoder", "OrganizationLookup", "PersonLookup"]
