"""HTTP client for the Pure research-information API."""

from __future__ import annotations

from datetime import UTC, date, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import ValidationError

from thesisync.domain.ports.lookup import EntityLookupError
from thesisync.domain.text import DEFAULT_LOCALES

from .schema import StudentProjectPage
from .translator import parse_organization, parse_person

if TYPE_CHECKING:
    from collections.abc import Sequence

    from thesisync.adapters.http_resilience import ResilientClient
    from thesisync.domain.model import ResolvedOrganization, ResolvedPerson

log = getLogger(__name__)

STUDENT_PROJECTS_PATH = "student-projects"
ORGANIZATIONS_PATH = "external-organizations"
PERSONS_PATH = "persons"


class PureAPIError(RuntimeError):
    """Raised when the project listing cannot be retrieved; always fatal for a run."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class PureClient:
    """Pure endpoints used by the sync, sharing one resilient connection per run.

    Listing failures raise ``PureAPIError``. Lookups return ``None`` for a 404 and raise
    ``EntityLookupError`` for anything else so the entity cache can record the outcome.
    """

    def __init__(
        self,
        client: ResilientClient,
        *,
        today: date | None = None,
        locales: Sequence[str] = DEFAULT_LOCALES,
    ) -> None:
        self._client = client
        self._today = today or datetime.now(UTC).date()
        self._locales = tuple(locales)

    async def fetch_page(self, *, offset: int, size: int) -> StudentProjectPage:
        params = {"size": str(size), "offset": str(offset)}
        try:
            response = await self._client.get(STUDENT_PROJECTS_PATH, params=params)
        except httpx.HTTPError as exc:
            raise PureAPIError(f"Listing request failed at offset {offset}: {exc}") from exc

        if response.is_error:
            raise PureAPIError(
                f"Pure API error: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )

        try:
            return StudentProjectPage.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise PureAPIError(f"Unexpected listing payload at offset {offset}") from exc

    async def fetch_organization(self, organization_id: str) -> ResolvedOrganization | None:
        payload = await self._lookup(ORGANIZATIONS_PATH, organization_id)
        if payload is None:
            return None
        try:
            return parse_organization(payload, self._locales)
        except ValidationError as exc:
            raise EntityLookupError(
                f"Malformed organization payload: {exc.error_count()} errors",
                identifier=organization_id,
            ) from exc

    async def fetch_person(self, person_id: str) -> ResolvedPerson | None:
        payload = await self._lookup(PERSONS_PATH, person_id)
        if payload is None:
            return None
        try:
            return parse_person(payload, today=self._today, locales=self._locales)
        except ValidationError as exc:
            raise EntityLookupError(
                f"Malformed person payload: {exc.error_count()} errors",
                identifier=person_id,
            ) from exc

    async def _lookup(self, collection: str, identifier: str) -> dict[str, Any] | None:
        try:
            response = await self._client.get(f"{collection}/{identifier}")
        except httpx.HTTPError as exc:
            raise EntityLookupError(f"Request failed: {exc}", identifier=identifier) from exc

        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        if response.is_error:
            raise EntityLookupError(
                f"HTTP {response.status_code} from {collection}",
                identifier=identifier,
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise EntityLookupError("Response was not JSON", identifier=identifier) from exc
        if not isinstance(payload, dict):
            raise EntityLookupError("Unexpected payload shape", identifier=identifier)
        log.debug(f"Resolved {collection}/{identifier}")
        return payload

