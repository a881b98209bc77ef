"""Public interface for the Pure API adapter."""

from __future__ import annotations

from .client import PureAPIError, PureClient
from .fetcher import PaginatedProjectFetcher
from .schema import (
    ExternalOrganizationPayload,
    PersonPayload,
    StudentProjectPage,
    StudentProjectPayload,
)
from .translator import parse_organization, parse_person, parse_student_project

__all__ = [
    "ExternalOrganizationPayload",
    "PaginatedProjectFetcher",
    "PersonPayload",
    "PureAPIError",
    "PureClient",
    "StudentProjectPage",
    "StudentProjectPayload",
    "parse_organization",
    "parse_person",
    "parse_student_project",
]
