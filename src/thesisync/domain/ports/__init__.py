"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import ProjectPredicate, ProjectSource
from .lookup import EntityLookupError, Geocoder, OrganizationLookup, PersonLookup
from .persistence import ArtifactBundle, ArtifactWriteError, ArtifactWriter

__all__ = [
    "ArtifactBundle",
    "ArtifactWriteError",
    "ArtifactWriter",
    "EntityLookupError",
    "Geocoder",
    "OrganizationLookup",
    "PersonLookup",
    "ProjectPredicate",
    "ProjectSource",
]
