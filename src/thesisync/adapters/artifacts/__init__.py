"""Public interface for the JSON artifact adapter."""

from __future__ import annotations

from .schema import (
    ARTIFACT_VERSION,
    MetadataDocument,
    OrganizationsDocument,
    ProjectsDocument,
    build_documents,
    format_timestamp,
)
from .writer import JsonArtifactWriter, render_document

__all__ = [
    "ARTIFACT_VERSION",
    "JsonArtifactWriter",
    "MetadataDocument",
    "OrganizationsDocument",
    "ProjectsDocument",
    "build_documents",
    "format_timestamp",
    "render_document",
]
