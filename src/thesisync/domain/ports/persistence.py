"""Ports for publishing the output artifacts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from datetime import datetime
    from pathlib import Path

    from thesisync.domain.model import EnrichedProject, Metadata, OrganizationEntry


class ArtifactWriteError(RuntimeError):
    """Raised when the artifact set could not be published."""


@dataclass(frozen=True, slots=True)
class ArtifactBundle:
    """Everything one run publishes, stamped with the run timestamp."""

    generated_at: datetime
    projects: Sequence[EnrichedProject]
    metadata: Metadata
    organizations: Sequence[OrganizationEntry]


class ArtifactWriter(Protocol):
    def write(self, bundle: ArtifactBundle) -> Mapping[str, Path]:
        """Publish all artifacts or none; return the published path per artifact name."""
        ...


__all__ = ["ArtifactBundle", "ArtifactWriteError", "ArtifactWriter"]
