"""Ports for fetching source records from the upstream system."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from thesisync.domain.model import SourceProject

type ProjectPredicate = Callable[[SourceProject], bool]


@runtime_checkable
class ProjectSource(Protocol):
    """Retrieves every source project, optionally filtered after each page."""

    async def fetch_all(
        self,
        predicate: ProjectPredicate | None = None,
    ) -> Sequence[SourceProject]: ...


__all__ = ["ProjectPredicate", "ProjectSource"]
