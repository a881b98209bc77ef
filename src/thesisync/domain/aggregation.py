"""Fold enriched projects into filter facets, statistics and the partner directory."""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from thesisync.domain.model import (
    AggregationResult,
    FacetCount,
    Metadata,
    OrganizationEntry,
    ProgramCount,
    Statistics,
    YearRange,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from thesisync.domain.model import EnrichedProject

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]+")
_FALLBACK_SLUG = "unknown"


def slugify(name: str) -> str:
    """Lower-case, collapse non-alphanumeric runs to ``-`` and trim separators."""

    return _NON_ALPHANUMERIC.sub("-", name.lower()).strip("-") or _FALLBACK_SLUG


@dataclass(slots=True)
class SlugRegistry:
    """Hands out slugs unique within one run by appending ``-1``, ``-2``, ... on collision."""

    used: set[str] = field(default_factory=set[str])

    def claim(self, name: str) -> str:
        base = slugify(name)
        candidate = base
        counter = 0
        while candidate in self.used:
            counter += 1
            candidate = f"{base}-{counter}"
        self.used.add(candidate)
        return candidate


@dataclass(slots=True)
class _Partner:
    name: str
    type: str
    country: str | None
    edges: int = 0
    projects: int = 0


@dataclass(slots=True)
class _Accumulator:
    years: set[int] = field(default_factory=set[int])
    programs: dict[str, ProgramCount] = field(default_factory=dict[str, ProgramCount])
    project_types: Counter[str] = field(default_factory=Counter[str])
    collaboration_types: Counter[str] = field(default_factory=Counter[str])
    countries: Counter[str] = field(default_factory=Counter[str])
    campuses: Counter[str] = field(default_factory=Counter[str])
    partners: dict[str, _Partner] = field(default_factory=dict[str, _Partner])
    total_projects: int = 0
    total_collaborations: int = 0

    def add(self, project: EnrichedProject) -> None:
        self.total_projects += 1
        self.years.add(project.year)
        self.project_types[project.type] += 1
        if project.campus:
            self.campuses[project.campus] += 1

        program = project.education_program
        known = self.programs.get(program.code)
        # first-seen name wins for a program code
        self.programs[program.code] = ProgramCount(
            name=known.name if known else program.name,
            code=program.code,
            count=(known.count if known else 0) + 1,
        )

        seen_in_project: set[str] = set()
        for collaboration in project.collaborations:
            self.total_collaborations += 1
            self.collaboration_types[collaboration.type] += 1
            country = collaboration.location.country if collaboration.location else None
            if country:
                self.countries[country] += 1

            partner = self.partners.get(collaboration.name)
            if partner is None:
                partner = _Partner(
                    name=collaboration.name,
                    type=collaboration.type,
                    country=country,
                )
                self.partners[collaboration.name] = partner
            partner.edges += 1
            if collaboration.name not in seen_in_project:
                partner.projects += 1
                seen_in_project.add(collaboration.name)


def _ranked(counter: Counter[str]) -> tuple[FacetCount, ...]:
    # sorted() is stable, so ties keep encounter order
    ordered = sorted(counter.items(), key=lambda item: -item[1])
    return tuple(FacetCount(name=name, count=count) for name, count in ordered)


def aggregate(
    projects: Iterable[EnrichedProject],
    *,
    partner_limit: int | None = None,
) -> AggregationResult:
    """Derive metadata facets and the organization directory in a single pass."""

    acc = _Accumulator()
    for project in projects:
        acc.add(project)

    years = tuple(sorted(acc.years))
    partners_ranked = sorted(acc.partners.values(), key=lambda partner: -partner.edges)
    if partner_limit is not None:
        partners_ranked = partners_ranked[:partner_limit]

    metadata = Metadata(
        years=YearRange(
            min=years[0] if years else None,
            max=years[-1] if years else None,
            available=years,
        ),
        education_programs=tuple(
            sorted(acc.programs.values(), key=lambda program: -program.count)
        ),
        project_types=_ranked(acc.project_types),
        collaboration_types=_ranked(acc.collaboration_types),
        countries=_ranked(acc.countries),
        campuses=_ranked(acc.campuses),
        partners=tuple(
            FacetCount(name=partner.name, count=partner.edges, type=partner.type)
            for partner in partners_ranked
        ),
        statistics=Statistics(
            total_projects=acc.total_projects,
            total_collaborations=acc.total_collaborations,
            unique_partners=len(acc.partners),
            unique_countries=len(acc.countries),
        ),
    )
    return AggregationResult(
        metadata=metadata,
        organizations=_build_directory(acc.partners.values()),
    )


def _build_directory(partners: Iterable[_Partner]) -> tuple[OrganizationEntry, ...]:
    registry = SlugRegistry()
    entries = [
        OrganizationEntry(
            id=registry.claim(partner.name),
            name=partner.name,
            type=partner.type,
            country=partner.country,
            project_count=partner.projects,
        )
        for partner in partners
    ]
    entries.sort(key=lambda entry: -entry.project_count)
    return tuple(entries)
