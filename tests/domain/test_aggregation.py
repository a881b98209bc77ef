from __future__ import annotations

from tests.helpers.projects import make_enriched_project
from thesisync.domain.aggregation import SlugRegistry, aggregate, slugify
from thesisync.domain.model import EducationProgram, EnrichedProject


def _sample_projects() -> list[EnrichedProject]:
    return [
        make_enriched_project(
            "p1",
            year=2022,
            partners=(("Vestas", "Company", "Denmark"), ("Grundfos", "Company", "Denmark")),
        ),
        make_enriched_project(
            "p2",
            year=2024,
            type="Bachelor project",
            program=EducationProgram(name="Datalogi", code="cs"),
            partners=(("Equinor", "Company", "Norway"),),
            campus="Copenhagen",
        ),
        make_enriched_project(
            "p3",
            year=2022,
            program=EducationProgram(name="Energy Engineering", code="ee"),
            partners=(("Equinor", "Company", "Norway"), ("Equinor", "Company", "Norway")),
            campus=None,
        ),
        make_enriched_project(
            "p4",
            year=2023,
            partners=(("Aalborg Kommune", "Government", None),),
        ),
    ]


def test_slug_generation_appends_suffix_on_collision() -> None:
    registry = SlugRegistry()

    assert registry.claim("Acme Inc") == "acme-inc"
    assert registry.claim("Acme Inc") == "acme-inc-1"
    assert registry.claim("Acme, Inc.") == "acme-inc-2"


def test_slugify_trims_separators_and_falls_back_to_unknown() -> None:
    assert slugify("  --Aalborg University (AAU)--  ") == "aalborg-university-aau"
    assert slugify("!!!") == "unknown"


def test_directory_disambiguates_names_that_slug_identically() -> None:
    partners = (("Acme Inc", "Company", None), ("Acme, Inc.", "Company", None))
    result = aggregate([make_enriched_project(partners=partners)])

    assert [entry.id for entry in result.organizations] == ["acme-inc", "acme-inc-1"]


def test_years_and_statistics() -> None:
    metadata = aggregate(_sample_projects()).metadata

    assert (metadata.years.min, metadata.years.max) == (2022, 2024)
    assert metadata.years.available == (2022, 2023, 2024)
    stats = metadata.statistics
    assert stats.total_projects == 4
    assert stats.total_collaborations == 6
    assert stats.unique_partners == 4
    assert stats.unique_countries == 2


def test_ranked_lists_sort_descending_with_stable_ties() -> None:
    metadata = aggregate(_sample_projects()).metadata

    assert [(facet.name, facet.count) for facet in metadata.partners] == [
        ("Equinor", 3),
        ("Vestas", 1),
        ("Grundfos", 1),
        ("Aalborg Kommune", 1),
    ]
    assert [(facet.name, facet.count) for facet in metadata.countries] == [
        ("Norway", 3),
        ("Denmark", 2),
    ]
    assert [(facet.name, facet.count) for facet in metadata.project_types] == [
        ("Master thesis", 3),
        ("Bachelor project", 1),
    ]
    assert [(facet.name, facet.count) for facet in metadata.campuses] == [
        ("Aalborg", 2),
        ("Copenhagen", 1),
    ]
    assert metadata.partners[0].type == "Company"


def test_education_program_keeps_first_seen_name_per_code() -> None:
    metadata = aggregate(_sample_projects()).metadata

    assert [(p.name, p.code, p.count) for p in metadata.education_programs] == [
        ("Computer Science", "cs", 3),
        ("Energy Engineering", "ee", 1),
    ]


def test_partner_identity_is_exact_name() -> None:
    metadata = aggregate(
        [make_enriched_project(partners=(("ACME", "Company", None), ("Acme", "Company", None)))]
    ).metadata

    assert {facet.name for facet in metadata.partners} == {"ACME", "Acme"}


def test_directory_counts_distinct_projects_per_partner() -> None:
    organizations = aggregate(_sample_projects()).organizations

    by_name = {entry.name: entry for entry in organizations}
    assert by_name["Equinor"].project_count == 2
    assert by_name["Equinor"].country == "Norway"
    assert by_name["Aalborg Kommune"].country is None
    assert organizations[0].name == "Equinor"


def test_partner_limit_caps_facet_but_not_directory() -> None:
    result = aggregate(_sample_projects(), partner_limit=2)

    assert len(result.metadata.partners) == 2
    assert len(result.organizations) == 4
    assert result.metadata.statistics.unique_partners == 4


def test_aggregation_is_deterministic() -> None:
    assert aggregate(_sample_projects()) == aggregate(_sample_projects())


def test_empty_input_yields_empty_facets() -> None:
    result = aggregate([])

    assert result.metadata.years.min is None
    assert result.metadata.years.available == ()
    assert result.metadata.partners == ()
    assert result.organizations == ()
