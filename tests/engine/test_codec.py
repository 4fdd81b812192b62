"""Tests for the explore query-string codec."""

from typing import Any

import pytest

from explorer.catalog.index import CatalogIndex
from explorer.domain.value_objects import (
    ABSENT,
    ALL_GROUPS,
    ActiveFilters,
    ClassifyOption,
    FilterCategory,
    NamedGroup,
    SortDirection,
    SortOption,
    ViewMode,
)
from explorer.engine.codec import (
    ExploreState,
    FilterCodec,
    literal_filters,
    literal_view_mode,
)

PROJECTS = NamedGroup("projects")


@pytest.fixture
def codec(full_index: CatalogIndex) -> FilterCodec:
    """Codec bound to the full tier."""
    return FilterCodec(full_index)


class TestDecodeFilters:
    """Tests for FilterCodec.decode_filters."""

    def test_literal_values(self, codec: FilterCodec) -> None:
        """Repeated parameters accumulate."""
        filters = codec.decode_filters("project=graduated&project=sandbox&tag=network")

        assert filters.to_dict() == {"project": ["graduated", "sandbox"], "tag": ["network"]}

    def test_foundation_aggregate(self, codec: FilterCodec) -> None:
        """The foundation label expands to every maturity value."""
        filters = codec.decode_filters({"project": "cncf"})

        assert filters.get(FilterCategory.MATURITY) == frozenset(
            {"archived", "graduated", "incubating", "sandbox"}
        )

    def test_negatives(self, codec: FilterCodec) -> None:
        """Negative values stand for ABSENT."""
        filters = codec.decode_filters([("project", "non-cncf"), ("license", "non-oss")])

        assert filters.get(FilterCategory.MATURITY) == frozenset({ABSENT})
        assert filters.get(FilterCategory.LICENSE) == frozenset({ABSENT})

    def test_license_aggregate_depends_on_group(self, codec: FilterCodec) -> None:
        """The open source aggregate expands to the group's licenses."""
        assert codec.decode_filters("license=oss", PROJECTS).get(FilterCategory.LICENSE) == frozenset(
            {"Apache-2.0", "MIT"}
        )

    def test_empty_aggregate_matches_nothing(self, codec: FilterCodec) -> None:
        """An aggregate with nothing to expand to stays a constraint."""
        filters = codec.decode_filters("license=oss", NamedGroup("members"))

        assert filters.get(FilterCategory.LICENSE) == frozenset({"oss"})
        assert codec.encode_filters(filters, NamedGroup("members")) == [("license", "oss")]

    def test_base_tier_license_aggregate(self, base_index: CatalogIndex) -> None:
        """The base tier has no licenses, so the aggregate is kept as written."""
        filters = FilterCodec(base_index).decode_filters("license=oss")

        assert filters.to_dict() == {"license": ["oss"]}

    def test_extra_flags(self, codec: FilterCodec) -> None:
        """Bare flags set to true become extra values."""
        filters = codec.decode_filters("enduser=true&specification=false&extra=specification")

        assert filters.get(FilterCategory.EXTRA) == frozenset({"enduser", "specification"})
        assert codec.decode_filters("specification=false").is_empty

    def test_unknown_parameters_ignored(self, codec: FilterCodec) -> None:
        """Parameters that are not filters are skipped."""
        filters = codec.decode_filters("group=projects&classify=tag&utm_source=x&tag=")

        assert filters.is_empty


class TestEncodeFilters:
    """Tests for FilterCodec.encode_filters."""

    def test_collapses_aggregates(self, codec: FilterCodec, full_index: CatalogIndex) -> None:
        """Full value sets are written as their aggregate."""
        filters = ActiveFilters.from_mapping(
            {
                "project": full_index.all_maturity_values() + [ABSENT],
                "license": ["Apache-2.0", "MIT"],
            }
        )

        assert codec.encode_filters(filters, PROJECTS) == [
            ("project", "cncf"),
            ("project", "non-cncf"),
            ("license", "oss"),
        ]

    def test_partial_sets_stay_literal(self, codec: FilterCodec) -> None:
        """Partial selections are written value by value, sorted."""
        filters = ActiveFilters.from_mapping({"license": ["MIT"], "tag": ["runtime", "network"]})

        assert codec.encode_filters(filters, PROJECTS) == [
            ("tag", "network"),
            ("tag", "runtime"),
            ("license", "MIT"),
        ]

    def test_extra_flags(self, codec: FilterCodec) -> None:
        """Known extra values are written as flags."""
        filters = ActiveFilters.from_mapping({"extra": ["specification", "enduser"]})

        assert codec.encode_filters(filters) == [("enduser", "true"), ("specification", "true")]

    @pytest.mark.parametrize(
        "mapping",
        [
            {},
            {"project": ["graduated", "incubating"]},
            {"project": ["archived", "graduated", "incubating", "sandbox"]},
            {"project": [ABSENT], "license": [ABSENT]},
            {"license": ["Apache-2.0", "MIT", ABSENT], "extra": ["specification"]},
            {"category": ["Orchestration"], "organization": ["PlanetScale"], "org-type": ["for_profit"]},
        ],
    )
    def test_round_trip(self, codec: FilterCodec, mapping: dict) -> None:
        """Decoding what was encoded gives the same filters."""
        filters = ActiveFilters.from_mapping(mapping)

        pairs = codec.encode_filters(filters, PROJECTS)

        assert codec.decode_filters(pairs, PROJECTS) == filters


class TestScenarioB:
    """Two entries sharing one license."""

    def test_open_source_aggregate(self, scenario_b_payload: dict[str, Any]) -> None:
        """The aggregate expands to and collapses from the single license."""
        codec = FilterCodec(CatalogIndex.build(scenario_b_payload))

        filters = codec.decode_filters("license=oss")

        assert filters.to_dict() == {"license": ["Apache-2.0"]}
        assert codec.encode_filters(filters) == [("license", "oss")]


class TestState:
    """Tests for explore state encoding."""

    def test_decode_state(self, codec: FilterCodec) -> None:
        """Every view parameter is read."""
        state = codec.decode_state(
            "group=projects&view-mode=card&classify=maturity&sort-by=stars"
            "&sort-direction=desc&project=graduated"
        )

        assert state == ExploreState(
            group=PROJECTS,
            view_mode=ViewMode.CARD,
            classify=ClassifyOption.MATURITY,
            sort_by=SortOption.STARS,
            sort_direction=SortDirection.DESC,
            filters=ActiveFilters.from_mapping({"project": ["graduated"]}),
        )

    def test_defaults(self, codec: FilterCodec) -> None:
        """Missing and unknown values fall back to defaults."""
        state = codec.decode_state("?view-mode=list&classify=color&sort-by=size&group=nowhere")

        assert state == ExploreState()
        assert state.group == ALL_GROUPS

    def test_encode_omits_defaults(self, codec: FilterCodec) -> None:
        """A default state encodes to an empty query."""
        assert codec.encode_state(ExploreState()) == ""

    def test_state_round_trip(self, codec: FilterCodec) -> None:
        """Encoded state decodes to itself."""
        state = ExploreState(
            group=PROJECTS,
            view_mode=ViewMode.CARD,
            classify=ClassifyOption.TAG,
            sort_by=SortOption.DATE_ADDED,
            filters=ActiveFilters.from_mapping(
                {"license": ["Apache-2.0", "MIT"], "category": ["App Definition"]}
            ),
        )

        query = codec.encode_state(state)

        assert query == (
            "group=projects&view-mode=card&classify=tag&sort-by=date-added"
            "&license=oss&category=App+Definition"
        )
        assert codec.decode_state(query) == state


class TestLiteralReaders:
    """Tests for reading parameters without an index."""

    def test_literal_filters_keep_aggregates(self) -> None:
        """Aggregate tokens are returned as written."""
        filters = literal_filters("license=oss&project=non-cncf&enduser=true&group=members")

        assert filters.to_dict() == {
            "extra": ["enduser"],
            "license": ["oss"],
            "project": ["non-cncf"],
        }

    def test_literal_view_mode(self) -> None:
        """The first view-mode parameter wins; unknown values fall back to grid."""
        assert literal_view_mode("view-mode=card&view-mode=grid") == ViewMode.CARD
        assert literal_view_mode("view-mode=table") == ViewMode.GRID
        assert literal_view_mode("") == ViewMode.GRID
