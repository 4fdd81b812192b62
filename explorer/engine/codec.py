"""Query-string codec for the explore view.

Filters use one parameter per filter category, repeated for multi-valued
selections:

    ?project=graduated&project=incubating&license=MIT&enduser=true

Two categories carry aggregate values. A maturity selection equal to the
catalog's full maturity-value set is written as the foundation label
(e.g. `project=cncf`); a license selection equal to the group's
open-source-license set is written as `license=oss`. Their negatives,
`non-<label>` and `non-oss`, stand for the ABSENT literal. Reading
expands them symmetrically, so decode(encode(f)) == f.
"""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import TypeVar
from urllib.parse import parse_qsl, urlencode

import structlog

from explorer.catalog.index import CatalogIndex
from explorer.domain.value_objects import (
    ABSENT,
    ALL_GROUPS,
    DEFAULT_CLASSIFY,
    DEFAULT_SORT,
    DEFAULT_SORT_DIRECTION,
    DEFAULT_VIEW_MODE,
    EMPTY_FILTERS,
    ActiveFilters,
    ClassifyOption,
    FilterCategory,
    GroupSelector,
    NamedGroup,
    SortDirection,
    SortOption,
    ViewMode,
)
from explorer.engine.facets import NEGATIVE_PREFIX, OSS_VALUE

logger = structlog.get_logger()

# Bare flag parameters folded into the "extra" category.
EXTRA_FLAGS = ("specification", "enduser")
TRUE_VALUE = "true"

GROUP_PARAM = "group"
VIEW_MODE_PARAM = "view-mode"
CLASSIFY_PARAM = "classify"
SORT_BY_PARAM = "sort-by"
SORT_DIRECTION_PARAM = "sort-direction"
# Group the carried-over filters were chosen in; set when switching groups.
FROM_GROUP_PARAM = "from-group"

QueryPairs = Iterable[tuple[str, str]]
Params = QueryPairs | Mapping[str, str | list[str]] | str

E = TypeVar("E", bound=Enum)


def _parse_enum(enum_type: type[E], value: str | None, default: E) -> E:
    if value is None:
        return default
    try:
        return enum_type(value)
    except ValueError:
        logger.debug("Unknown explore parameter value", value=value, fallback=default.value)
        return default


def _pairs(params: Params) -> list[tuple[str, str]]:
    """Normalize a query string, mapping or pair list to (name, value) pairs."""
    if isinstance(params, str):
        return parse_qsl(params.lstrip("?"), keep_blank_values=False)
    if isinstance(params, Mapping):
        pairs = []
        for name, values in params.items():
            if isinstance(values, str):
                pairs.append((name, values))
            else:
                pairs.extend((name, value) for value in values)
        return pairs
    return list(params)


def _filter_pairs(params: Params) -> Iterator[tuple[FilterCategory, str]]:
    for name, value in _pairs(params):
        if not value:
            continue
        if name in EXTRA_FLAGS:
            if value.lower() == TRUE_VALUE:
                yield FilterCategory.EXTRA, name
            continue
        category = FilterCategory.parse(name)
        if category is not None:
            yield category, value


def literal_filters(params: Params) -> ActiveFilters:
    """Read filters as written, without expanding aggregates.

    Needs no index, so it can pick the tier that answers a query before
    any tier is loaded.
    """
    selections: dict[FilterCategory, set[str]] = {}
    for category, value in _filter_pairs(params):
        selections.setdefault(category, set()).add(value)
    return ActiveFilters.from_mapping(selections)


def literal_view_mode(params: Params) -> ViewMode:
    """Read the view mode without an index."""
    value = next((v for name, v in _pairs(params) if name == VIEW_MODE_PARAM), None)
    return _parse_enum(ViewMode, value, DEFAULT_VIEW_MODE)


@dataclass(frozen=True)
class ExploreState:
    """Decoded explore view state.

    Attributes:
        group: Selected group.
        view_mode: Grid or card layout.
        classify: Card classify dimension.
        sort_by: Card sort key.
        sort_direction: Card sort direction.
        filters: Active filters with aggregates expanded.
    """

    group: GroupSelector = ALL_GROUPS
    view_mode: ViewMode = DEFAULT_VIEW_MODE
    classify: ClassifyOption = DEFAULT_CLASSIFY
    sort_by: SortOption = DEFAULT_SORT
    sort_direction: SortDirection = DEFAULT_SORT_DIRECTION
    filters: ActiveFilters = field(default=EMPTY_FILTERS)


class FilterCodec:
    """Bidirectional mapping between query strings and explore state.

    Aggregates depend on the catalog (maturity values, foundation label) and
    on the group (license values), so a codec is bound to an index.

    Example usage:
        codec = FilterCodec(index)
        state = codec.decode_state("group=projects&project=cncf")
        query = codec.encode_state(state)
    """

    def __init__(self, index: CatalogIndex) -> None:
        """Initialize codec.

        Args:
            index: Catalog index providing aggregate expansions.
        """
        self.index = index

    @property
    def maturity_aggregate(self) -> str:
        """Parameter value standing for every maturity level."""
        return self.index.foundation_label

    @property
    def maturity_negative(self) -> str:
        """Parameter value standing for entries without maturity."""
        return f"{NEGATIVE_PREFIX}{self.maturity_aggregate}"

    @property
    def license_negative(self) -> str:
        """Parameter value standing for entries without a license."""
        return f"{NEGATIVE_PREFIX}{OSS_VALUE}"

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------

    def decode_filters(
        self,
        params: Params,
        group: GroupSelector = ALL_GROUPS,
    ) -> ActiveFilters:
        """Read active filters from query parameters.

        Unknown parameters are ignored. Aggregate and negative values are
        expanded to literal values and ABSENT.

        Args:
            params: Query string, mapping or (name, value) pairs.
            group: Group used to expand the license aggregate.

        Returns:
            Active filters.
        """
        selections: dict[FilterCategory, set[str]] = {}
        for category, value in _filter_pairs(params):
            selections.setdefault(category, set()).update(self._expand(category, value, group))
        return ActiveFilters.from_mapping(selections)

    def _expand(self, category: FilterCategory, value: str, group: GroupSelector) -> list[str]:
        # an empty aggregate keeps its token, which no entry carries
        if category == FilterCategory.MATURITY:
            if value == self.maturity_aggregate:
                return self.index.all_maturity_values() or [value]
            if value == self.maturity_negative:
                return [ABSENT]
        elif category == FilterCategory.LICENSE:
            if value == OSS_VALUE:
                return self.index.license_values_for_group(group) or [value]
            if value == self.license_negative:
                return [ABSENT]
        return [value]

    def encode_filters(
        self,
        filters: ActiveFilters,
        group: GroupSelector = ALL_GROUPS,
    ) -> list[tuple[str, str]]:
        """Write active filters as query parameters.

        Args:
            filters: Active filters.
            group: Group used to collapse the license aggregate.

        Returns:
            (name, value) pairs in a stable order.
        """
        pairs: list[tuple[str, str]] = []
        for category in FilterCategory:
            values = filters.get(category)
            if not values:
                continue
            match category:
                case FilterCategory.MATURITY:
                    pairs.extend(
                        self._collapse(
                            category,
                            values,
                            aggregate=set(self.index.all_maturity_values()),
                            aggregate_value=self.maturity_aggregate,
                            negative_value=self.maturity_negative,
                        )
                    )
                case FilterCategory.LICENSE:
                    pairs.extend(
                        self._collapse(
                            category,
                            values,
                            aggregate=set(self.index.license_values_for_group(group)),
                            aggregate_value=OSS_VALUE,
                            negative_value=self.license_negative,
                        )
                    )
                case FilterCategory.EXTRA:
                    for value in sorted(values):
                        if value in EXTRA_FLAGS:
                            pairs.append((value, TRUE_VALUE))
                        else:
                            pairs.append((category.value, value))
                case _:
                    pairs.extend((category.value, value) for value in sorted(values))
        return pairs

    @staticmethod
    def _collapse(
        category: FilterCategory,
        values: frozenset[str],
        *,
        aggregate: set[str],
        aggregate_value: str,
        negative_value: str,
    ) -> list[tuple[str, str]]:
        literal = set(values) - {ABSENT}
        pairs = []
        if aggregate and literal == aggregate:
            pairs.append((category.value, aggregate_value))
        else:
            pairs.extend((category.value, value) for value in sorted(literal))
        if ABSENT in values:
            pairs.append((category.value, negative_value))
        return pairs

    # ------------------------------------------------------------------
    # Explore state
    # ------------------------------------------------------------------

    def decode_group(self, name: str | None) -> GroupSelector:
        """Resolve a group parameter; missing or unknown names mean all groups."""
        if not name:
            return ALL_GROUPS
        candidate = NamedGroup(name)
        if self.index.has_group(candidate):
            return candidate
        logger.info("Unknown group requested", group=name)
        return ALL_GROUPS

    def decode_state(self, params: Params) -> ExploreState:
        """Read the explore view state from query parameters.

        Unknown enum values fall back to defaults; an unknown group falls
        back to all groups.

        Args:
            params: Query string, mapping or (name, value) pairs.

        Returns:
            Explore state.
        """
        pairs = _pairs(params)
        single: dict[str, str] = {}
        for name, value in pairs:
            single.setdefault(name, value)

        group = self.decode_group(single.get(GROUP_PARAM))
        return ExploreState(
            group=group,
            view_mode=_parse_enum(ViewMode, single.get(VIEW_MODE_PARAM), DEFAULT_VIEW_MODE),
            classify=_parse_enum(ClassifyOption, single.get(CLASSIFY_PARAM), DEFAULT_CLASSIFY),
            sort_by=_parse_enum(SortOption, single.get(SORT_BY_PARAM), DEFAULT_SORT),
            sort_direction=_parse_enum(
                SortDirection, single.get(SORT_DIRECTION_PARAM), DEFAULT_SORT_DIRECTION
            ),
            filters=self.decode_filters(pairs, group),
        )

    def encode_state(self, state: ExploreState) -> str:
        """Write the explore view state as a query string.

        Parameters holding their default value are omitted.

        Args:
            state: Explore state.

        Returns:
            URL-encoded query string without the leading "?".
        """
        pairs: list[tuple[str, str]] = []
        if isinstance(state.group, NamedGroup):
            pairs.append((GROUP_PARAM, state.group.name))
        if state.view_mode != DEFAULT_VIEW_MODE:
            pairs.append((VIEW_MODE_PARAM, state.view_mode.value))
        if state.classify != DEFAULT_CLASSIFY:
            pairs.append((CLASSIFY_PARAM, state.classify.value))
        if state.sort_by != DEFAULT_SORT:
            pairs.append((SORT_BY_PARAM, state.sort_by.value))
        if state.sort_direction != DEFAULT_SORT_DIRECTION:
            pairs.append((SORT_DIRECTION_PARAM, state.sort_direction.value))
        pairs.extend(self.encode_filters(state.filters, state.group))
        return urlencode(pairs)
