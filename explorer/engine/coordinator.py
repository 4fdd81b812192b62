"""Query coordinator.

Runs the filter evaluator once per group and the classifier once per
requested shape, so a single call returns the grid projection, the card
projection, the menu and the admitted count of every group. Switching
between the grid and card views therefore never recomputes anything.
"""

from collections.abc import Sequence
from dataclasses import dataclass

import structlog

from explorer.catalog.index import CatalogIndex
from explorer.domain.value_objects import (
    ALL_GROUPS,
    BASE_FILTER_CATEGORIES,
    DEFAULT_CLASSIFY,
    DEFAULT_SORT,
    DEFAULT_SORT_DIRECTION,
    ActiveFilters,
    ClassifyOption,
    FilterCategory,
    GroupSelector,
    SortDirection,
    SortOption,
    Tier,
)
from explorer.engine.classifier import (
    DEFAULT_MATURITY_ORDER,
    CardProjection,
    GridProjection,
    Menu,
    project_card,
    project_grid,
)
from explorer.engine.facets import FacetBuilder, GroupFacets, clean_stale_filters
from explorer.engine.filters import filter_entries
from explorer.engine.sorting import sort_entries

logger = structlog.get_logger()


@dataclass
class GroupResult:
    """Projections of one group.

    Attributes:
        group: Group selector.
        num_items: Admitted entry count.
        grid: Grid projection.
        card: Card projection for the effective classify dimension.
        classify: Effective classify dimension (requested or group default).
        sort_by: Effective sort key (requested or name).
        sort_direction: Sort direction.
    """

    group: GroupSelector
    num_items: int
    grid: GridProjection
    card: CardProjection
    classify: ClassifyOption
    sort_by: SortOption
    sort_direction: SortDirection

    @property
    def menu(self) -> Menu | None:
        """Card menu of the group."""
        return self.card.menu

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "group": str(self.group),
            "num_items": self.num_items,
            "classify": self.classify.value,
            "sort_by": self.sort_by.value,
            "sort_direction": self.sort_direction.value,
            "grid": self.grid.to_dict(),
            "card": self.card.to_dict(),
        }


@dataclass
class QueryResult:
    """Per-group results of one query, plus the group it was issued for."""

    active_group: GroupSelector
    filters: ActiveFilters
    groups: dict[GroupSelector, GroupResult]

    @property
    def num_items(self) -> dict[GroupSelector, int]:
        """Admitted count per group."""
        return {group: result.num_items for group, result in self.groups.items()}

    @property
    def grid(self) -> dict[GroupSelector, GridProjection]:
        """Grid projection per group."""
        return {group: result.grid for group, result in self.groups.items()}

    @property
    def card(self) -> dict[GroupSelector, CardProjection]:
        """Card projection per group."""
        return {group: result.card for group, result in self.groups.items()}

    @property
    def menu(self) -> dict[GroupSelector, Menu | None]:
        """Card menu per group."""
        return {group: result.menu for group, result in self.groups.items()}

    @property
    def active(self) -> GroupResult:
        """Result of the group the query was issued for."""
        return self.groups[self.active_group]


class QueryCoordinator:
    """Answers explore queries over one catalog index.

    Example usage:
        coordinator = QueryCoordinator(index)
        result = coordinator.query_items(filters, NamedGroup("projects"), ClassifyOption.TAG)
        print(result.num_items[NamedGroup("projects")])
    """

    def __init__(
        self,
        index: CatalogIndex,
        facets: FacetBuilder | None = None,
        maturity_order: Sequence[str] = DEFAULT_MATURITY_ORDER,
    ) -> None:
        """Initialize coordinator.

        Args:
            index: Catalog index to query.
            facets: Facet builder (shared cache); a private one when omitted.
            maturity_order: Lifecycle order of maturity levels in the card view.
        """
        self.index = index
        self.facets = facets or FacetBuilder()
        self.maturity_order = tuple(maturity_order)

    def facets_for(self, group: GroupSelector) -> GroupFacets:
        """Facets of a group over this coordinator's index."""
        return self.facets.for_group(self.index, group)

    def change_group(self, filters: ActiveFilters, group: GroupSelector) -> ActiveFilters:
        """Clean filters carried over to a newly selected group.

        A base tier index cannot tell which full tier values a group
        recognizes, so only base dimensions are cleaned there.

        Args:
            filters: Active filters of the previous group.
            group: Newly selected group.

        Returns:
            Filters without values the new group does not recognize.
        """
        categories = BASE_FILTER_CATEGORIES if self.index.tier == Tier.BASE else None
        return clean_stale_filters(filters, self.index, group, self.facets, categories)

    def query_items(
        self,
        filters: ActiveFilters,
        group: GroupSelector = ALL_GROUPS,
        classify: ClassifyOption = DEFAULT_CLASSIFY,
        sort_by: SortOption = DEFAULT_SORT,
        sort_direction: SortDirection = DEFAULT_SORT_DIRECTION,
    ) -> QueryResult:
        """Filter and project every group of the catalog.

        Args:
            filters: Active filters, aggregates already expanded.
            group: Group the query is issued for.
            classify: Requested card classify dimension; groups where it is
                unavailable use the default dimension.
            sort_by: Requested card sort key; groups where it is unavailable
                sort by name.
            sort_direction: Card sort direction.

        Returns:
            Per-group counts, grid and card projections, and menus.
        """
        selectors = self.index.group_selectors
        if group not in selectors:
            selectors.append(group)

        results = {
            selector: self._query_group(filters, selector, classify, sort_by, sort_direction)
            for selector in selectors
        }

        logger.debug(
            "Query answered",
            version=self.index.version,
            group=str(group),
            filters=filters.to_dict(),
            classify=classify.value,
            num_items=results[group].num_items,
        )
        return QueryResult(active_group=group, filters=filters, groups=results)

    def _query_group(
        self,
        filters: ActiveFilters,
        group: GroupSelector,
        classify: ClassifyOption,
        sort_by: SortOption,
        sort_direction: SortDirection,
    ) -> GroupResult:
        facets = self.facets_for(group)
        effective_classify = classify if classify in facets.classify_options else DEFAULT_CLASSIFY
        effective_sort = sort_by if sort_by in facets.sort_options else DEFAULT_SORT

        scope = self.index.categories_for_group(group)
        admitted = filter_entries(
            self.index.entries_for_group(group),
            filters,
            categories_in_scope=scope,
        )
        category_filter = filters.get(FilterCategory.CATEGORY)

        grid = project_grid(admitted, self.index.tree, scope, category_filter)
        card = project_card(
            sort_entries(admitted, effective_sort, sort_direction),
            effective_classify,
            self.index.tree,
            scope,
            category_filter,
            maturity_order=self.maturity_order,
        )
        return GroupResult(
            group=group,
            num_items=len(admitted),
            grid=grid,
            card=card,
            classify=effective_classify,
            sort_by=effective_sort,
            sort_direction=sort_direction,
        )
