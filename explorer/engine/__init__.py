"""Query engine - filtering, projection and staged loading over a catalog index.

Example usage:
    from explorer.engine import QueryCoordinator

    coordinator = QueryCoordinator(index)
    result = coordinator.query_items(filters, ALL_GROUPS, ClassifyOption.CATEGORY)
"""

from explorer.engine.classifier import (
    CardProjection,
    GridLeaf,
    GridProjection,
    project_card,
    project_grid,
)
from explorer.engine.codec import ExploreState, FilterCodec
from explorer.engine.coordinator import GroupResult, QueryCoordinator, QueryResult
from explorer.engine.facets import (
    AggregateOption,
    FacetBuilder,
    FacetOption,
    FacetSection,
    GroupFacets,
    build_facets,
    clean_stale_filters,
)
from explorer.engine.filters import admits, filter_entries
from explorer.engine.loader import Dataset, StagedLoader, requires_full
from explorer.engine.sorting import sort_entries

__all__ = [
    # Facets
    "AggregateOption",
    "FacetBuilder",
    "FacetOption",
    "FacetSection",
    "GroupFacets",
    "build_facets",
    "clean_stale_filters",
    # Filters
    "admits",
    "filter_entries",
    # Classifier
    "CardProjection",
    "GridLeaf",
    "GridProjection",
    "project_card",
    "project_grid",
    # Sorting
    "sort_entries",
    # Coordinator
    "GroupResult",
    "QueryCoordinator",
    "QueryResult",
    # Codec
    "ExploreState",
    "FilterCodec",
    # Loader
    "Dataset",
    "StagedLoader",
    "requires_full",
]
