"""Domain layer - value objects, enumerations and exceptions.

This module exports the vocabulary shared by the catalog and the engine:

- **Value Objects**: Immutable objects compared by value (group selectors, ActiveFilters)
- **Enumerations**: Filter categories, classify/sort options, view modes, tiers
- **Exceptions**: Catalog load and staged loading errors

Example usage:
    from explorer.domain import ALL_GROUPS, ActiveFilters, FilterCategory

    filters = ActiveFilters.from_mapping({FilterCategory.TAG: ["runtime"]})
"""

from explorer.domain.base import ValueObject
from explorer.domain.exceptions import (
    CatalogError,
    CatalogNotLoadedError,
    DomainError,
    DuplicateEntryError,
    LoadingError,
    MalformedCatalogError,
    TierUnavailableError,
    UnresolvedCategoryError,
)
from explorer.domain.value_objects import (
    ABSENT,
    ALL_GROUPS,
    BASE_FILTER_CATEGORIES,
    DEFAULT_CLASSIFY,
    DEFAULT_SORT,
    DEFAULT_SORT_DIRECTION,
    DEFAULT_VIEW_MODE,
    EMPTY_FILTERS,
    ActiveFilters,
    AllGroups,
    ClassifyOption,
    FilterCategory,
    GroupSelector,
    NamedGroup,
    SortDirection,
    SortOption,
    Tier,
    ViewMode,
)

__all__ = [
    # Base
    "ValueObject",
    # Value objects
    "ABSENT",
    "ALL_GROUPS",
    "BASE_FILTER_CATEGORIES",
    "DEFAULT_CLASSIFY",
    "DEFAULT_SORT",
    "DEFAULT_SORT_DIRECTION",
    "DEFAULT_VIEW_MODE",
    "EMPTY_FILTERS",
    "ActiveFilters",
    "AllGroups",
    "ClassifyOption",
    "FilterCategory",
    "GroupSelector",
    "NamedGroup",
    "SortDirection",
    "SortOption",
    "Tier",
    "ViewMode",
    # Exceptions
    "CatalogError",
    "CatalogNotLoadedError",
    "DomainError",
    "DuplicateEntryError",
    "LoadingError",
    "MalformedCatalogError",
    "TierUnavailableError",
    "UnresolvedCategoryError",
]
