"""Filter evaluation.

An entry is admitted when, for every constrained category, one of its
values is accepted (OR within a category, AND across categories). An
entry without a value for a category is admitted only when the accepted
set holds the ABSENT literal. Aggregate options never reach this module:
they are expanded to literal values before evaluation.
"""

from collections.abc import Collection, Iterable

from explorer.catalog.models import Entry
from explorer.domain.value_objects import ABSENT, ActiveFilters, FilterCategory


def _single(value: str | None) -> frozenset[str]:
    return frozenset((value,)) if value else frozenset()


def entry_values(
    entry: Entry,
    category: FilterCategory,
    categories_in_scope: Collection[str] | None = None,
) -> frozenset[str]:
    """Values an entry exposes for a filter category.

    Args:
        entry: Entry to inspect.
        category: Filter category.
        categories_in_scope: Catalog categories of the group being evaluated;
            placements outside them are ignored. None means every category.

    Returns:
        Set of values, empty when the attribute is absent.
    """
    org = entry.crunchbase_data
    match category:
        case FilterCategory.MATURITY:
            return _single(entry.maturity)
        case FilterCategory.TAG:
            return _single(entry.tag)
        case FilterCategory.ORGANIZATION:
            return _single(org.name if org else None)
        case FilterCategory.LICENSE:
            return entry.licenses
        case FilterCategory.COUNTRY:
            return _single(org.country if org else None)
        case FilterCategory.INDUSTRY:
            return entry.industries
        case FilterCategory.ORG_TYPE:
            return _single(org.company_type if org else None)
        case FilterCategory.CATEGORY:
            return frozenset(
                name
                for name, _ in entry.placements
                if categories_in_scope is None or name in categories_in_scope
            )
        case FilterCategory.EXTRA:
            return entry.extra_flags
    return frozenset()


def admits(
    entry: Entry,
    filters: ActiveFilters,
    categories_in_scope: Collection[str] | None = None,
) -> bool:
    """Check whether an entry passes every active filter.

    Args:
        entry: Entry to check.
        filters: Active filters.
        categories_in_scope: Catalog categories of the group being evaluated.

    Returns:
        True if admitted.
    """
    for category, accepted in filters:
        values = entry_values(entry, category, categories_in_scope)
        if values:
            if values.isdisjoint(accepted):
                return False
        elif ABSENT not in accepted:
            return False
    return True


def filter_entries(
    entries: Iterable[Entry],
    filters: ActiveFilters,
    *,
    categories_in_scope: Collection[str] | None = None,
) -> list[Entry]:
    """Return the admitted subset, preserving input order.

    Values unknown to the entries simply match nothing, so filters left
    over from another group never raise.

    Args:
        entries: Candidate entries.
        filters: Active filters.
        categories_in_scope: Catalog categories of the group being evaluated.

    Returns:
        Admitted entries.
    """
    if filters.is_empty:
        return list(entries)
    scope = frozenset(categories_in_scope) if categories_in_scope is not None else None
    return [entry for entry in entries if admits(entry, filters, scope)]
