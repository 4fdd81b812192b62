"""Entry ordering for the card view."""

from collections.abc import Iterable
from datetime import date, datetime
from typing import Any

from explorer.catalog.models import Entry
from explorer.domain.value_objects import (
    DEFAULT_SORT,
    DEFAULT_SORT_DIRECTION,
    SortDirection,
    SortOption,
)


def _name_key(entry: Entry) -> str:
    return entry.name.casefold()


def _stars(entry: Entry) -> int | None:
    measured = [r.github_data.stars for r in entry.repositories if r.github_data is not None]
    return sum(measured) if measured else None


def _contributors(entry: Entry) -> int | None:
    primary = entry.primary_repository
    if primary is None or primary.github_data is None or primary.github_data.contributors is None:
        return None
    return primary.github_data.contributors.count


def _first_commit(entry: Entry) -> datetime | None:
    commits = [
        r.github_data.first_commit.ts
        for r in entry.repositories
        if r.github_data is not None and r.github_data.first_commit is not None
    ]
    return min(commits) if commits else None


def _latest_commit(entry: Entry) -> datetime | None:
    commits = [
        r.github_data.latest_commit.ts
        for r in entry.repositories
        if r.github_data is not None and r.github_data.latest_commit is not None
    ]
    return max(commits) if commits else None


def _date_added(entry: Entry) -> date | None:
    return entry.accepted_at or entry.joined_at


def _funding(entry: Entry) -> float | None:
    if entry.crunchbase_data is None:
        return None
    return entry.crunchbase_data.funding


def sort_value(entry: Entry, option: SortOption) -> Any | None:
    """Get the value an entry is ordered by.

    Args:
        entry: Entry to inspect.
        option: Sort key.

    Returns:
        Comparable value, or None when the entry lacks it.
    """
    match option:
        case SortOption.NAME:
            return _name_key(entry)
        case SortOption.STARS:
            return _stars(entry)
        case SortOption.CONTRIBUTORS:
            return _contributors(entry)
        case SortOption.FIRST_COMMIT:
            return _first_commit(entry)
        case SortOption.LATEST_COMMIT:
            return _latest_commit(entry)
        case SortOption.DATE_ADDED:
            return _date_added(entry)
        case SortOption.FUNDING:
            return _funding(entry)
    return None


def sort_entries(
    entries: Iterable[Entry],
    option: SortOption = DEFAULT_SORT,
    direction: SortDirection = DEFAULT_SORT_DIRECTION,
) -> list[Entry]:
    """Order entries by a sort key.

    Entries lacking the key go last in either direction. Ties keep name
    order (ascending, case-insensitive).

    Args:
        entries: Entries to order.
        option: Sort key.
        direction: Sort direction.

    Returns:
        New ordered list.
    """
    by_name = sorted(entries, key=_name_key)
    keyed = []
    missing = []
    for entry in by_name:
        value = sort_value(entry, option)
        if value is None:
            missing.append(entry)
        else:
            keyed.append((value, entry))

    # reverse=True keeps equal values in name order
    keyed.sort(key=lambda pair: pair[0], reverse=direction == SortDirection.DESC)
    return [entry for _, entry in keyed] + missing


def available_sort_options(entries: Iterable[Entry]) -> list[SortOption]:
    """Sort options at least one entry has a value for (name always)."""
    remaining = [option for option in SortOption if option != SortOption.NAME]
    available = {SortOption.NAME}
    for entry in entries:
        for option in list(remaining):
            if sort_value(entry, option) is not None:
                available.add(option)
                remaining.remove(option)
        if not remaining:
            break
    return [option for option in SortOption if option in available]
