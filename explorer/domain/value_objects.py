"""Value Objects for the domain layer.

Value objects are immutable objects that are defined by their attributes
rather than identity. They are interchangeable when their values are equal.
"""

from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Self

from explorer.domain.base import ValueObject


# ============================================================================
# Enumerations
# ============================================================================


class FilterCategory(str, Enum):
    """Filter categories, named after their query-string parameter."""

    MATURITY = "project"
    TAG = "tag"
    ORGANIZATION = "organization"
    LICENSE = "license"
    COUNTRY = "country"
    INDUSTRY = "industry"
    ORG_TYPE = "org-type"
    CATEGORY = "category"
    EXTRA = "extra"

    @classmethod
    def parse(cls, value: str) -> "FilterCategory | None":
        """Parse a parameter name, returning None when unknown.

        Args:
            value: Query-string parameter name.

        Returns:
            Matching category or None.
        """
        try:
            return cls(value)
        except ValueError:
            return None


class ClassifyOption(str, Enum):
    """Dimensions used to group entries in the card view."""

    NONE = "none"
    CATEGORY = "category"
    MATURITY = "maturity"
    TAG = "tag"


class SortOption(str, Enum):
    """Card view sort keys."""

    NAME = "name"
    STARS = "stars"
    DATE_ADDED = "date-added"
    CONTRIBUTORS = "contributors"
    FIRST_COMMIT = "first-commit"
    LATEST_COMMIT = "latest-commit"
    FUNDING = "funding"


class SortDirection(str, Enum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"


class ViewMode(str, Enum):
    """Explore view layouts."""

    GRID = "grid"
    CARD = "card"


class Tier(str, Enum):
    """Catalog payload tiers. The full tier is a field superset of base."""

    BASE = "base"
    FULL = "full"


DEFAULT_CLASSIFY = ClassifyOption.CATEGORY
DEFAULT_SORT = SortOption.NAME
DEFAULT_SORT_DIRECTION = SortDirection.ASC
DEFAULT_VIEW_MODE = ViewMode.GRID

# Literal standing for "attribute absent" inside a filter value set.
ABSENT = "__absent__"

# Filter categories answerable from the base tier.
BASE_FILTER_CATEGORIES = frozenset(
    {FilterCategory.MATURITY, FilterCategory.TAG, FilterCategory.CATEGORY}
)


# ============================================================================
# Group Selectors
# ============================================================================


@dataclass(frozen=True)
class AllGroups(ValueObject):
    """Selector for the implicit group spanning the whole catalog.

    Distinct from any named group, including one literally called "all".
    """

    key: str = field(default="all", init=False)

    def __str__(self) -> str:
        """Return string representation."""
        return self.key


@dataclass(frozen=True)
class NamedGroup(ValueObject):
    """Selector for a declared group, by normalized name."""

    name: str

    @property
    def key(self) -> str:
        """Key used when serializing per-group results."""
        return self.name

    def __str__(self) -> str:
        """Return string representation."""
        return self.name


GroupSelector = AllGroups | NamedGroup

ALL_GROUPS = AllGroups()


# ============================================================================
# Active Filters
# ============================================================================


@dataclass(frozen=True)
class ActiveFilters(ValueObject):
    """Accepted values per filter category.

    A missing category is unconstrained. Assigning an empty set to a
    category is the same as removing it, so instances never hold one.

    Example:
        filters = ActiveFilters.from_mapping({"project": ["graduated"]})
        filters = filters.with_values(FilterCategory.TAG, {"runtime"})
    """

    selections: tuple[tuple[FilterCategory, frozenset[str]], ...] = ()

    @classmethod
    def from_mapping(
        cls, mapping: Mapping[FilterCategory | str, Iterable[str]] | None = None
    ) -> Self:
        """Create filters from a plain mapping.

        Unknown category names are ignored; empty value sets are dropped.

        Args:
            mapping: Category (or parameter name) to accepted values.

        Returns:
            ActiveFilters instance.
        """
        normalized: dict[FilterCategory, frozenset[str]] = {}
        for key, values in (mapping or {}).items():
            category = key if isinstance(key, FilterCategory) else FilterCategory.parse(key)
            if category is None:
                continue
            accepted = frozenset(values)
            if accepted:
                normalized[category] = accepted
        return cls(selections=cls._freeze(normalized))

    @staticmethod
    def _freeze(
        normalized: Mapping[FilterCategory, frozenset[str]],
    ) -> tuple[tuple[FilterCategory, frozenset[str]], ...]:
        return tuple(sorted(normalized.items(), key=lambda pair: pair[0].value))

    def as_dict(self) -> dict[FilterCategory, frozenset[str]]:
        """Get selections as a mutable dictionary copy."""
        return dict(self.selections)

    def get(self, category: FilterCategory) -> frozenset[str] | None:
        """Get accepted values for a category, or None when unconstrained."""
        for key, values in self.selections:
            if key == category:
                return values
        return None

    @property
    def categories(self) -> list[FilterCategory]:
        """Constrained categories."""
        return [key for key, _ in self.selections]

    @property
    def is_empty(self) -> bool:
        """Whether no category is constrained."""
        return not self.selections

    def with_values(self, category: FilterCategory, values: Iterable[str]) -> Self:
        """Return a copy with a category's accepted values replaced.

        Args:
            category: Category to update.
            values: New accepted values; empty removes the category.

        Returns:
            Updated filters.
        """
        updated = self.as_dict()
        accepted = frozenset(values)
        if accepted:
            updated[category] = accepted
        else:
            updated.pop(category, None)
        return type(self)(selections=self._freeze(updated))

    def without(self, category: FilterCategory) -> Self:
        """Return a copy with a category removed."""
        return self.with_values(category, ())

    def keep_only(self, recognized: Callable[[FilterCategory, str], bool]) -> Self:
        """Drop every value the predicate does not recognize.

        Args:
            recognized: Predicate over (category, value).

        Returns:
            Filtered copy; categories left empty are removed.
        """
        kept = {
            category: frozenset(v for v in values if recognized(category, v))
            for category, values in self.selections
        }
        return type(self)(selections=self._freeze({k: v for k, v in kept.items() if v}))

    def to_dict(self) -> dict[str, list[str]]:
        """Convert to a JSON-friendly dictionary with sorted values."""
        return {category.value: sorted(values) for category, values in self.selections}

    def __iter__(self) -> Iterator[tuple[FilterCategory, frozenset[str]]]:
        return iter(self.selections)

    def __len__(self) -> int:
        return len(self.selections)

    def __contains__(self, category: object) -> bool:
        return any(key == category for key, _ in self.selections)


EMPTY_FILTERS = ActiveFilters()
