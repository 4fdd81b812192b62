"""Facet builder.

Derives, per group, the filter sections worth presenting and the classify
and sort dimensions that make sense. Everything is computed from the
group's unfiltered entries, so picking one filter value never hides an
unrelated section. Results are cached per (index version, group).
"""

from collections.abc import Collection, Iterable
from dataclasses import dataclass, field

import structlog

from explorer.catalog.index import CatalogIndex
from explorer.catalog.models import Entry
from explorer.domain.value_objects import (
    ABSENT,
    ActiveFilters,
    ClassifyOption,
    FilterCategory,
    GroupSelector,
    SortOption,
)
from explorer.engine.sorting import available_sort_options

logger = structlog.get_logger()

ARCHIVED = "archived"
UNDEFINED = "undefined"

OSS_VALUE = "oss"
NEGATIVE_PREFIX = "non-"

SECTION_TITLES = {
    FilterCategory.MATURITY: "Project",
    FilterCategory.TAG: "TAG",
    FilterCategory.ORGANIZATION: "Organization",
    FilterCategory.CATEGORY: "Category",
    FilterCategory.LICENSE: "License",
    FilterCategory.COUNTRY: "Country",
    FilterCategory.INDUSTRY: "Industry",
    FilterCategory.ORG_TYPE: "Organization type",
    FilterCategory.EXTRA: "Extra",
}

EXTRA_LABELS = {
    "enduser": "End user",
    "specification": "Specification",
}


# ============================================================================
# Labels
# ============================================================================


def capitalize_first(text: str) -> str:
    """Upper-case the first character, leave the rest untouched."""
    return text[:1].upper() + text[1:]


def maturity_label(value: str) -> str:
    """Display label of a maturity level."""
    return capitalize_first(value)


def tag_label(value: str) -> str:
    """Display label of a tag ("app-delivery" -> "App Delivery")."""
    return " ".join(capitalize_first(word) for word in value.replace("-", " ").split(" "))


def label_for(category: FilterCategory, value: str) -> str:
    """Display label of a filter value."""
    match category:
        case FilterCategory.MATURITY:
            return maturity_label(value)
        case FilterCategory.TAG:
            return tag_label(value)
        case FilterCategory.EXTRA:
            return EXTRA_LABELS.get(value, capitalize_first(value))
    return value


def bucket_sort_key(label: str, value: str) -> tuple[int, str]:
    """Order by label, with the archived and undefined buckets last."""
    if value == UNDEFINED:
        return (2, "")
    if value == ARCHIVED:
        return (1, "")
    return (0, label.casefold())


# ============================================================================
# Facet Types
# ============================================================================


@dataclass(frozen=True)
class FacetOption:
    """Selectable filter value."""

    value: str
    label: str

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"value": self.value, "label": self.label}


@dataclass(frozen=True)
class AggregateOption:
    """Virtual option standing for a whole value set.

    Attributes:
        value: Token selecting the aggregate (e.g. "cncf", "oss").
        label: Display label.
        expands_to: Literal values the aggregate stands for.
        negative_value: Token selecting entries without the attribute.
        negative_label: Display label of the negative option.
    """

    value: str
    label: str
    expands_to: tuple[str, ...]
    negative_value: str
    negative_label: str

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "value": self.value,
            "label": self.label,
            "expands_to": list(self.expands_to),
            "negative": {"value": self.negative_value, "label": self.negative_label},
        }


@dataclass(frozen=True)
class FacetSection:
    """Filter section of one category, with options sorted for display."""

    category: FilterCategory
    title: str
    options: tuple[FacetOption, ...]
    aggregate: AggregateOption | None = None

    @property
    def values(self) -> list[str]:
        """Option values in display order."""
        return [option.value for option in self.options]

    def accepts(self, value: str) -> bool:
        """Check whether a filter value is meaningful for this section.

        Aggregate expansions and the ABSENT negative count as recognized
        whenever the section carries an aggregate.
        """
        if any(option.value == value for option in self.options):
            return True
        if self.aggregate is None:
            return False
        return value == ABSENT or value in self.aggregate.expands_to

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "category": self.category.value,
            "title": self.title,
            "options": [option.to_dict() for option in self.options],
            "aggregate": self.aggregate.to_dict() if self.aggregate else None,
        }


@dataclass(frozen=True)
class GroupFacets:
    """Filter sections and view dimensions available in a group."""

    group: GroupSelector
    sections: tuple[FacetSection, ...] = ()
    classify_options: tuple[ClassifyOption, ...] = (ClassifyOption.NONE, ClassifyOption.CATEGORY)
    sort_options: tuple[SortOption, ...] = (SortOption.NAME,)

    @property
    def is_empty(self) -> bool:
        """Whether the group has no applicable filter section."""
        return not self.sections

    def section(self, category: FilterCategory) -> FacetSection | None:
        """Get the section of a category, if presented."""
        for section in self.sections:
            if section.category == category:
                return section
        return None

    def recognizes(self, category: FilterCategory, value: str) -> bool:
        """Check whether a filter value is known to this group."""
        section = self.section(category)
        return section is not None and section.accepts(value)

    def clean(
        self,
        filters: ActiveFilters,
        categories: Collection[FilterCategory] | None = None,
    ) -> ActiveFilters:
        """Drop filter values the group does not recognize.

        Args:
            filters: Active filters.
            categories: Categories to clean; others are kept as they are.
                None cleans every category.

        Returns:
            Cleaned filters.
        """
        if categories is None:
            return filters.keep_only(self.recognizes)
        return filters.keep_only(
            lambda category, value: category not in categories
            or self.recognizes(category, value)
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "group": str(self.group),
            "sections": [section.to_dict() for section in self.sections],
            "classify_options": [option.value for option in self.classify_options],
            "sort_options": [option.value for option in self.sort_options],
        }


# ============================================================================
# Builder
# ============================================================================


@dataclass
class _Accumulator:
    maturity: set[str] = field(default_factory=set)
    tags: set[str] = field(default_factory=set)
    categories: set[str] = field(default_factory=set)
    extra: set[str] = field(default_factory=set)

    def add(self, entry: Entry, scope: set[str]) -> None:
        if entry.maturity:
            self.maturity.add(entry.maturity)
        if entry.tag:
            self.tags.add(entry.tag)
        self.categories.update(name for name, _ in entry.placements if name in scope)
        self.extra.update(entry.extra_flags)


def _options(category: FilterCategory, values: Iterable[str]) -> tuple[FacetOption, ...]:
    options = [FacetOption(value=v, label=label_for(category, v)) for v in values]
    if category in (FilterCategory.MATURITY, FilterCategory.TAG):
        options.sort(key=lambda o: bucket_sort_key(o.label, o.value))
    else:
        options.sort(key=lambda o: o.label.casefold())
    return tuple(options)


class FacetBuilder:
    """Computes and caches group facets.

    Example usage:
        builder = FacetBuilder()
        facets = builder.for_group(index, NamedGroup("projects"))
        filters = facets.clean(filters)
    """

    def __init__(self) -> None:
        """Initialize builder with an empty cache."""
        self._cache: dict[tuple[str, GroupSelector], GroupFacets] = {}

    def for_group(self, index: CatalogIndex, group: GroupSelector) -> GroupFacets:
        """Get facets of a group, computing them on first use.

        Args:
            index: Catalog index.
            group: Group selector.

        Returns:
            Group facets; empty for an unknown group.
        """
        key = (index.version, group)
        facets = self._cache.get(key)
        if facets is None:
            facets = build_facets(index, group)
            self._cache[key] = facets
        return facets

    def clear(self) -> None:
        """Drop every cached result."""
        self._cache.clear()


def build_facets(index: CatalogIndex, group: GroupSelector) -> GroupFacets:
    """Compute the facets of a group from its unfiltered entries.

    Args:
        index: Catalog index.
        group: Group selector.

    Returns:
        Group facets.
    """
    entries = index.entries_for_group(group)
    scope = set(index.categories_for_group(group))

    acc = _Accumulator()
    for entry in entries:
        acc.add(entry, scope)

    foundation = index.foundation or index.foundation_label.upper()
    label = index.foundation_label

    sections: list[FacetSection] = []

    def add_section(
        category: FilterCategory,
        values: Iterable[str],
        aggregate: AggregateOption | None = None,
    ) -> None:
        options = _options(category, values)
        if options:
            sections.append(
                FacetSection(
                    category=category,
                    title=SECTION_TITLES[category],
                    options=options,
                    aggregate=aggregate,
                )
            )

    add_section(
        FilterCategory.MATURITY,
        acc.maturity,
        AggregateOption(
            value=label,
            label=f"{foundation} projects",
            expands_to=tuple(index.all_maturity_values()),
            negative_value=f"{NEGATIVE_PREFIX}{label}",
            negative_label=f"Non {foundation} projects",
        ),
    )
    add_section(FilterCategory.TAG, acc.tags)
    add_section(FilterCategory.ORGANIZATION, index.organization_values_for_group(group))
    if len(acc.categories) > 1:
        add_section(FilterCategory.CATEGORY, acc.categories)
    licenses = index.license_values_for_group(group)
    add_section(
        FilterCategory.LICENSE,
        licenses,
        AggregateOption(
            value=OSS_VALUE,
            label="Open source (OSS)",
            expands_to=tuple(licenses),
            negative_value=f"{NEGATIVE_PREFIX}{OSS_VALUE}",
            negative_label="Not open source",
        ),
    )
    add_section(FilterCategory.COUNTRY, index.country_values_for_group(group))
    add_section(FilterCategory.INDUSTRY, index.industry_values_for_group(group))
    add_section(FilterCategory.ORG_TYPE, index.org_type_values_for_group(group))
    add_section(FilterCategory.EXTRA, acc.extra)

    classify = [ClassifyOption.NONE, ClassifyOption.CATEGORY]
    if acc.maturity:
        classify.append(ClassifyOption.MATURITY)
    if acc.tags:
        classify.append(ClassifyOption.TAG)

    facets = GroupFacets(
        group=group,
        sections=tuple(sections),
        classify_options=tuple(classify),
        sort_options=tuple(available_sort_options(entries)),
    )
    logger.debug(
        "Facets built",
        group=str(group),
        version=index.version,
        sections=[s.category.value for s in facets.sections],
    )
    return facets


def clean_stale_filters(
    filters: ActiveFilters,
    index: CatalogIndex,
    group: GroupSelector,
    builder: FacetBuilder | None = None,
    categories: Collection[FilterCategory] | None = None,
) -> ActiveFilters:
    """Drop filter values a group's facets do not recognize.

    Runs when the selected group changes; dropped values are not errors.

    Args:
        filters: Active filters carried over from the previous group.
        index: Catalog index.
        group: Newly selected group.
        builder: Facet builder whose cache to use.
        categories: Categories to clean; None cleans every category.

    Returns:
        Filters restricted to values the group recognizes.
    """
    facets = (builder or FacetBuilder()).for_group(index, group)
    cleaned = facets.clean(filters, categories)
    if cleaned != filters:
        logger.info(
            "Stale filters dropped",
            group=str(group),
            before=filters.to_dict(),
            after=cleaned.to_dict(),
        )
    return cleaned
