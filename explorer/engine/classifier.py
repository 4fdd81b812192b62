"""Classifier/projector.

Arranges an admitted subset of entries into the nested shapes renderers
consume and synthesizes the matching navigation menu:

- grid: always category -> subcategory -> leaf (entries and counts), in
  declared tree order
- card: flat list, or keyed by category/subcategory, maturity or tag,
  depending on the classify dimension

Projections are rebuilt wholesale on every query and are never mutated
afterwards.
"""

from collections.abc import Callable, Collection, Iterable, Sequence
from dataclasses import dataclass, field

from explorer.catalog.models import Entry
from explorer.catalog.naming import anchor_id
from explorer.catalog.tree import CategoryTree
from explorer.domain.value_objects import ClassifyOption

ARCHIVED = "archived"
UNDEFINED = "undefined"

DEFAULT_MATURITY_ORDER = ("graduated", "incubating", "sandbox")

Menu = dict[str, list[str]]


def _placements_in_scope(
    entry: Entry,
    scope: Collection[str],
    category_filter: Collection[str] | None,
) -> list[tuple[str, str]]:
    """Placements of an entry inside the group scope and category filter."""
    return [
        (category, subcategory)
        for category, subcategory in entry.placements
        if category in scope and (not category_filter or category in category_filter)
    ]


def _distinct(entries: Iterable[Entry]) -> int:
    return len({entry.id for entry in entries})


# ============================================================================
# Grid Projection
# ============================================================================


@dataclass
class GridLeaf:
    """Entries of one (category, subcategory) cell of the grid."""

    entries: list[Entry] = field(default_factory=list)

    @property
    def entries_count(self) -> int:
        """Number of entries in the cell."""
        return len(self.entries)

    @property
    def featured_count(self) -> int:
        """Number of featured entries in the cell."""
        return sum(1 for entry in self.entries if entry.is_featured)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "entries": [entry.id for entry in self.entries],
            "entries_count": self.entries_count,
            "featured_count": self.featured_count,
        }


@dataclass
class GridProjection:
    """Category -> subcategory -> leaf structure of the grid view."""

    categories: dict[str, dict[str, GridLeaf]] = field(default_factory=dict)
    count: int = 0

    @property
    def menu(self) -> Menu:
        """Category -> subcategories present, in grid order."""
        return {category: list(subs) for category, subs in self.categories.items()}

    def shape(self) -> dict[str, dict[str, list[str]]]:
        """Entry ids per cell, for comparisons and logging."""
        return {
            category: {sub: [e.id for e in leaf.entries] for sub, leaf in subs.items()}
            for category, subs in self.categories.items()
        }

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "categories": {
                category: {sub: leaf.to_dict() for sub, leaf in subs.items()}
                for category, subs in self.categories.items()
            },
            "count": self.count,
        }


def project_grid(
    entries: Iterable[Entry],
    tree: CategoryTree,
    scope: Collection[str],
    category_filter: Collection[str] | None = None,
) -> GridProjection:
    """Build the grid projection of admitted entries.

    Entries appear under each of their placements that belong to the group
    scope (and to the category filter when one is active). Categories and
    subcategories follow declared tree order; entry order is kept.

    Args:
        entries: Admitted entries, in the order they should appear.
        tree: Category tree.
        scope: Catalog categories of the group.
        category_filter: Accepted categories, if a category filter is active.

    Returns:
        Grid projection with its distinct entry count.
    """
    cells: dict[tuple[str, str], list[Entry]] = {}
    placed: set[str] = set()
    for entry in entries:
        for placement in _placements_in_scope(entry, scope, category_filter):
            cells.setdefault(placement, []).append(entry)
            placed.add(entry.id)

    categories: dict[str, dict[str, GridLeaf]] = {}
    for category in tree.category_names:
        subs = {
            sub: GridLeaf(entries=cells[(category, sub)])
            for sub in tree.subcategory_order(category)
            if (category, sub) in cells
        }
        if subs:
            categories[category] = subs

    return GridProjection(categories=categories, count=len(placed))


# ============================================================================
# Card Projection
# ============================================================================


def bucket_order_key(value: str) -> tuple[int, str]:
    """Alphabetical order with archived and undefined buckets last."""
    if value == UNDEFINED:
        return (2, "")
    if value == ARCHIVED:
        return (1, "")
    return (0, value.casefold())


def maturity_order_key(value: str, lifecycle: Sequence[str]) -> tuple[int, int, str]:
    """Lifecycle order, then unknown levels alphabetically, archived and undefined last."""
    if value == UNDEFINED:
        return (3, 0, "")
    if value == ARCHIVED:
        return (2, 0, "")
    if value in lifecycle:
        return (0, lifecycle.index(value), "")
    return (1, 0, value.casefold())


CardData = list[Entry] | dict[str, list[Entry]] | dict[str, dict[str, list[Entry]]]


@dataclass
class CardProjection:
    """Card view structure for one classify dimension.

    Attributes:
        classify: Classify dimension the projection was built for.
        data: Flat list (none), bucket -> entries (maturity, tag) or
            category -> subcategory -> entries (category).
        menu: Top key -> ordered second keys; None for the flat shape.
        count: Distinct entries in the projection.
    """

    classify: ClassifyOption
    data: CardData
    menu: Menu | None
    count: int

    @property
    def default_target(self) -> tuple[str, str | None] | None:
        """First (title, subtitle) of the menu, the default navigation target."""
        if not self.menu:
            return None
        title, subtitles = next(iter(self.menu.items()))
        return title, (subtitles[0] if subtitles else None)

    @property
    def anchor(self) -> str | None:
        """Anchor id of the default navigation target."""
        target = self.default_target
        if target is None:
            return None
        return anchor_id(*target)

    def shape(self) -> list[str] | dict:
        """Entry ids arranged like `data`."""
        if isinstance(self.data, list):
            return [e.id for e in self.data]
        shaped: dict = {}
        for key, value in self.data.items():
            if isinstance(value, dict):
                shaped[key] = {sub: [e.id for e in items] for sub, items in value.items()}
            else:
                shaped[key] = [e.id for e in value]
        return shaped

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "classify": self.classify.value,
            "data": self.shape(),
            "menu": self.menu,
            "count": self.count,
            "default_target": list(self.default_target) if self.default_target else None,
            "anchor": self.anchor,
        }


def _bucketed(
    entries: Iterable[Entry],
    attribute: str,
    order_key: Callable[[str], tuple],
) -> dict[str, list[Entry]]:
    buckets: dict[str, list[Entry]] = {}
    for entry in entries:
        buckets.setdefault(getattr(entry, attribute) or UNDEFINED, []).append(entry)
    return {key: buckets[key] for key in sorted(buckets, key=order_key)}


def _by_category(
    entries: Iterable[Entry],
    tree: CategoryTree,
    scope: Collection[str],
    category_filter: Collection[str] | None,
) -> dict[str, dict[str, list[Entry]]]:
    cells: dict[str, dict[str, list[Entry]]] = {}
    for entry in entries:
        for category, sub in _placements_in_scope(entry, scope, category_filter):
            cells.setdefault(category, {}).setdefault(sub, []).append(entry)

    data: dict[str, dict[str, list[Entry]]] = {}
    for category in sorted(cells, key=bucket_order_key):
        present = cells[category]
        if tree.is_overridden(category):
            order = [sub for sub in tree.subcategory_order(category) if sub in present]
        else:
            order = sorted(present, key=bucket_order_key)
        data[category] = {sub: present[sub] for sub in order}
    return data


def project_card(
    entries: Sequence[Entry],
    classify: ClassifyOption,
    tree: CategoryTree,
    scope: Collection[str],
    category_filter: Collection[str] | None = None,
    maturity_order: Sequence[str] = DEFAULT_MATURITY_ORDER,
) -> CardProjection:
    """Build the card projection of admitted entries.

    Args:
        entries: Admitted entries, already sorted for display.
        classify: Classify dimension.
        tree: Category tree.
        scope: Catalog categories of the group.
        category_filter: Accepted categories, if a category filter is active.
        maturity_order: Lifecycle order of known maturity levels.

    Returns:
        Card projection with menu and distinct entry count.
    """
    match classify:
        case ClassifyOption.NONE:
            return CardProjection(
                classify=classify,
                data=list(entries),
                menu=None,
                count=_distinct(entries),
            )
        case ClassifyOption.CATEGORY:
            by_category = _by_category(entries, tree, scope, category_filter)
            placed = [e for subs in by_category.values() for items in subs.values() for e in items]
            return CardProjection(
                classify=classify,
                data=by_category,
                menu={category: list(subs) for category, subs in by_category.items()},
                count=_distinct(placed),
            )
        case ClassifyOption.MATURITY:
            lifecycle = list(maturity_order)
            buckets = _bucketed(entries, "maturity", lambda v: maturity_order_key(v, lifecycle))
        case ClassifyOption.TAG:
            buckets = _bucketed(entries, "tag", bucket_order_key)
        case _:
            raise ValueError(f"Unsupported classify option: {classify}")

    return CardProjection(
        classify=classify,
        data=buckets,
        menu={key: [] for key in buckets},
        count=_distinct(entries),
    )
