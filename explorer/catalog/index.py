"""Catalog index.

Builds every lookup structure the engine needs from a raw payload, once
per load. The index is never mutated after `build`; loading a different
payload (another tier, an overlay) builds a new index.
"""

import hashlib
from dataclasses import dataclass, field
from typing import Any

import structlog

from explorer.catalog.models import CatalogPayload, Entry, Group
from explorer.catalog.tree import CategoryTree
from explorer.domain.exceptions import DuplicateEntryError
from explorer.domain.value_objects import (
    ALL_GROUPS,
    AllGroups,
    GroupSelector,
    NamedGroup,
    Tier,
)

logger = structlog.get_logger()

DEFAULT_FOUNDATION_LABEL = "foundation"


@dataclass
class GroupValues:
    """Distinct attribute values observed in a group's entries.

    Attributes:
        licenses: Open source licenses declared by repositories.
        organizations: Organization names.
        countries: Organization countries.
        industries: Organization industries.
        org_types: Organization types.
    """

    licenses: set[str] = field(default_factory=set)
    organizations: set[str] = field(default_factory=set)
    countries: set[str] = field(default_factory=set)
    industries: set[str] = field(default_factory=set)
    org_types: set[str] = field(default_factory=set)

    def add(self, entry: Entry) -> None:
        """Accumulate the values of one entry."""
        self.licenses.update(entry.licenses)
        org = entry.crunchbase_data
        if org is None:
            return
        if org.name:
            self.organizations.add(org.name)
        if org.country:
            self.countries.add(org.country)
        if org.company_type:
            self.org_types.add(org.company_type)
        self.industries.update(entry.industries)


class CatalogIndex:
    """Read-only lookup structures over one catalog payload.

    Example usage:
        index = CatalogIndex.build(raw_payload, tier=Tier.FULL)
        entries = index.entries_for_group(NamedGroup("projects"))
        licenses = index.license_values_for_group(ALL_GROUPS)
    """

    def __init__(
        self,
        *,
        tier: Tier,
        foundation: str,
        tree: CategoryTree,
        groups: list[Group],
        entries: list[Entry],
        version: str,
    ) -> None:
        """Initialize index from validated parts.

        Prefer `CatalogIndex.build`, which validates the payload first.

        Args:
            tier: Payload tier the index was built from.
            foundation: Foundation display name.
            tree: Validated category tree.
            groups: Groups with at least one known category.
            entries: Validated entries, in payload order.
            version: Content hash identifying the payload.
        """
        self.tier = tier
        self.foundation = foundation
        self.tree = tree
        self.version = version

        self._entries = entries
        self._by_id: dict[str, Entry] = {}
        self._by_section: dict[tuple[str, str], list[Entry]] = {}
        self._groups: dict[str, Group] = {g.normalized_name: g for g in groups}
        self._group_entries: dict[GroupSelector, list[Entry]] = {}
        self._group_values: dict[GroupSelector, GroupValues] = {}
        self._maturity_values: set[str] = set()
        self._tag_values: set[str] = set()

        self._scan()

    @classmethod
    def build(
        cls,
        payload: CatalogPayload | dict[str, Any],
        tier: Tier = Tier.BASE,
        default_foundation: str = "",
    ) -> "CatalogIndex":
        """Validate a payload and build its index.

        Args:
            payload: Validated payload or decoded JSON document.
            tier: Tier the payload belongs to.
            default_foundation: Foundation name used when the payload has none.

        Returns:
            Catalog index.

        Raises:
            MalformedCatalogError: If the payload is structurally invalid.
            UnresolvedCategoryError: If an entry placement is not in the tree.
            DuplicateEntryError: If two entries share an id.
        """
        if not isinstance(payload, CatalogPayload):
            payload = CatalogPayload.from_raw(payload)

        tree = CategoryTree(payload.categories, payload.categories_overridden)
        entries = payload.extended_entries()

        seen: set[str] = set()
        for entry in entries:
            if entry.id in seen:
                raise DuplicateEntryError(entry.id)
            seen.add(entry.id)
            tree.validate_entry(entry)

        known = set(tree.category_names)
        groups = [g for g in payload.groups or () if known.intersection(g.categories)]

        version = hashlib.sha256(payload.model_dump_json().encode("utf-8")).hexdigest()[:16]

        index = cls(
            tier=tier,
            foundation=payload.foundation or default_foundation,
            tree=tree,
            groups=groups,
            entries=entries,
            version=f"{tier.value}-{version}",
        )
        logger.info(
            "Catalog index built",
            tier=tier.value,
            version=index.version,
            entries=len(entries),
            categories=len(tree.categories),
            groups=len(groups),
        )
        return index

    def _scan(self) -> None:
        """Single pass over entries filling every lookup."""
        selectors: list[GroupSelector] = [ALL_GROUPS, *self.group_selectors[1:]]
        for selector in selectors:
            self._group_entries[selector] = []
            self._group_values[selector] = GroupValues()

        categories_by_group = {
            NamedGroup(name): set(group.categories) for name, group in self._groups.items()
        }

        for entry in self._entries:
            self._by_id[entry.id] = entry
            for placement in entry.placements:
                self._by_section.setdefault(placement, []).append(entry)

            if entry.maturity:
                self._maturity_values.add(entry.maturity)
            if entry.tag:
                self._tag_values.add(entry.tag)

            self._group_entries[ALL_GROUPS].append(entry)
            self._group_values[ALL_GROUPS].add(entry)

            entry_categories = {category for category, _ in entry.placements}
            for selector, group_categories in categories_by_group.items():
                if entry_categories & group_categories:
                    self._group_entries[selector].append(entry)
                    self._group_values[selector].add(entry)

    # ------------------------------------------------------------------
    # Groups
    # ------------------------------------------------------------------

    @property
    def groups(self) -> list[Group]:
        """Named groups with at least one known category, in payload order."""
        return list(self._groups.values())

    @property
    def group_selectors(self) -> list[GroupSelector]:
        """The implicit all-groups selector followed by named groups."""
        return [ALL_GROUPS, *(NamedGroup(name) for name in self._groups)]

    def has_group(self, group: GroupSelector) -> bool:
        """Check whether a selector names a group of this catalog."""
        if isinstance(group, AllGroups):
            return True
        return group.name in self._groups

    def get_group(self, group: GroupSelector) -> Group | None:
        """Get the declared group for a selector (None for all groups)."""
        if isinstance(group, NamedGroup):
            return self._groups.get(group.name)
        return None

    def categories_for_group(self, group: GroupSelector) -> list[str]:
        """Categories of a group in declared tree order.

        Args:
            group: Group selector.

        Returns:
            Category names; every category for all groups, none for an
            unknown group.
        """
        if isinstance(group, AllGroups):
            return self.tree.category_names
        declared = self._groups.get(group.name)
        if declared is None:
            return []
        members = set(declared.categories)
        return [name for name in self.tree.category_names if name in members]

    def category_in_group(self, category: str, group: GroupSelector) -> bool:
        """Check whether a category belongs to a group."""
        if isinstance(group, AllGroups):
            return self.tree.get(category) is not None
        declared = self._groups.get(group.name)
        return declared is not None and category in declared.categories

    # ------------------------------------------------------------------
    # Entries
    # ------------------------------------------------------------------

    @property
    def entries(self) -> list[Entry]:
        """All entries in payload order."""
        return list(self._entries)

    def entries_for_group(self, group: GroupSelector) -> list[Entry]:
        """Flat entry list of a group.

        Args:
            group: Group selector.

        Returns:
            Entries placed in any category of the group, everything for
            all groups, and an empty list for an unknown group.
        """
        return list(self._group_entries.get(group, ()))

    def get_entry(self, entry_id: str) -> Entry | None:
        """Get entry by id."""
        return self._by_id.get(entry_id)

    def entries_in_section(self, category: str, subcategory: str) -> list[Entry]:
        """Entries placed in a (category, subcategory) node."""
        return list(self._by_section.get((category, subcategory), ()))

    # ------------------------------------------------------------------
    # Attribute values
    # ------------------------------------------------------------------

    @property
    def foundation_label(self) -> str:
        """Normalized foundation name used as the maturity aggregate value."""
        label = self.foundation.lower().replace(" ", "")
        return label or DEFAULT_FOUNDATION_LABEL

    def all_maturity_values(self) -> list[str]:
        """Every maturity value in the catalog; the foundation aggregate."""
        return sorted(self._maturity_values)

    def tag_values(self) -> list[str]:
        """Every tag value in the catalog."""
        return sorted(self._tag_values)

    def license_values_for_group(self, group: GroupSelector) -> list[str]:
        """Open source licenses observed in a group; the license aggregate."""
        return self._sorted_values(group, "licenses")

    def organization_values_for_group(self, group: GroupSelector) -> list[str]:
        """Organization names observed in a group."""
        return self._sorted_values(group, "organizations")

    def country_values_for_group(self, group: GroupSelector) -> list[str]:
        """Organization countries observed in a group."""
        return self._sorted_values(group, "countries")

    def industry_values_for_group(self, group: GroupSelector) -> list[str]:
        """Organization industries observed in a group."""
        return self._sorted_values(group, "industries")

    def org_type_values_for_group(self, group: GroupSelector) -> list[str]:
        """Organization types observed in a group."""
        return self._sorted_values(group, "org_types")

    def _sorted_values(self, group: GroupSelector, attribute: str) -> list[str]:
        values = self._group_values.get(group)
        if values is None:
            return []
        return sorted(getattr(values, attribute))

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<CatalogIndex(tier={self.tier.value}, version={self.version}, "
            f"entries={len(self._entries)})>"
        )
