"""Pydantic models for the catalog payload.

Defines the category tree, groups and entries as delivered by the base
and full payload tiers. Models are frozen: an entry is created once from
the fetched payload and never changes for the session. Unknown fields are
ignored so newer payloads stay readable.
"""

from datetime import date, datetime
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from explorer.catalog.naming import normalize_name
from explorer.domain.exceptions import MalformedCatalogError


class CatalogModel(BaseModel):
    """Base model for payload records."""

    model_config = ConfigDict(frozen=True, extra="ignore")


class NamedNode(CatalogModel):
    """Tree node or group identified by a display name.

    The normalized name is derived from the display name when the payload
    omits it.
    """

    name: str
    normalized_name: str = ""

    @model_validator(mode="before")
    @classmethod
    def fill_normalized_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("normalized_name") and data.get("name"):
            return {**data, "normalized_name": normalize_name(data["name"])}
        return data


# ============================================================================
# Category Tree
# ============================================================================


class Subcategory(NamedNode):
    """Subcategory node of the category tree."""


class Category(NamedNode):
    """Top-level category with its declared subcategory order."""

    subcategories: tuple[Subcategory, ...] = ()

    @property
    def subcategory_names(self) -> list[str]:
        """Subcategory names in declared order."""
        return [s.name for s in self.subcategories]


class Group(NamedNode):
    """Named partition of the category tree."""

    categories: tuple[str, ...] = ()


# ============================================================================
# Entry Attributes
# ============================================================================


class Featured(CatalogModel):
    """Featured marker with an optional display-order hint."""

    label: str | None = None
    order: int | None = None


class AdditionalCategory(CatalogModel):
    """Extra (category, subcategory) placement of an entry."""

    category: str
    subcategory: str


class Organization(CatalogModel):
    """Organization and funding data (full tier only).

    Attributes:
        name: Organization name.
        country: Country of the headquarters.
        city: City of the headquarters.
        region: Region of the headquarters.
        categories: Industries the organization operates in.
        company_type: Organization type (e.g. "for_profit").
        funding: Total funding in USD.
    """

    name: str | None = None
    country: str | None = None
    city: str | None = None
    region: str | None = None
    categories: tuple[str, ...] = ()
    company_type: str | None = None
    funding: float | None = None


class Commit(CatalogModel):
    """Commit reference."""

    ts: datetime
    url: str | None = None


class Contributors(CatalogModel):
    """Contributor summary."""

    count: int = 0
    url: str | None = None


class RepositoryData(CatalogModel):
    """Repository license and activity metrics (full tier only)."""

    license: str | None = None
    stars: int = 0
    contributors: Contributors | None = None
    first_commit: Commit | None = None
    latest_commit: Commit | None = None
    description: str | None = None
    topics: tuple[str, ...] = ()


class Repository(CatalogModel):
    """Source repository of an entry."""

    url: str
    primary: bool = False
    github_data: RepositoryData | None = None


class ItemSummary(CatalogModel):
    """Curated summary fields."""

    tags: tuple[str, ...] = ()


# ============================================================================
# Entry
# ============================================================================


class Entry(CatalogModel):
    """One catalog item placed in a (category, subcategory) section.

    Only placement and identity are required; every other attribute is
    optional and absent in the base tier when it is expensive to ship.

    Attributes:
        id: Unique entry identifier.
        name: Display name.
        category: Primary category.
        subcategory: Primary subcategory.
        maturity: Lifecycle level, absent when not foundation-governed.
        tag: Technical advisory group.
        featured: Featured marker with display order.
        crunchbase_data: Organization data, joined from the full tier.
        repositories: Repositories with optional license and metrics.
    """

    id: str
    name: str
    category: str
    subcategory: str
    logo: str | None = None
    description: str | None = None
    homepage_url: str | None = None
    maturity: str | None = None
    tag: str | None = None
    oss: bool | None = None
    featured: Featured | None = None
    additional_categories: tuple[AdditionalCategory, ...] = ()
    crunchbase_url: str | None = None
    crunchbase_data: Organization | None = None
    repositories: tuple[Repository, ...] = ()
    specification: bool | None = None
    enduser: bool | None = None
    accepted_at: date | None = None
    joined_at: date | None = None
    summary: ItemSummary | None = None

    @property
    def placements(self) -> list[tuple[str, str]]:
        """Primary placement followed by additional ones, without repeats."""
        placements = [(self.category, self.subcategory)]
        for extra in self.additional_categories:
            placement = (extra.category, extra.subcategory)
            if placement not in placements:
                placements.append(placement)
        return placements

    @property
    def licenses(self) -> frozenset[str]:
        """Licenses declared by the entry repositories."""
        return frozenset(
            r.github_data.license
            for r in self.repositories
            if r.github_data is not None and r.github_data.license
        )

    @property
    def primary_repository(self) -> Repository | None:
        """Primary repository, if any."""
        for repo in self.repositories:
            if repo.primary:
                return repo
        return None

    @property
    def industries(self) -> frozenset[str]:
        """Industries of the organization behind the entry."""
        if self.crunchbase_data is None:
            return frozenset()
        return frozenset(c for c in self.crunchbase_data.categories if c)

    @property
    def extra_flags(self) -> frozenset[str]:
        """Boolean flags exposed as the "extra" filter."""
        flags = set()
        if self.specification:
            flags.add("specification")
        if self.enduser:
            flags.add("enduser")
        return frozenset(flags)

    @property
    def is_featured(self) -> bool:
        """Whether the entry carries a featured marker."""
        return self.featured is not None


# ============================================================================
# Payload
# ============================================================================


class CatalogPayload(CatalogModel):
    """Catalog payload of one tier.

    The full tier adds `crunchbase_data` (keyed by entry crunchbase url) and
    `github_data` (keyed by repository url), joined onto entries by the index.
    """

    foundation: str = ""
    categories: tuple[Category, ...]
    categories_overridden: tuple[str, ...] = ()
    groups: tuple[Group, ...] | None = None
    items: tuple[Entry, ...]
    crunchbase_data: dict[str, Organization] | None = None
    github_data: dict[str, RepositoryData] | None = None

    @classmethod
    def from_raw(cls, data: Any) -> Self:
        """Validate a decoded JSON payload.

        Args:
            data: Decoded JSON document.

        Returns:
            Validated payload.

        Raises:
            MalformedCatalogError: If required fields are missing or mistyped.
        """
        if not isinstance(data, dict):
            raise MalformedCatalogError(f"expected an object, got {type(data).__name__}")
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            errors = [
                {"loc": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
                for err in e.errors()
            ]
            raise MalformedCatalogError(
                f"{e.error_count()} validation error(s)", errors=errors
            ) from e

    def extended_entries(self) -> list[Entry]:
        """Entries with organization and repository data joined in.

        Returns:
            Entries, unchanged when no side data applies.
        """
        organizations = self.crunchbase_data or {}
        repositories = self.github_data or {}
        extended = []
        for entry in self.items:
            update: dict[str, Any] = {}
            if entry.crunchbase_url and entry.crunchbase_url in organizations:
                update["crunchbase_data"] = organizations[entry.crunchbase_url]
            if entry.repositories and repositories:
                update["repositories"] = tuple(
                    repo.model_copy(update={"github_data": repositories[repo.url]})
                    if repo.url in repositories
                    else repo
                    for repo in entry.repositories
                )
            extended.append(entry.model_copy(update=update) if update else entry)
        return extended
