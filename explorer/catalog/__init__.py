"""Catalog module - payload models, category tree, index and search."""

from explorer.catalog.index import CatalogIndex
from explorer.catalog.models import (
    CatalogPayload,
    Category,
    Entry,
    Group,
    Organization,
    Repository,
    RepositoryData,
    Subcategory,
)
from explorer.catalog.naming import anchor_id, normalize_name
from explorer.catalog.search import SearchHit, SearchIndex
from explorer.catalog.tree import CategoryTree

__all__ = [
    "CatalogIndex",
    "CatalogPayload",
    "Category",
    "CategoryTree",
    "Entry",
    "Group",
    "Organization",
    "Repository",
    "RepositoryData",
    "SearchHit",
    "SearchIndex",
    "Subcategory",
    "anchor_id",
    "normalize_name",
]
