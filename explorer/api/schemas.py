"""API schemas for the explorer service.

Pydantic models for response validation and serialization.
"""

from typing import Any

from pydantic import BaseModel, Field


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] | list[Any] = Field(
        default_factory=list, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


class DatasetInfo(BaseModel):
    """Catalog tier a response was computed from."""

    tier: str = Field(..., description="Catalog tier (base or full)")
    version: str = Field(..., description="Catalog index version")


# ============================================================================
# Group Schemas
# ============================================================================


class GroupSchema(BaseModel):
    """Named group of categories."""

    name: str
    normalized_name: str
    categories: list[str]


class GroupListResponse(BaseModel):
    """Groups declared by the catalog."""

    dataset: DatasetInfo
    groups: list[GroupSchema]
    total: int


# ============================================================================
# Filter Schemas
# ============================================================================


class FacetOptionSchema(BaseModel):
    """Selectable filter value."""

    value: str
    label: str


class NegativeOptionSchema(BaseModel):
    """Option selecting entries without the attribute."""

    value: str
    label: str


class AggregateOptionSchema(BaseModel):
    """Option standing for a whole value set."""

    value: str
    label: str
    expands_to: list[str]
    negative: NegativeOptionSchema


class FacetSectionSchema(BaseModel):
    """Filter section of one category."""

    category: str
    title: str
    options: list[FacetOptionSchema]
    aggregate: AggregateOptionSchema | None = None


class FiltersResponse(BaseModel):
    """Filter sections and view dimensions of a group."""

    dataset: DatasetInfo
    group: str
    sections: list[FacetSectionSchema]
    classify_options: list[str]
    sort_options: list[str]


# ============================================================================
# Explore Schemas
# ============================================================================


class ExploreStateSchema(BaseModel):
    """Effective explore state after fallbacks and stale-filter cleanup."""

    group: str
    all_groups: bool = Field(..., description="Whether the implicit all-groups selector is active")
    view_mode: str
    classify: str
    sort_by: str
    sort_direction: str
    filters: dict[str, list[str]]
    query: str = Field(..., description="Canonical query string of this state")


class GroupCountSchema(BaseModel):
    """Admitted entry count of one group."""

    group: str
    all_groups: bool
    count: int


class ExploreResponse(BaseModel):
    """Grid and card projections of the selected group."""

    dataset: DatasetInfo
    state: ExploreStateSchema
    num_items: list[GroupCountSchema]
    grid: dict[str, Any]
    card: dict[str, Any]


# ============================================================================
# Search Schemas
# ============================================================================


class SearchHitSchema(BaseModel):
    """Ranked search result."""

    id: str
    name: str
    score: float
    category: str
    subcategory: str
    maturity: str | None = None
    logo: str | None = None
    featured: bool = False


class SearchResponse(BaseModel):
    """Search results."""

    dataset: DatasetInfo
    query: str
    hits: list[SearchHitSchema]
    total: int


# ============================================================================
# Item Schemas
# ============================================================================


class ItemResponse(BaseModel):
    """Catalog entry detail."""

    dataset: DatasetInfo
    item: dict[str, Any]
