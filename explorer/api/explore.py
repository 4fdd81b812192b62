"""Explore API endpoints.

Read-only access to the catalog: groups, filter sections, explore
projections, free-text search and entry detail. Explore state travels in
the query string exactly as the explore view writes it, e.g.:

    GET /explore?group=projects&view-mode=card&classify=maturity&project=cncf
"""

from dataclasses import replace
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from explorer.api.schemas import (
    DatasetInfo,
    ErrorResponse,
    ExploreResponse,
    ExploreStateSchema,
    FiltersResponse,
    GroupCountSchema,
    GroupListResponse,
    GroupSchema,
    ItemResponse,
    SearchHitSchema,
    SearchResponse,
)
from explorer.domain.value_objects import EMPTY_FILTERS, AllGroups, ViewMode
from explorer.engine.codec import (
    FROM_GROUP_PARAM,
    FilterCodec,
    literal_filters,
    literal_view_mode,
)
from explorer.engine.loader import Dataset, StagedLoader

router = APIRouter(tags=["Explore"])

NOT_READY = {503: {"model": ErrorResponse}}


# ============================================================================
# Dependencies
# ============================================================================


def get_loader(request: Request) -> StagedLoader:
    """Get the staged loader of the application."""
    return request.app.state.loader


async def get_dataset(
    loader: Annotated[StagedLoader, Depends(get_loader)],
) -> Dataset:
    """Get the best dataset already loaded, loading the base tier if needed."""
    return await loader.dataset_for(EMPTY_FILTERS, ViewMode.GRID)


def dataset_info(dataset: Dataset) -> DatasetInfo:
    """Describe the tier a response was computed from."""
    return DatasetInfo(tier=dataset.tier.value, version=dataset.version)


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "/groups",
    response_model=GroupListResponse,
    responses=NOT_READY,
    summary="List groups",
    description="Get the named groups of the catalog with their categories.",
)
async def list_groups(
    dataset: Annotated[Dataset, Depends(get_dataset)],
) -> GroupListResponse:
    """List catalog groups.

    Returns:
        Groups in declared order.
    """
    groups = [
        GroupSchema(
            name=g.name,
            normalized_name=g.normalized_name,
            categories=list(g.categories),
        )
        for g in dataset.index.groups
    ]
    return GroupListResponse(dataset=dataset_info(dataset), groups=groups, total=len(groups))


@router.get(
    "/filters",
    response_model=FiltersResponse,
    responses=NOT_READY,
    summary="Get filters",
    description="Get the filter sections, classify and sort options of a group.",
)
async def get_filters(
    loader: Annotated[StagedLoader, Depends(get_loader)],
    group: Annotated[str | None, Query(description="Normalized group name")] = None,
) -> FiltersResponse:
    """Get facets of a group.

    Facet sections need organization and license data, so the full tier
    is loaded when possible.

    Args:
        loader: Staged loader.
        group: Group name; all groups when omitted or unknown.

    Returns:
        Filter sections and available view dimensions.
    """
    dataset = await loader.best_available()
    codec = FilterCodec(dataset.index)
    selector = codec.decode_group(group)
    facets = dataset.coordinator.facets_for(selector).to_dict()
    return FiltersResponse(dataset=dataset_info(dataset), **facets)


@router.get(
    "/explore",
    response_model=ExploreResponse,
    responses=NOT_READY,
    summary="Explore catalog",
    description=(
        "Get grid and card projections for the explore state encoded in the "
        "query string (group, view-mode, classify, sort-by, sort-direction and "
        "one parameter per filter category). Pass from-group when switching "
        "groups to drop filter values the new group does not recognize."
    ),
)
async def explore(
    request: Request,
    loader: Annotated[StagedLoader, Depends(get_loader)],
) -> ExploreResponse:
    """Answer an explore query.

    The tier is chosen from the parameters as written, before any
    aggregate is expanded, so a license or organization filter promotes to
    the full tier even while only the base tier is loaded. Filter values
    are taken as given and unknown ones match nothing; they are only
    cleaned when `from-group` names a different group.

    Args:
        request: Incoming request.
        loader: Staged loader.

    Returns:
        Projections of the selected group and per-group counts.
    """
    params = request.query_params.multi_items()

    dataset = await loader.dataset_for(literal_filters(params), literal_view_mode(params))
    codec = FilterCodec(dataset.index)
    state = codec.decode_state(params)

    coordinator = dataset.coordinator
    filters = state.filters
    from_group = request.query_params.get(FROM_GROUP_PARAM)
    if from_group is not None and codec.decode_group(from_group) != state.group:
        filters = coordinator.change_group(filters, state.group)

    result = coordinator.query_items(
        filters,
        state.group,
        state.classify,
        state.sort_by,
        state.sort_direction,
    )
    active = result.active

    effective = replace(
        state,
        classify=active.classify,
        sort_by=active.sort_by,
        filters=filters,
    )

    return ExploreResponse(
        dataset=dataset_info(dataset),
        state=ExploreStateSchema(
            group=str(effective.group),
            all_groups=isinstance(effective.group, AllGroups),
            view_mode=effective.view_mode.value,
            classify=effective.classify.value,
            sort_by=effective.sort_by.value,
            sort_direction=effective.sort_direction.value,
            filters=filters.to_dict(),
            query=codec.encode_state(effective),
        ),
        num_items=[
            GroupCountSchema(
                group=str(group),
                all_groups=isinstance(group, AllGroups),
                count=count,
            )
            for group, count in result.num_items.items()
        ],
        grid=active.grid.to_dict(),
        card=active.card.to_dict(),
    )


@router.get(
    "/search",
    response_model=SearchResponse,
    responses=NOT_READY,
    summary="Search entries",
    description="Free-text search over entry names, descriptions, topics and tags.",
)
async def search(
    dataset: Annotated[Dataset, Depends(get_dataset)],
    q: Annotated[str, Query(min_length=1, description="Search text")],
) -> SearchResponse:
    """Search entries.

    Args:
        dataset: Loaded dataset.
        q: Search text.

    Returns:
        Ranked hits.
    """
    hits = dataset.search.search_term(q)
    return SearchResponse(
        dataset=dataset_info(dataset),
        query=q,
        hits=[SearchHitSchema(**hit.to_dict()) for hit in hits],
        total=len(hits),
    )


@router.get(
    "/items/{item_id}",
    response_model=ItemResponse,
    responses={404: {"model": ErrorResponse}, **NOT_READY},
    summary="Get item",
    description="Get the full record of a catalog entry.",
)
async def get_item(
    item_id: str,
    loader: Annotated[StagedLoader, Depends(get_loader)],
) -> ItemResponse:
    """Get an entry by id.

    Args:
        item_id: Entry id.
        loader: Staged loader.

    Returns:
        Entry detail from the richest tier available.

    Raises:
        HTTPException: If the entry does not exist.
    """
    dataset = await loader.best_available()
    entry = dataset.index.get_entry(item_id)

    if entry is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error_code": "ITEM_NOT_FOUND",
                "message": f"Item not found: {item_id}",
            },
        )

    return ItemResponse(
        dataset=dataset_info(dataset),
        item=entry.model_dump(mode="json", exclude_none=True),
    )
