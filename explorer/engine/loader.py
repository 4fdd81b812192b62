"""Staged catalog loading.

The base tier answers most grid queries. The full tier is fetched only
when the view needs it: the card view, or a filter on a dimension the
base tier does not carry. Promotion to the full tier is one-way. At most
one fetch per tier is in flight, and a failed tier is never fetched
again during the session.
"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any

import structlog

from explorer.catalog.index import CatalogIndex
from explorer.catalog.search import DEFAULT_MAX_RESULTS, SearchIndex
from explorer.domain.exceptions import (
    CatalogNotLoadedError,
    TierUnavailableError,
)
from explorer.domain.value_objects import (
    BASE_FILTER_CATEGORIES,
    ActiveFilters,
    Tier,
    ViewMode,
)
from explorer.engine.classifier import DEFAULT_MATURITY_ORDER
from explorer.engine.coordinator import QueryCoordinator
from explorer.engine.facets import FacetBuilder

logger = structlog.get_logger()

Fetcher = Callable[[Tier], Awaitable[dict[str, Any]]]


@dataclass(frozen=True)
class Dataset:
    """Everything built from one loaded tier.

    Attributes:
        tier: Tier the dataset was built from.
        index: Catalog index.
        search: Free-text search index.
        coordinator: Query coordinator over the index.
    """

    tier: Tier
    index: CatalogIndex
    search: SearchIndex
    coordinator: QueryCoordinator

    @property
    def version(self) -> str:
        """Version of the underlying index."""
        return self.index.version


def requires_full(filters: ActiveFilters, view_mode: ViewMode) -> bool:
    """Check whether a view needs the full tier.

    Args:
        filters: Active filters.
        view_mode: Current view mode.

    Returns:
        True for the card view or a filter outside the base dimensions.
    """
    if view_mode == ViewMode.CARD:
        return True
    return any(category not in BASE_FILTER_CATEGORIES for category in filters.categories)


class StagedLoader:
    """Loads catalog tiers on demand and keeps the best one available.

    Example usage:
        loader = StagedLoader(client.fetch)
        await loader.load(Tier.BASE)
        dataset = await loader.dataset_for(filters, ViewMode.CARD)
    """

    def __init__(
        self,
        fetch: Fetcher,
        *,
        search_max_results: int = DEFAULT_MAX_RESULTS,
        maturity_order: Sequence[str] = DEFAULT_MATURITY_ORDER,
        default_foundation: str = "",
    ) -> None:
        """Initialize loader.

        Args:
            fetch: Coroutine function returning the decoded payload of a tier.
            search_max_results: Maximum hits returned by search.
            maturity_order: Lifecycle order of maturity levels in the card view.
            default_foundation: Foundation name used when a payload has none.
        """
        self._fetch = fetch
        self.search_max_results = search_max_results
        self.maturity_order = tuple(maturity_order)
        self.default_foundation = default_foundation

        self._facets = FacetBuilder()
        self._datasets: dict[Tier, Dataset] = {}
        self._failures: dict[Tier, str] = {}
        self._inflight: dict[Tier, asyncio.Task[Dataset]] = {}
        self._generation = 0

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def promoted(self) -> bool:
        """Whether the full tier has been loaded."""
        return Tier.FULL in self._datasets

    @property
    def current(self) -> Dataset | None:
        """Best loaded dataset: full once promoted, base otherwise."""
        return self._datasets.get(Tier.FULL) or self._datasets.get(Tier.BASE)

    def is_loaded(self, tier: Tier) -> bool:
        """Check whether a tier has been loaded."""
        return tier in self._datasets

    def failure(self, tier: Tier) -> str | None:
        """Reason a tier failed to load, if it did."""
        return self._failures.get(tier)

    def status(self) -> dict[str, Any]:
        """Loading state of every tier, for health reporting."""
        tiers = {}
        for tier in Tier:
            if tier in self._datasets:
                state = "loaded"
            elif tier in self._failures:
                state = "failed"
            elif tier in self._inflight:
                state = "loading"
            else:
                state = "pending"
            tiers[tier.value] = {
                "state": state,
                "version": self._datasets[tier].version if tier in self._datasets else None,
                "error": self._failures.get(tier),
            }
        return {"promoted": self.promoted, "tiers": tiers}

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load(self, tier: Tier) -> Dataset:
        """Load a tier, sharing any fetch already in flight.

        Args:
            tier: Tier to load.

        Returns:
            Dataset of the tier.

        Raises:
            TierUnavailableError: If the tier failed now or earlier.
        """
        dataset = self._datasets.get(tier)
        if dataset is not None:
            return dataset

        reason = self._failures.get(tier)
        if reason is not None:
            raise TierUnavailableError(tier.value, reason)

        task = self._inflight.get(tier)
        if task is None:
            task = asyncio.create_task(self._load(tier, self._generation))
            self._inflight[tier] = task
        # a cancelled requester must not cancel the shared fetch
        return await asyncio.shield(task)

    async def _load(self, tier: Tier, generation: int) -> Dataset:
        try:
            payload = await self._fetch(tier)
            dataset = self._build(tier, payload)
        except Exception as e:
            # failures are terminal for the tier
            if generation != self._generation:
                return self._datasets[tier]
            reason = getattr(e, "message", str(e))
            self._failures[tier] = reason
            self._inflight.pop(tier, None)
            logger.error("Catalog tier failed to load", tier=tier.value, error=reason)
            raise TierUnavailableError(tier.value, reason) from e

        if generation != self._generation:
            # an overlay was installed meanwhile; it wins
            logger.info("Discarding superseded catalog tier", tier=tier.value)
            return self._datasets[tier]

        self._datasets[tier] = dataset
        self._inflight.pop(tier, None)
        logger.info("Catalog tier loaded", tier=tier.value, version=dataset.version)
        return dataset

    def _build(self, tier: Tier, payload: dict[str, Any]) -> Dataset:
        index = CatalogIndex.build(payload, tier=tier, default_foundation=self.default_foundation)
        return Dataset(
            tier=tier,
            index=index,
            search=SearchIndex(index.entries, max_results=self.search_max_results),
            coordinator=QueryCoordinator(
                index,
                facets=self._facets,
                maturity_order=self.maturity_order,
            ),
        )

    async def dataset_for(self, filters: ActiveFilters, view_mode: ViewMode) -> Dataset:
        """Get the dataset able to answer a view.

        Once promoted, the full tier answers everything. When the full tier
        is needed but unavailable, the base tier keeps answering.

        Args:
            filters: Active filters.
            view_mode: Current view mode.

        Returns:
            Dataset to query.

        Raises:
            CatalogNotLoadedError: If no tier can be loaded.
        """
        if self.promoted:
            return self._datasets[Tier.FULL]

        if requires_full(filters, view_mode):
            return await self.best_available()
        return await self._first_available((Tier.BASE, Tier.FULL))

    async def best_available(self) -> Dataset:
        """Get the full tier when it can be loaded, the base tier otherwise.

        Raises:
            CatalogNotLoadedError: If no tier can be loaded.
        """
        return await self._first_available((Tier.FULL, Tier.BASE))

    async def _first_available(self, order: tuple[Tier, ...]) -> Dataset:
        for tier in order:
            try:
                return await self.load(tier)
            except TierUnavailableError as e:
                logger.warning(
                    "Falling back to another catalog tier",
                    failed_tier=tier.value,
                    error=e.message,
                )
        raise CatalogNotLoadedError()

    def install_overlay(self, base_payload: dict[str, Any], full_payload: dict[str, Any]) -> None:
        """Replace both tiers with a different payload pair.

        Fetches in flight are superseded and earlier failures forgotten.

        Args:
            base_payload: Decoded base tier payload.
            full_payload: Decoded full tier payload.

        Raises:
            CatalogError: If either payload is invalid; state is unchanged.
        """
        base = self._build(Tier.BASE, base_payload)
        full = self._build(Tier.FULL, full_payload)

        self._generation += 1
        self._inflight.clear()
        self._failures.clear()
        self._facets.clear()
        self._datasets = {Tier.BASE: base, Tier.FULL: full}
        logger.info("Catalog overlay installed", base=base.version, full=full.version)
