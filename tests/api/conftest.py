"""Shared fixtures for API tests."""

from typing import Any
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from explorer.domain.value_objects import Tier
from explorer.engine.loader import StagedLoader
from explorer.infrastructure.catalog_client import CatalogFetchError
from explorer.main import create_app


@pytest.fixture
def loader(base_payload: dict[str, Any], full_payload: dict[str, Any]) -> StagedLoader:
    """Loader with both tiers installed."""
    loader = StagedLoader(AsyncMock())
    loader.install_overlay(base_payload, full_payload)
    return loader


@pytest.fixture
def client(loader: StagedLoader) -> TestClient:
    """Create test client over the sample catalog."""
    return TestClient(create_app(loader))


@pytest.fixture
def base_only_client(base_payload: dict[str, Any]) -> TestClient:
    """Create test client whose full tier cannot be fetched."""

    async def fetch(tier: Tier) -> dict[str, Any]:
        if tier == Tier.FULL:
            raise CatalogFetchError("full.json", "Read failed")
        return base_payload

    return TestClient(create_app(StagedLoader(fetch)))


@pytest.fixture
def unloaded_client() -> TestClient:
    """Create test client whose catalog cannot be fetched at all."""
    fetch = AsyncMock(side_effect=CatalogFetchError("base.json", "Read failed"))
    return TestClient(create_app(StagedLoader(fetch)))


@pytest.fixture
def staged_client(base_payload: dict[str, Any], full_payload: dict[str, Any]) -> TestClient:
    """Create test client that fetches each tier on demand."""
    payloads = {Tier.BASE: base_payload, Tier.FULL: full_payload}

    async def fetch(tier: Tier) -> dict[str, Any]:
        return payloads[tier]

    return TestClient(create_app(StagedLoader(fetch)))
