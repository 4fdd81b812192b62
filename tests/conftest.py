"""Shared fixtures: a small landscape catalog in both tiers."""

import copy
from typing import Any

import pytest

from explorer.catalog.index import CatalogIndex
from explorer.domain.value_objects import Tier

GITHUB = "https://github.com"
CRUNCHBASE = "https://www.crunchbase.com/organization"


def _repo(name: str) -> list[dict[str, Any]]:
    return [{"url": f"{GITHUB}/{name}", "primary": True}]


BASE_PAYLOAD: dict[str, Any] = {
    "foundation": "CNCF",
    "categories": [
        {
            "name": "App Definition",
            "subcategories": [{"name": "Database"}, {"name": "Streaming"}],
        },
        {
            "name": "Orchestration",
            "subcategories": [{"name": "Service Mesh"}, {"name": "Scheduling"}],
        },
        {
            "name": "Members",
            "subcategories": [{"name": "Platinum"}],
        },
    ],
    "categories_overridden": ["Orchestration"],
    "groups": [
        {"name": "Projects", "categories": ["App Definition", "Orchestration"]},
        {"name": "Members", "categories": ["Members"]},
        {"name": "Ghost", "categories": ["Nowhere"]},
    ],
    "items": [
        {
            "id": "vitess",
            "name": "Vitess",
            "category": "App Definition",
            "subcategory": "Database",
            "maturity": "graduated",
            "tag": "app-delivery",
            "featured": {"order": 1},
            "crunchbase_url": f"{CRUNCHBASE}/planetscale",
            "repositories": _repo("vitessio/vitess"),
            "accepted_at": "2018-02-05",
            "summary": {"tags": ["sharding"]},
        },
        {
            "id": "nats",
            "name": "NATS",
            "category": "App Definition",
            "subcategory": "Streaming",
            "maturity": "incubating",
            "tag": "app-delivery",
            "additional_categories": [
                {"category": "Orchestration", "subcategory": "Service Mesh"}
            ],
            "repositories": _repo("nats-io/nats-server"),
            "accepted_at": "2018-03-15",
        },
        {
            "id": "kafka",
            "name": "Kafka",
            "category": "App Definition",
            "subcategory": "Streaming",
            "specification": True,
            "crunchbase_url": f"{CRUNCHBASE}/apache",
            "repositories": _repo("apache/kafka"),
        },
        {
            "id": "volcano",
            "name": "Volcano",
            "category": "Orchestration",
            "subcategory": "Scheduling",
            "maturity": "sandbox",
            "tag": "runtime",
            "repositories": _repo("volcano-sh/volcano"),
            "accepted_at": "2020-04-09",
        },
        {
            "id": "linkerd",
            "name": "Linkerd",
            "category": "Orchestration",
            "subcategory": "Service Mesh",
            "maturity": "graduated",
            "tag": "network",
            "featured": {"order": 2},
            "repositories": _repo("linkerd/linkerd2"),
            "accepted_at": "2017-01-23",
        },
        {
            "id": "old-mesh",
            "name": "Old Mesh",
            "category": "Orchestration",
            "subcategory": "Service Mesh",
            "maturity": "archived",
        },
        {
            "id": "acme",
            "name": "Acme",
            "category": "Members",
            "subcategory": "Platinum",
            "enduser": True,
            "crunchbase_url": f"{CRUNCHBASE}/acme",
            "joined_at": "2021-06-01",
        },
    ],
}

FULL_EXTRA: dict[str, Any] = {
    "crunchbase_data": {
        f"{CRUNCHBASE}/planetscale": {
            "name": "PlanetScale",
            "country": "United States",
            "categories": ["Database", "Software"],
            "company_type": "for_profit",
            "funding": 105000000,
        },
        f"{CRUNCHBASE}/apache": {
            "name": "Apache Software Foundation",
            "country": "United States",
            "categories": ["Open Source"],
            "company_type": "non_profit",
        },
        f"{CRUNCHBASE}/acme": {
            "name": "Acme",
            "country": "Germany",
            "categories": ["Retail"],
            "company_type": "for_profit",
            "funding": 5000000,
        },
    },
    "github_data": {
        f"{GITHUB}/vitessio/vitess": {
            "license": "Apache-2.0",
            "stars": 18000,
            "contributors": {"count": 600},
            "first_commit": {"ts": "2012-02-24T20:08:15Z"},
            "latest_commit": {"ts": "2024-05-01T10:00:00Z"},
            "description": "Database clustering system for horizontal scaling of MySQL",
            "topics": ["mysql", "sharding"],
        },
        f"{GITHUB}/nats-io/nats-server": {
            "license": "Apache-2.0",
            "stars": 15000,
            "contributors": {"count": 150},
            "first_commit": {"ts": "2012-10-29T16:50:38Z"},
            "latest_commit": {"ts": "2024-05-02T09:00:00Z"},
            "description": "High-performance server for NATS messaging",
            "topics": ["messaging", "pubsub"],
        },
        f"{GITHUB}/apache/kafka": {
            "license": "Apache-2.0",
            "stars": 27000,
            "contributors": {"count": 1100},
            "first_commit": {"ts": "2011-08-01T22:21:39Z"},
            "latest_commit": {"ts": "2024-04-30T08:00:00Z"},
            "description": "Distributed event streaming platform",
            "topics": ["streaming"],
        },
        f"{GITHUB}/volcano-sh/volcano": {
            "license": "Apache-2.0",
            "stars": 3800,
            "contributors": {"count": 250},
            "first_commit": {"ts": "2019-01-17T00:00:00Z"},
            "latest_commit": {"ts": "2024-04-01T00:00:00Z"},
            "description": "Batch system built on Kubernetes",
            "topics": ["batch", "scheduler"],
        },
        f"{GITHUB}/linkerd/linkerd2": {
            "license": "MIT",
            "stars": 10000,
            "contributors": {"count": 300},
            "first_commit": {"ts": "2017-12-05T00:00:00Z"},
            "latest_commit": {"ts": "2024-05-03T00:00:00Z"},
            "description": "Ultralight service mesh for Kubernetes",
            "topics": ["service-mesh"],
        },
    },
}


def make_base_payload() -> dict[str, Any]:
    """Fresh copy of the base tier payload."""
    return copy.deepcopy(BASE_PAYLOAD)


def make_full_payload() -> dict[str, Any]:
    """Fresh copy of the full tier payload."""
    return {**make_base_payload(), **copy.deepcopy(FULL_EXTRA)}


@pytest.fixture
def base_payload() -> dict[str, Any]:
    """Base tier payload."""
    return make_base_payload()


@pytest.fixture
def full_payload() -> dict[str, Any]:
    """Full tier payload."""
    return make_full_payload()


@pytest.fixture
def base_index(base_payload: dict[str, Any]) -> CatalogIndex:
    """Index built from the base tier."""
    return CatalogIndex.build(base_payload, tier=Tier.BASE)


@pytest.fixture
def full_index(full_payload: dict[str, Any]) -> CatalogIndex:
    """Index built from the full tier."""
    return CatalogIndex.build(full_payload, tier=Tier.FULL)


@pytest.fixture
def scenario_a_payload() -> dict[str, Any]:
    """Two categories; three incubating entries under A/x, two without maturity under B/z."""
    items = [
        {"id": f"a{i}", "name": f"Alpha {i}", "category": "A", "subcategory": "x", "maturity": "incubating"}
        for i in range(1, 4)
    ] + [
        {"id": f"b{i}", "name": f"Beta {i}", "category": "B", "subcategory": "z"}
        for i in range(1, 3)
    ]
    return {
        "foundation": "CNCF",
        "categories": [
            {"name": "A", "subcategories": [{"name": "x"}, {"name": "y"}]},
            {"name": "B", "subcategories": [{"name": "z"}]},
        ],
        "items": items,
    }


@pytest.fixture
def scenario_b_payload() -> dict[str, Any]:
    """Two entries sharing the Apache-2.0 license."""
    return {
        "foundation": "CNCF",
        "categories": [{"name": "A", "subcategories": [{"name": "x"}]}],
        "items": [
            {
                "id": "one",
                "name": "One",
                "category": "A",
                "subcategory": "x",
                "repositories": [{"url": f"{GITHUB}/org/one", "primary": True}],
            },
            {
                "id": "two",
                "name": "Two",
                "category": "A",
                "subcategory": "x",
                "repositories": [{"url": f"{GITHUB}/org/two", "primary": True}],
            },
        ],
        "github_data": {
            f"{GITHUB}/org/one": {"license": "Apache-2.0", "stars": 10},
            f"{GITHUB}/org/two": {"license": "Apache-2.0", "stars": 20},
        },
    }
