"""Tests for the grid and card projections."""

import pytest

from explorer.catalog.index import CatalogIndex
from explorer.domain.value_objects import ClassifyOption, NamedGroup, SortOption
from explorer.engine.classifier import (
    maturity_order_key,
    project_card,
    project_grid,
)
from explorer.engine.sorting import sort_entries

PROJECTS = NamedGroup("projects")
SCOPE = ["App Definition", "Orchestration"]


@pytest.fixture
def sorted_projects(full_index: CatalogIndex) -> list:
    """Project entries in name order."""
    return sort_entries(full_index.entries_for_group(PROJECTS), SortOption.NAME)


class TestProjectGrid:
    """Tests for project_grid."""

    def test_shape_follows_tree_order(self, full_index: CatalogIndex) -> None:
        """Categories and subcategories keep declared order; entries keep input order."""
        grid = project_grid(full_index.entries_for_group(PROJECTS), full_index.tree, SCOPE)

        assert grid.shape() == {
            "App Definition": {"Database": ["vitess"], "Streaming": ["nats", "kafka"]},
            "Orchestration": {
                "Service Mesh": ["nats", "linkerd", "old-mesh"],
                "Scheduling": ["volcano"],
            },
        }
        assert grid.count == 6

    def test_leaf_counts(self, full_index: CatalogIndex) -> None:
        """Leaves count their entries and featured entries."""
        grid = project_grid(full_index.entries_for_group(PROJECTS), full_index.tree, SCOPE)

        leaf = grid.categories["Orchestration"]["Service Mesh"]
        assert leaf.entries_count == 3
        assert leaf.featured_count == 1

    def test_category_filter_limits_placements(self, full_index: CatalogIndex) -> None:
        """Only placements in accepted categories are shown."""
        grid = project_grid(
            full_index.entries_for_group(PROJECTS),
            full_index.tree,
            SCOPE,
            category_filter={"App Definition"},
        )

        assert list(grid.categories) == ["App Definition"]
        assert grid.count == 3

    def test_empty(self, full_index: CatalogIndex) -> None:
        """No entries, no cells."""
        grid = project_grid([], full_index.tree, SCOPE)

        assert grid.categories == {}
        assert grid.menu == {}
        assert grid.count == 0

    def test_to_dict(self, full_index: CatalogIndex) -> None:
        """Leaves serialize entry ids and counts."""
        grid = project_grid([full_index.get_entry("vitess")], full_index.tree, SCOPE)

        assert grid.to_dict() == {
            "categories": {
                "App Definition": {
                    "Database": {"entries": ["vitess"], "entries_count": 1, "featured_count": 1}
                }
            },
            "count": 1,
        }


class TestProjectCard:
    """Tests for project_card."""

    def test_none(self, full_index: CatalogIndex, sorted_projects: list) -> None:
        """No classification is a flat list without menu."""
        card = project_card(sorted_projects, ClassifyOption.NONE, full_index.tree, SCOPE)

        assert card.shape() == ["kafka", "linkerd", "nats", "old-mesh", "vitess", "volcano"]
        assert card.menu is None
        assert card.anchor is None
        assert card.count == 6

    @pytest.mark.parametrize(
        "classify", [ClassifyOption.CATEGORY, ClassifyOption.MATURITY, ClassifyOption.TAG]
    )
    def test_no_entries_classified(self, full_index: CatalogIndex, classify: ClassifyOption) -> None:
        """Zero entries give empty data, an empty menu and an explicit zero count."""
        card = project_card([], classify, full_index.tree, SCOPE)

        assert card.data == {}
        assert card.menu == {}
        assert card.count == 0
        assert card.default_target is None
        assert card.to_dict()["data"] == {}

    def test_no_entries_flat(self, full_index: CatalogIndex) -> None:
        """Zero entries without classification give an empty list."""
        card = project_card([], ClassifyOption.NONE, full_index.tree, SCOPE)

        assert card.data == []
        assert card.menu is None
        assert card.count == 0

    def test_category(self, full_index: CatalogIndex, sorted_projects: list) -> None:
        """Overridden categories keep declared subcategory order."""
        card = project_card(sorted_projects, ClassifyOption.CATEGORY, full_index.tree, SCOPE)

        assert card.shape() == {
            "App Definition": {"Database": ["vitess"], "Streaming": ["kafka", "nats"]},
            "Orchestration": {
                "Service Mesh": ["linkerd", "nats", "old-mesh"],
                "Scheduling": ["volcano"],
            },
        }
        assert card.menu == {
            "App Definition": ["Database", "Streaming"],
            "Orchestration": ["Service Mesh", "Scheduling"],
        }
        assert card.default_target == ("App Definition", "Database")
        assert card.anchor == "app-definition--database"
        assert card.count == 6

    def test_category_with_filter(self, full_index: CatalogIndex, sorted_projects: list) -> None:
        """The category filter narrows the sections."""
        admitted = [e for e in sorted_projects if e.id != "vitess" and e.id != "kafka"]

        card = project_card(
            admitted,
            ClassifyOption.CATEGORY,
            full_index.tree,
            SCOPE,
            category_filter={"Orchestration"},
        )

        assert list(card.menu) == ["Orchestration"]
        assert card.anchor == "orchestration--service-mesh"
        assert card.count == 4

    def test_maturity(self, full_index: CatalogIndex, sorted_projects: list) -> None:
        """Lifecycle order first, then archived and undefined."""
        card = project_card(sorted_projects, ClassifyOption.MATURITY, full_index.tree, SCOPE)

        assert card.shape() == {
            "graduated": ["linkerd", "vitess"],
            "incubating": ["nats"],
            "sandbox": ["volcano"],
            "archived": ["old-mesh"],
            "undefined": ["kafka"],
        }
        assert card.menu == {
            "graduated": [],
            "incubating": [],
            "sandbox": [],
            "archived": [],
            "undefined": [],
        }
        assert card.anchor == "graduated"

    def test_maturity_custom_lifecycle(self, full_index: CatalogIndex, sorted_projects: list) -> None:
        """The lifecycle order is configurable."""
        card = project_card(
            sorted_projects,
            ClassifyOption.MATURITY,
            full_index.tree,
            SCOPE,
            maturity_order=("sandbox", "incubating", "graduated"),
        )

        assert list(card.menu) == ["sandbox", "incubating", "graduated", "archived", "undefined"]

    def test_tag(self, full_index: CatalogIndex, sorted_projects: list) -> None:
        """Tags sort alphabetically with undefined last."""
        card = project_card(sorted_projects, ClassifyOption.TAG, full_index.tree, SCOPE)

        assert card.shape() == {
            "app-delivery": ["nats", "vitess"],
            "network": ["linkerd"],
            "runtime": ["volcano"],
            "undefined": ["kafka", "old-mesh"],
        }

    def test_to_dict(self, full_index: CatalogIndex, sorted_projects: list) -> None:
        """Cards serialize with their navigation target."""
        data = project_card(sorted_projects, ClassifyOption.TAG, full_index.tree, SCOPE).to_dict()

        assert data["classify"] == "tag"
        assert data["default_target"] == ["app-delivery", None]
        assert data["anchor"] == "app-delivery"
        assert data["count"] == 6


class TestMaturityOrderKey:
    """Tests for maturity_order_key."""

    def test_unknown_levels_between_lifecycle_and_archived(self) -> None:
        """Unknown levels sort alphabetically after known ones."""
        lifecycle = ["graduated", "incubating", "sandbox"]
        values = ["undefined", "emeritus", "archived", "sandbox", "alpha", "graduated"]

        ordered = sorted(values, key=lambda v: maturity_order_key(v, lifecycle))

        assert ordered == ["graduated", "sandbox", "alpha", "emeritus", "archived", "undefined"]
