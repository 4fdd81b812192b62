"""Category tree.

The catalog is a two-level hierarchy of categories and subcategories with
a declared subcategory order. Categories listed as "overridden" keep that
declared order everywhere; other categories are free to sort their
subcategories alphabetically in the card view.

Tree format example:
    App Definition and Development
        Database
        Streaming & Messaging
    Orchestration & Management
        Scheduling & Orchestration
"""

from collections.abc import Iterable

from explorer.catalog.models import Category, Entry
from explorer.domain.exceptions import MalformedCatalogError, UnresolvedCategoryError


class CategoryTree:
    """Validated category/subcategory hierarchy.

    Example usage:
        tree = CategoryTree(payload.categories, payload.categories_overridden)
        tree.validate_entry(entry)
        order = tree.subcategory_order("Provisioning")
    """

    def __init__(
        self,
        categories: Iterable[Category],
        overridden: Iterable[str] = (),
    ) -> None:
        """Initialize tree and check node names are unique.

        Args:
            categories: Categories in declared order.
            overridden: Categories whose declared subcategory order is binding.

        Raises:
            MalformedCatalogError: If a category or subcategory is declared twice.
        """
        self._categories: dict[str, Category] = {}
        self._sections: set[tuple[str, str]] = set()

        for category in categories:
            if category.name in self._categories:
                raise MalformedCatalogError(f"category '{category.name}' declared twice")
            self._categories[category.name] = category
            for subcategory in category.subcategories:
                section = (category.name, subcategory.name)
                if section in self._sections:
                    raise MalformedCatalogError(
                        f"subcategory '{subcategory.name}' declared twice in '{category.name}'"
                    )
                self._sections.add(section)

        self._overridden = frozenset(overridden)

    @property
    def categories(self) -> list[Category]:
        """Categories in declared order."""
        return list(self._categories.values())

    @property
    def category_names(self) -> list[str]:
        """Category names in declared order."""
        return list(self._categories)

    def get(self, name: str) -> Category | None:
        """Get category by name.

        Args:
            name: Category name.

        Returns:
            Category if found, None otherwise.
        """
        return self._categories.get(name)

    def has_section(self, category: str, subcategory: str) -> bool:
        """Check whether a (category, subcategory) node exists."""
        return (category, subcategory) in self._sections

    def is_overridden(self, category: str) -> bool:
        """Check whether a category's declared subcategory order is binding."""
        return category in self._overridden

    def subcategory_order(self, category: str) -> list[str]:
        """Get declared subcategory order of a category.

        Args:
            category: Category name.

        Returns:
            Subcategory names, empty for an unknown category.
        """
        node = self._categories.get(category)
        return node.subcategory_names if node else []

    def validate_entry(self, entry: Entry) -> None:
        """Ensure every placement of an entry resolves to a tree node.

        Args:
            entry: Entry to check.

        Raises:
            UnresolvedCategoryError: If a placement is not in the tree.
        """
        for category, subcategory in entry.placements:
            if not self.has_section(category, subcategory):
                raise UnresolvedCategoryError(entry.id, category, subcategory)
