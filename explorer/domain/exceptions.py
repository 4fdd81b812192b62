"""Domain exceptions.

All domain-level errors raised while building or querying a catalog.
Stale user state (unknown filter values, unsupported classify options)
is never an error and has no exception here.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the application layer.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Catalog Errors
# ============================================================================


class CatalogError(DomainError):
    """Base class for catalog load errors.

    Raised once at load time; no index is built from a payload that
    produced one of these.
    """

    pass


class MalformedCatalogError(CatalogError):
    """Raised when the payload is structurally invalid."""

    def __init__(self, reason: str, errors: list[dict[str, Any]] | None = None) -> None:
        """Initialize malformed catalog error.

        Args:
            reason: Short description of what is wrong.
            errors: Optional list of field-level validation errors.
        """
        super().__init__(
            f"Malformed catalog payload: {reason}",
            details={"reason": reason, "errors": errors or []},
        )


class UnresolvedCategoryError(CatalogError):
    """Raised when an entry references a category or subcategory not in the tree."""

    def __init__(self, entry_id: str, category: str, subcategory: str) -> None:
        """Initialize unresolved category error.

        Args:
            entry_id: ID of the offending entry.
            category: Category referenced by the entry.
            subcategory: Subcategory referenced by the entry.
        """
        super().__init__(
            f"Entry {entry_id} references unknown section '{category} / {subcategory}'",
            details={
                "entry_id": entry_id,
                "category": category,
                "subcategory": subcategory,
            },
        )


class DuplicateEntryError(CatalogError):
    """Raised when two entries share the same id."""

    def __init__(self, entry_id: str) -> None:
        """Initialize duplicate entry error.

        Args:
            entry_id: The repeated entry id.
        """
        super().__init__(
            f"Entry id '{entry_id}' appears more than once",
            details={"entry_id": entry_id},
        )


# ============================================================================
# Loading Errors
# ============================================================================


class LoadingError(DomainError):
    """Base class for staged loading errors."""

    pass


class CatalogNotLoadedError(LoadingError):
    """Raised when a query arrives before any catalog tier is available."""

    def __init__(self) -> None:
        """Initialize catalog not loaded error."""
        super().__init__("No catalog tier has been loaded yet")


class TierUnavailableError(LoadingError):
    """Raised when a tier previously failed to load.

    Tier failures are terminal for the session; the tier is never
    fetched again.
    """

    def __init__(self, tier: str, reason: str) -> None:
        """Initialize tier unavailable error.

        Args:
            tier: Name of the failed tier.
            reason: Message of the original failure.
        """
        super().__init__(
            f"Catalog tier '{tier}' is unavailable: {reason}",
            details={"tier": tier, "reason": reason},
        )
