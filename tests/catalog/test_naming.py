"""Tests for name normalization."""

import pytest

from explorer.catalog.naming import anchor_id, normalize_name


class TestNormalizeName:
    """Tests for normalize_name."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("App Definition", "app-definition"),
            ("Streaming & Messaging", "streaming-messaging"),
            ("  Service Mesh ", "service-mesh"),
            ("C++ Tools", "c++-tools"),
            ("Observability/", "observability"),
            ("CNCF", "cncf"),
        ],
    )
    def test_normalize(self, text: str, expected: str) -> None:
        """Display names become lowercase hyphenated identifiers."""
        assert normalize_name(text) == expected


class TestAnchorId:
    """Tests for anchor_id."""

    def test_title_only(self) -> None:
        """A single key is normalized."""
        assert anchor_id("Graduated") == "graduated"

    def test_title_and_subtitle(self) -> None:
        """Two keys are joined with a double hyphen."""
        assert anchor_id("App Definition", "Database") == "app-definition--database"
