"""Tests for application settings."""

import pytest

from explorer.infrastructure.config import Settings


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Defaults apply without environment overrides."""
        monkeypatch.delenv("EXPLORER_SEARCH_MAX_RESULTS", raising=False)

        settings = Settings(_env_file=None)

        assert settings.search_max_results == 30
        assert settings.maturity_order == ["graduated", "incubating", "sandbox"]
        assert settings.base_data_source == "data/base.json"

    def test_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Environment variables prefixed with EXPLORER_ override defaults."""
        monkeypatch.setenv("EXPLORER_SEARCH_MAX_RESULTS", "5")
        monkeypatch.setenv("EXPLORER_FULL_DATA_SOURCE", "https://example.org/full.json")
        monkeypatch.setenv("EXPLORER_MATURITY_ORDER", '["incubating", "graduated"]')

        settings = Settings(_env_file=None)

        assert settings.search_max_results == 5
        assert settings.full_data_source == "https://example.org/full.json"
        assert settings.maturity_order == ["incubating", "graduated"]

    def test_unprefixed_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Variables without the prefix do not apply."""
        monkeypatch.setenv("SEARCH_MAX_RESULTS", "1")
        monkeypatch.delenv("EXPLORER_SEARCH_MAX_RESULTS", raising=False)

        assert Settings(_env_file=None).search_max_results == 30
