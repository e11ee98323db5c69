"""Unit tests for application settings and logging helpers."""

import logging
from pathlib import Path

import pytest

from src.catalog.constants import DEFAULT_CATALOG_PATH, DEFAULT_STORAGE_KEY
from src.observability.logging import level_from_name
from src.settings.app import AppSettings


class TestAppSettings:
    """Tests for AppSettings."""

    @pytest.mark.unit
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test defaults without environment overrides."""
        for name in ("STATE_PATH", "CATALOG_PATH", "CATALOG_SIZE", "STORAGE_KEY"):
            monkeypatch.delenv(f"VALUES_RANKING_{name}", raising=False)

        settings = AppSettings(_env_file=None)  # type: ignore[call-arg]
        assert settings.catalog_path == DEFAULT_CATALOG_PATH
        assert settings.catalog_size == 40
        assert settings.storage_key == DEFAULT_STORAGE_KEY
        assert settings.state_path == Path("state/values.sqlite")
        assert not settings.log_json

    @pytest.mark.unit
    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test prefixed environment variables override defaults."""
        monkeypatch.setenv("VALUES_RANKING_CATALOG_SIZE", "12")
        monkeypatch.setenv("VALUES_RANKING_STATE_PATH", "/tmp/other.sqlite")
        monkeypatch.setenv("VALUES_RANKING_LOG_JSON", "true")

        settings = AppSettings(_env_file=None)  # type: ignore[call-arg]
        assert settings.catalog_size == 12
        assert settings.state_path == Path("/tmp/other.sqlite")
        assert settings.log_json

    @pytest.mark.unit
    def test_invalid_size_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a catalog size below 1 is rejected."""
        monkeypatch.setenv("VALUES_RANKING_CATALOG_SIZE", "0")
        with pytest.raises(ValueError, match="catalog_size"):
            AppSettings(_env_file=None)  # type: ignore[call-arg]


class TestLevelFromName:
    """Tests for level_from_name."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("name", "level"),
        [("debug", logging.DEBUG), ("WARNING", logging.WARNING), ("error", logging.ERROR)],
    )
    def test_known_names(self, name: str, level: int) -> None:
        """Test standard level names."""
        assert level_from_name(name) == level

    @pytest.mark.unit
    def test_unknown_name_defaults_to_info(self) -> None:
        """Test unknown names fall back to INFO."""
        assert level_from_name("chatty") == logging.INFO
