"""Unit tests for catalog error hints."""

import pytest

from src.catalog.error_hints import (
    ERROR_HINTS,
    FIELD_HINTS,
    format_validation_error,
    get_error_hint,
)


class TestGetErrorHint:
    """Tests for get_error_hint."""

    @pytest.mark.unit
    def test_field_hint_wins(self) -> None:
        """Test that a field-specific hint is preferred."""
        assert get_error_hint("missing", "values.3.name") == FIELD_HINTS["name"]

    @pytest.mark.unit
    def test_error_type_hint(self) -> None:
        """Test fallback to the error type hint."""
        assert get_error_hint("catalog_size", "values") == ERROR_HINTS["catalog_size"]

    @pytest.mark.unit
    def test_unknown_error_type(self) -> None:
        """Test the generic hint for unknown types."""
        assert get_error_hint("something_new") == "Check the catalog file format."


class TestFormatValidationError:
    """Tests for format_validation_error."""

    @pytest.mark.unit
    def test_with_hint(self) -> None:
        """Test formatting with a hint line."""
        formatted = format_validation_error(
            location="values.0.id",
            message="String should match pattern",
            error_type="string_pattern_mismatch",
        )
        assert formatted.startswith("values.0.id: String should match pattern")
        assert f"Hint: {FIELD_HINTS['id']}" in formatted

    @pytest.mark.unit
    def test_without_hint(self) -> None:
        """Test formatting without a hint."""
        formatted = format_validation_error(
            location="values",
            message="too short",
            error_type="too_short",
            include_hint=False,
        )
        assert formatted == "values: too short"
