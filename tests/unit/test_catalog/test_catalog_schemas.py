"""Unit tests for catalog schemas."""

import pytest
from pydantic import ValidationError

from src.catalog.schemas import CatalogConfig, CatalogEntry, normalize_name


class TestNormalizeName:
    """Tests for normalize_name."""

    @pytest.mark.unit
    def test_case_and_whitespace_ignored(self) -> None:
        """Test that case and surrounding whitespace do not matter."""
        assert normalize_name("  Inner Peace ") == normalize_name("inner peace")

    @pytest.mark.unit
    def test_inner_whitespace_kept(self) -> None:
        """Test that inner spaces still distinguish names."""
        assert normalize_name("Inner Peace") != normalize_name("InnerPeace")


class TestCatalogEntry:
    """Tests for CatalogEntry."""

    @pytest.mark.unit
    def test_valid_entry(self) -> None:
        """Test a minimal valid entry."""
        entry = CatalogEntry(id="family", name="Family")
        assert entry.description is None
        assert entry.position is None

    @pytest.mark.unit
    def test_name_is_stripped(self) -> None:
        """Test that names are stripped."""
        entry = CatalogEntry(id="family", name="  Family ")
        assert entry.name == "Family"

    @pytest.mark.unit
    def test_blank_name_rejected(self) -> None:
        """Test that whitespace-only names are rejected."""
        with pytest.raises(ValidationError):
            CatalogEntry(id="family", name="   ")

    @pytest.mark.unit
    def test_id_pattern_enforced(self) -> None:
        """Test that IDs must be lowercase slugs."""
        with pytest.raises(ValidationError):
            CatalogEntry(id="Family Value", name="Family")

    @pytest.mark.unit
    def test_preset_position_rejected(self) -> None:
        """Test that catalog entries cannot carry a position."""
        with pytest.raises(ValidationError):
            CatalogEntry(id="family", name="Family", position=1)

    @pytest.mark.unit
    def test_extra_fields_rejected(self) -> None:
        """Test that unknown fields are rejected."""
        with pytest.raises(ValidationError):
            CatalogEntry(id="family", name="Family", weight=3)

    @pytest.mark.unit
    def test_entry_is_immutable(self) -> None:
        """Test that entries are frozen."""
        entry = CatalogEntry(id="family", name="Family")
        with pytest.raises(ValidationError):
            entry.name = "Kin"  # type: ignore[misc]


class TestCatalogConfig:
    """Tests for CatalogConfig."""

    @pytest.mark.unit
    def test_valid_catalog(self) -> None:
        """Test a valid catalog keeps entry order."""
        catalog = CatalogConfig(
            values=[
                CatalogEntry(id="b", name="B"),
                CatalogEntry(id="a", name="A"),
            ]
        )
        assert catalog.ids == ["b", "a"]
        assert catalog.version == "1.0"

    @pytest.mark.unit
    def test_empty_catalog_rejected(self) -> None:
        """Test that a catalog needs at least one value."""
        with pytest.raises(ValidationError):
            CatalogConfig(values=[])

    @pytest.mark.unit
    def test_duplicate_ids_rejected(self) -> None:
        """Test that duplicate IDs are rejected."""
        with pytest.raises(ValidationError, match="Duplicate value IDs"):
            CatalogConfig(
                values=[
                    CatalogEntry(id="a", name="A"),
                    CatalogEntry(id="a", name="Other"),
                ]
            )

    @pytest.mark.unit
    def test_names_clashing_by_case_rejected(self) -> None:
        """Test that names equal ignoring case are rejected."""
        with pytest.raises(ValidationError, match="ignoring case"):
            CatalogConfig(
                values=[
                    CatalogEntry(id="a", name="Family"),
                    CatalogEntry(id="b", name="FAMILY"),
                ]
            )

    @pytest.mark.unit
    def test_get_by_id(self) -> None:
        """Test entry lookup by ID."""
        catalog = CatalogConfig(values=[CatalogEntry(id="a", name="A")])
        entry = catalog.get("a")
        assert entry is not None
        assert entry.name == "A"
        assert catalog.get("missing") is None
