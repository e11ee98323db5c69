"""Catalog configuration schema."""

from typing import Annotated

from pydantic import Field, field_validator, model_validator

from src.data_model import StrictBaseModel


def normalize_name(name: str) -> str:
    """Normalize a value name for case-insensitive comparison."""
    return name.strip().casefold()


class CatalogEntry(StrictBaseModel):
    """Configuration for a single catalog value.

    Attributes:
        id: Stable, unique identifier.
        name: Display name, unique ignoring case.
        description: Optional explanatory text.
        position: Default position; catalog entries always start unranked.
    """

    id: Annotated[str, Field(min_length=1, max_length=100, pattern=r"^[a-z0-9_-]+$")]
    name: Annotated[str, Field(min_length=1, max_length=200)]
    description: str | None = None
    position: None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        """Strip surrounding whitespace and reject blank names."""
        stripped = value.strip()
        if not stripped:
            msg = "Name must not be blank"
            raise ValueError(msg)
        return stripped


class CatalogConfig(StrictBaseModel):
    """Root configuration for the values catalog file.

    Attributes:
        version: Schema version.
        values: Ordered catalog entries.
    """

    version: Annotated[str, Field(pattern=r"^\d+\.\d+$")] = "1.0"
    values: Annotated[list[CatalogEntry], Field(min_length=1)]

    @model_validator(mode="after")
    def validate_unique_ids(self) -> "CatalogConfig":
        """Ensure all entry IDs are unique."""
        ids = [entry.id for entry in self.values]
        duplicates = {id_ for id_ in ids if ids.count(id_) > 1}
        if duplicates:
            msg = f"Duplicate value IDs found: {sorted(duplicates)}"
            raise ValueError(msg)
        return self

    @model_validator(mode="after")
    def validate_unique_names(self) -> "CatalogConfig":
        """Ensure names are unique under case-insensitive comparison."""
        seen: dict[str, str] = {}
        clashes: list[str] = []
        for entry in self.values:
            key = normalize_name(entry.name)
            if key in seen:
                clashes.append(f"{seen[key]!r}/{entry.name!r}")
            else:
                seen[key] = entry.name
        if clashes:
            msg = f"Duplicate value names (ignoring case): {', '.join(clashes)}"
            raise ValueError(msg)
        return self

    @property
    def ids(self) -> list[str]:
        """Entry IDs in catalog order."""
        return [entry.id for entry in self.values]

    def get(self, value_id: str) -> CatalogEntry | None:
        """Look up an entry by ID."""
        for entry in self.values:
            if entry.id == value_id:
                return entry
        return None
