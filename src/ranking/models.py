"""Data models for the ranking engine."""

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Annotated

from pydantic import Field, model_validator

from src.catalog.schemas import CatalogConfig
from src.data_model import StrictBaseModel


class ValueEntity(StrictBaseModel):
    """One rankable value.

    Identity (``id``, ``name``, ``description``) never changes; only
    ``position`` moves between None (unranked) and 1..K.
    """

    id: Annotated[str, Field(min_length=1, description="Stable value identifier")]
    name: Annotated[str, Field(min_length=1, description="Display name")]
    description: str | None = Field(default=None, description="Optional text")
    position: int | None = Field(
        default=None, ge=1, description="1-based rank, None when unranked"
    )

    @property
    def is_ranked(self) -> bool:
        """Whether the value currently has a position."""
        return self.position is not None


class RankingState(StrictBaseModel):
    """Full set of values with their positions.

    This is the single source of truth for a ranking. It is immutable:
    engine operations take a state and return a new one.
    """

    values: tuple[ValueEntity, ...]
    last_updated: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @model_validator(mode="after")
    def validate_unique_ids(self) -> "RankingState":
        """Ensure every value appears once."""
        ids = [value.id for value in self.values]
        if len(ids) != len(set(ids)):
            msg = "Ranking state contains duplicate value IDs"
            raise ValueError(msg)
        return self

    @classmethod
    def from_catalog(cls, catalog: CatalogConfig) -> "RankingState":
        """Build the default (all unranked) state for a catalog."""
        return cls(
            values=tuple(
                ValueEntity(
                    id=entry.id,
                    name=entry.name,
                    description=entry.description,
                    position=entry.position,
                )
                for entry in catalog.values
            )
        )

    @property
    def ids(self) -> list[str]:
        """Value IDs in catalog order."""
        return [value.id for value in self.values]

    def get(self, value_id: str) -> ValueEntity | None:
        """Look up a value by ID."""
        for value in self.values:
            if value.id == value_id:
                return value
        return None

    def with_positions(self, positions: Mapping[str, int | None]) -> "RankingState":
        """Return a copy with the given positions applied.

        Args:
            positions: New position per value ID; IDs not present keep
                their current position.

        Returns:
            New state stamped with the current time.
        """
        return RankingState(
            values=tuple(
                value.model_copy(update={"position": positions[value.id]})
                if value.id in positions
                else value
                for value in self.values
            ),
            last_updated=datetime.now(UTC),
        )
