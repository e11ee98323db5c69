"""Shared Pydantic base models."""

from pydantic import BaseModel, ConfigDict


class StrictBaseModel(BaseModel):
    """Base model with strict, immutable defaults.

    Used for catalog configuration, entities and ranking state. Updates go
    through ``model_copy(update=...)`` so every mutation yields a new value.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")
