"""Values catalog: the fixed, ordered set of rankable values.

The catalog is loaded once at startup from YAML, validated with pydantic,
and never mutated afterwards. It supplies the canonical reset state.
"""

from src.catalog.loader import (
    CatalogError,
    CatalogLoader,
    CatalogValidationError,
    load_catalog,
)
from src.catalog.schemas import CatalogConfig, CatalogEntry, normalize_name
from src.catalog.state_machine import CatalogState, CatalogStateError, CatalogStateMachine


__all__ = [
    "CatalogConfig",
    "CatalogEntry",
    "CatalogError",
    "CatalogLoader",
    "CatalogState",
    "CatalogStateError",
    "CatalogStateMachine",
    "CatalogValidationError",
    "load_catalog",
    "normalize_name",
]
