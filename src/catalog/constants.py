"""Constants for the catalog module."""

from pathlib import Path
from typing import Final


# Catalog shipped with the package
DEFAULT_CATALOG_PATH: Final[Path] = Path(__file__).parent / "data" / "life_values.yaml"

# Number of values in the reference catalog
DEFAULT_CATALOG_SIZE: Final[int] = 40

# Key the ranking snapshot is persisted under
DEFAULT_STORAGE_KEY: Final[str] = "life-values-sorting"

# Log component names
COMPONENT_CATALOG = "catalog"
COMPONENT_RANKING = "ranking"
COMPONENT_TABULAR = "tabular"
COMPONENT_NAVIGATION = "navigation"
COMPONENT_STORE = "store"
COMPONENT_SESSION = "session"
COMPONENT_CLI = "cli"
