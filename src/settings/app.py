"""Application settings powered by Pydantic BaseSettings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.catalog.constants import (
    DEFAULT_CATALOG_PATH,
    DEFAULT_CATALOG_SIZE,
    DEFAULT_STORAGE_KEY,
)


class AppSettings(BaseSettings):
    """Centralized environment configuration.

    Every field can be overridden with a ``VALUES_RANKING_`` prefixed
    environment variable or a ``.env`` file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_prefix="VALUES_RANKING_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    state_path: Path = Field(
        default=Path("state/values.sqlite"),
        description="SQLite database holding the persisted ranking snapshot",
    )
    catalog_path: Path = Field(
        default=DEFAULT_CATALOG_PATH,
        description="YAML file with the catalog of values",
    )
    catalog_size: int = Field(
        default=DEFAULT_CATALOG_SIZE,
        ge=1,
        description="Exact number of entries the catalog must contain",
    )
    storage_key: str = Field(
        default=DEFAULT_STORAGE_KEY,
        min_length=1,
        description="Key the snapshot is stored under",
    )
    export_dir: Path = Field(
        default=Path(),
        description="Directory CSV exports are written to by default",
    )
    log_json: bool = Field(default=False, description="Emit JSON log lines")
    log_level: str = Field(default="warning", description="Minimum log level")


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
