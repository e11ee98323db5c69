"""Catalog loader with validation and state machine."""

import hashlib
import time
from pathlib import Path

import structlog
import yaml
from pydantic import ValidationError

from src.catalog.constants import (
    COMPONENT_CATALOG,
    DEFAULT_CATALOG_PATH,
    DEFAULT_CATALOG_SIZE,
)
from src.catalog.schemas import CatalogConfig
from src.catalog.state_machine import CatalogState, CatalogStateMachine


logger = structlog.get_logger()


class CatalogError(Exception):
    """Base exception for catalog loading errors."""


class CatalogValidationError(CatalogError):
    """Raised when the catalog file cannot be loaded or validated."""

    def __init__(self, errors: list[dict[str, str]], file_path: str) -> None:
        """Initialize the error.

        Args:
            errors: List of validation error details.
            file_path: Path to the file that failed validation.
        """
        self.errors = errors
        self.file_path = file_path
        super().__init__(f"Validation failed for {file_path}: {len(errors)} errors")


class CatalogLoader:
    """Loads and validates the values catalog.

    Implements a state machine for catalog loading:
    UNLOADED -> LOADING -> VALIDATED -> READY

    The catalog is immutable once READY.
    """

    def __init__(self, expected_size: int | None = DEFAULT_CATALOG_SIZE) -> None:
        """Initialize the loader.

        Args:
            expected_size: Exact number of entries required, or None to
                accept any non-empty catalog.
        """
        self._expected_size = expected_size
        self._state_machine = CatalogStateMachine()
        self._file_checksum: str | None = None
        self._validation_errors: list[dict[str, str]] = []
        self._validation_duration_ms: float = 0

    @property
    def state(self) -> CatalogState:
        """Get the current loader state."""
        return self._state_machine.state

    @property
    def failed_stage(self) -> CatalogState | None:
        """Get the state the last load failed in."""
        return self._state_machine.failed_stage

    @property
    def file_checksum(self) -> str | None:
        """Get the SHA-256 checksum of the loaded file."""
        return self._file_checksum

    @property
    def validation_errors(self) -> list[dict[str, str]]:
        """Get validation errors if any."""
        return self._validation_errors.copy()

    @property
    def validation_duration_ms(self) -> float:
        """Get validation duration in milliseconds."""
        return self._validation_duration_ms

    def load(self, catalog_path: Path) -> CatalogConfig:
        """Load and validate a catalog file.

        Args:
            catalog_path: Path to the catalog YAML file.

        Returns:
            The validated catalog.

        Raises:
            CatalogValidationError: If the file is missing, unparsable or invalid.
            CatalogStateError: If called in an invalid state.
        """
        start_time = time.perf_counter()
        self._state_machine.transition(CatalogState.LOADING)

        log = logger.bind(
            component=COMPONENT_CATALOG,
            file_path=str(catalog_path),
        )
        log.info("loading_catalog_file")

        try:
            content_bytes = catalog_path.read_bytes()
            self._file_checksum = hashlib.sha256(content_bytes).hexdigest()
            parsed = yaml.safe_load(content_bytes.decode("utf-8")) or {}
            catalog = CatalogConfig.model_validate(parsed)
        except ValidationError as e:
            self._fail(
                [
                    {
                        "loc": ".".join(str(loc) for loc in err["loc"]) or "catalog",
                        "msg": err["msg"],
                        "type": err["type"],
                    }
                    for err in e.errors()
                ],
                log,
            )
            raise CatalogValidationError(self._validation_errors, str(catalog_path)) from e
        except FileNotFoundError as e:
            self._fail(
                [{"loc": str(catalog_path), "msg": str(e), "type": "file_not_found"}],
                log,
            )
            raise CatalogValidationError(self._validation_errors, str(catalog_path)) from e
        except (OSError, UnicodeDecodeError) as e:
            self._fail(
                [{"loc": str(catalog_path), "msg": str(e), "type": "file_unreadable"}],
                log,
            )
            raise CatalogValidationError(self._validation_errors, str(catalog_path)) from e
        except yaml.YAMLError as e:
            self._fail(
                [{"loc": str(catalog_path), "msg": str(e), "type": "yaml_parse_error"}],
                log,
            )
            raise CatalogValidationError(self._validation_errors, str(catalog_path)) from e

        self._state_machine.transition(CatalogState.VALIDATED)

        if self._expected_size is not None and len(catalog.values) != self._expected_size:
            self._fail(
                [
                    {
                        "loc": "values",
                        "msg": (
                            f"Catalog has {len(catalog.values)} values, "
                            f"expected exactly {self._expected_size}"
                        ),
                        "type": "catalog_size",
                    }
                ],
                log,
            )
            raise CatalogValidationError(self._validation_errors, str(catalog_path))

        self._state_machine.transition(CatalogState.READY)
        self._validation_duration_ms = (time.perf_counter() - start_time) * 1000

        log.info(
            "catalog_ready",
            value_count=len(catalog.values),
            file_sha256=self._file_checksum,
            catalog_validation_duration_ms=round(self._validation_duration_ms, 2),
        )
        return catalog

    def _fail(
        self,
        errors: list[dict[str, str]],
        log: structlog.typing.FilteringBoundLogger,
    ) -> None:
        """Record errors and move to FAILED."""
        stage = self._state_machine.state
        self._state_machine.transition(CatalogState.FAILED)
        self._validation_errors.extend(errors)
        log.error(
            "catalog_validation_failed",
            failed_stage=stage.name,
            validation_error_count=len(self._validation_errors),
            errors=self._validation_errors,
        )


def load_catalog(
    catalog_path: Path | None = None,
    expected_size: int | None = DEFAULT_CATALOG_SIZE,
) -> CatalogConfig:
    """Load a catalog with a fresh loader.

    Args:
        catalog_path: Catalog file; the packaged catalog when omitted.
        expected_size: Exact number of entries required.

    Returns:
        The validated catalog.
    """
    return CatalogLoader(expected_size=expected_size).load(
        catalog_path or DEFAULT_CATALOG_PATH
    )
