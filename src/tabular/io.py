"""File output for CSV exports.

Exports are written atomically so a reader never sees a half-written file.
"""

import hashlib
import os
import tempfile
from collections.abc import Sequence
from datetime import date
from pathlib import Path

import structlog

from src.catalog.constants import COMPONENT_TABULAR
from src.tabular.codec import to_csv_text
from src.tabular.errors import ExportError
from src.tabular.metrics import TabularMetrics
from src.tabular.models import ExportedFile, TabularRow


logger = structlog.get_logger()

EXPORT_FILENAME_PREFIX = "life_values"


def export_filename(day: date) -> str:
    """Conventional export file name embedding the ISO date."""
    return f"{EXPORT_FILENAME_PREFIX}_{day.isoformat()}.csv"


def write_csv(path: Path, rows: Sequence[TabularRow]) -> ExportedFile:
    """Write rows to ``path`` with atomic semantics.

    Writes to a temporary file in the target directory, then renames it
    over the final path.

    Args:
        path: Target file path.
        rows: Rows to export.

    Returns:
        ExportedFile with path, size and checksum.

    Raises:
        ExportError: If the file cannot be written.
    """
    content_bytes = to_csv_text(rows).encode("utf-8")
    sha256 = hashlib.sha256(content_bytes).hexdigest()

    temp_path: Path | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            mode="wb",
            dir=path.parent,
            prefix=f".{path.stem}_",
            suffix=".csv.tmp",
            delete=False,
        ) as temp_file:
            temp_path = Path(temp_file.name)
            temp_file.write(content_bytes)
        os.replace(temp_path, path)
        temp_path = None
    except OSError as e:
        raise ExportError(str(path), str(e)) from e
    finally:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)

    TabularMetrics.get_instance().record_export()
    logger.info(
        "csv_written",
        component=COMPONENT_TABULAR,
        path=str(path),
        row_count=len(rows),
        bytes=len(content_bytes),
        sha256=sha256[:12],
    )
    return ExportedFile(
        path=str(path.resolve()),
        row_count=len(rows),
        bytes_written=len(content_bytes),
        sha256=sha256,
    )
