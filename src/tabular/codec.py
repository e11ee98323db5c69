"""CSV codec for exchanging a ranking as ``name,position`` rows."""

import csv
import io
import math
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path

import structlog

from src.catalog.constants import COMPONENT_TABULAR
from src.ranking.models import ValueEntity
from src.tabular.errors import ParseError
from src.tabular.metrics import TabularMetrics
from src.tabular.models import CSV_COLUMNS, TabularRow


logger = structlog.get_logger()


def serialize(ranking: Sequence[ValueEntity]) -> list[TabularRow]:
    """Convert a ranking view into export rows.

    Args:
        ranking: Ranked values in ascending position order.

    Returns:
        One row per ranked value, in the same order.
    """
    return [
        TabularRow(name=value.name, position=value.position)
        for value in ranking
        if value.position is not None
    ]


def parse_position(raw: object) -> int | float | None:
    """Parse a position cell.

    Accepts anything that reads as a finite number (``"3"``, ``" 3 "``,
    ``"3.0"``, ``"1.5"``, ``"-2"``, ``3``).

    Returns:
        The number, as an int when it is whole, or None when the cell is
        not a finite number.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        number = float(raw)
    elif isinstance(raw, float):
        number = raw
    else:
        text = str(raw).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None

    if not math.isfinite(number):
        return None
    if number.is_integer():
        return int(number)
    return number


def _normalized_record(raw: Mapping[object, object]) -> dict[str, object]:
    """Lower-case and strip header keys, ignoring overflow columns."""
    return {
        key.strip().lower(): value
        for key, value in raw.items()
        if isinstance(key, str)
    }


def deserialize(raw_rows: Iterable[Mapping[object, object]]) -> list[TabularRow]:
    """Validate raw rows, dropping the ones that do not fit.

    A row is kept when it has a non-blank name and a numeric position.
    Dropping rows is not an error; partial success is expected.

    Args:
        raw_rows: Records keyed by header name, of unvalidated shape.

    Returns:
        Validated rows in input order, names trimmed.
    """
    accepted: list[TabularRow] = []
    read = 0
    for raw in raw_rows:
        read += 1
        record = _normalized_record(raw)
        name = record.get("name")
        name = name.strip() if isinstance(name, str) else ""
        position = parse_position(record.get("position"))
        if not name or position is None:
            logger.debug(
                "csv_row_dropped",
                component=COMPONENT_TABULAR,
                row_number=read,
                has_name=bool(name),
                has_position=position is not None,
            )
            continue
        accepted.append(TabularRow(name=name, position=position))

    TabularMetrics.get_instance().record_rows(read=read, accepted=len(accepted))
    logger.info(
        "csv_rows_validated",
        component=COMPONENT_TABULAR,
        rows_read=read,
        rows_accepted=len(accepted),
        rows_dropped=read - len(accepted),
    )
    return accepted


def _read_records(stream: Iterable[str], source: str) -> list[dict[object, object]]:
    """Read header-keyed records from a text stream."""
    reader = csv.DictReader(stream)
    try:
        records: list[dict[object, object]] = [dict(row) for row in reader]
    except csv.Error as e:
        TabularMetrics.get_instance().record_parse_failure()
        raise ParseError(source, str(e)) from e

    fieldnames = {name.strip().lower() for name in reader.fieldnames or []}
    missing = [column for column in CSV_COLUMNS if column not in fieldnames]
    if missing:
        logger.warning(
            "csv_header_incomplete",
            component=COMPONENT_TABULAR,
            source=source,
            missing_columns=missing,
        )
    return records


def parse_csv_text(text: str, source: str = "<text>") -> list[dict[object, object]]:
    """Parse CSV text with a header row into raw records.

    Raises:
        ParseError: If the text is not readable as CSV.
    """
    return _read_records(io.StringIO(text.removeprefix("\ufeff"), newline=""), source)


def read_csv_file(path: Path) -> list[dict[object, object]]:
    """Read a UTF-8 CSV file with a header row into raw records.

    A leading byte order mark is tolerated.

    Raises:
        ParseError: If the file cannot be opened, decoded or parsed.
    """
    try:
        with path.open(encoding="utf-8-sig", newline="") as handle:
            return _read_records(handle, str(path))
    except (OSError, UnicodeDecodeError) as e:
        TabularMetrics.get_instance().record_parse_failure()
        raise ParseError(str(path), str(e)) from e


def to_csv_text(rows: Sequence[TabularRow]) -> str:
    """Render rows as CSV text with a ``name,position`` header."""
    buffer = io.StringIO(newline="")
    writer = csv.DictWriter(buffer, fieldnames=list(CSV_COLUMNS))
    writer.writeheader()
    writer.writerows(row.as_record() for row in rows)
    return buffer.getvalue()
