"""Tabular codec for exchanging rankings as CSV.

Exports the ranking as ``name,position`` rows and imports such rows back,
matching names against the catalog without regard to letter case.
"""

from src.tabular.codec import (
    deserialize,
    parse_csv_text,
    parse_position,
    read_csv_file,
    serialize,
    to_csv_text,
)
from src.tabular.errors import ExportError, ParseError, TabularError
from src.tabular.io import export_filename, write_csv
from src.tabular.metrics import TabularMetrics
from src.tabular.models import (
    CSV_COLUMNS,
    ExportedFile,
    MatchOutcome,
    RowOutcome,
    TabularRow,
)
from src.tabular.reconcile import NameIndex, NameMatch, ReconcileResult, reconcile


__all__ = [
    "CSV_COLUMNS",
    "ExportError",
    "ExportedFile",
    "MatchOutcome",
    "NameIndex",
    "NameMatch",
    "ParseError",
    "ReconcileResult",
    "RowOutcome",
    "TabularError",
    "TabularMetrics",
    "TabularRow",
    "deserialize",
    "export_filename",
    "parse_csv_text",
    "parse_position",
    "read_csv_file",
    "reconcile",
    "serialize",
    "to_csv_text",
    "write_csv",
]
