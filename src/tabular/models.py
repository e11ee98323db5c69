"""Data models for the tabular codec."""

from dataclasses import dataclass
from enum import Enum
from typing import Annotated

from pydantic import Field

from src.data_model import StrictBaseModel


# Fixed column order of the exchange format
CSV_COLUMNS: tuple[str, str] = ("name", "position")


class TabularRow(StrictBaseModel):
    """One validated ``name,position`` row.

    ``position`` is the imported number. Whole numbers are ints; anything
    else is only usable as a sort key.
    """

    name: Annotated[str, Field(min_length=1)]
    position: int | float

    @property
    def is_rank(self) -> bool:
        """Whether ``position`` can be used as a rank as written."""
        return isinstance(self.position, int) and self.position >= 1

    def as_record(self) -> dict[str, str]:
        """Row as a CSV record keyed by column name."""
        return {"name": self.name, "position": str(self.position)}


class MatchOutcome(str, Enum):
    """Result of matching an imported name against the catalog.

    - MATCHED: exactly one catalog value carries the name
    - UNMATCHED: no catalog value carries the name
    - AMBIGUOUS: several values share the name ignoring case
    """

    MATCHED = "matched"
    UNMATCHED = "unmatched"
    AMBIGUOUS = "ambiguous"


@dataclass(frozen=True)
class RowOutcome:
    """How a single imported row was applied.

    Attributes:
        row: The validated row.
        outcome: Match result for the row's name.
        value_id: Matched value ID, None unless MATCHED.
    """

    row: TabularRow
    outcome: MatchOutcome
    value_id: str | None = None


@dataclass(frozen=True)
class ExportedFile:
    """Information about a written CSV export.

    Attributes:
        path: Absolute path of the file.
        row_count: Number of data rows.
        bytes_written: File size in bytes.
        sha256: SHA-256 of the file content.
    """

    path: str
    row_count: int
    bytes_written: int
    sha256: str
