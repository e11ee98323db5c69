"""Metrics collection for the tabular codec."""

from dataclasses import dataclass
from typing import ClassVar


@dataclass
class TabularMetrics:
    """Counters for CSV import and export.

    Attributes:
        rows_read_total: Raw rows handed to deserialize.
        rows_accepted_total: Rows that passed shape validation.
        rows_dropped_total: Rows dropped for bad shape.
        rows_matched_total: Rows applied to a catalog value.
        rows_unmatched_total: Rows naming no catalog value.
        rows_ambiguous_total: Rows naming several catalog values.
        parse_failures_total: Sources that could not be read at all.
        exports_total: CSV files written.
    """

    rows_read_total: int = 0
    rows_accepted_total: int = 0
    rows_dropped_total: int = 0
    rows_matched_total: int = 0
    rows_unmatched_total: int = 0
    rows_ambiguous_total: int = 0
    parse_failures_total: int = 0
    exports_total: int = 0

    _instance: ClassVar["TabularMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "TabularMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_rows(self, read: int, accepted: int) -> None:
        """Record the outcome of one deserialize call.

        Args:
            read: Raw rows seen.
            accepted: Rows kept after validation.
        """
        self.rows_read_total += read
        self.rows_accepted_total += accepted
        self.rows_dropped_total += read - accepted

    def record_matches(self, matched: int, unmatched: int, ambiguous: int) -> None:
        """Record the outcome of one reconcile call."""
        self.rows_matched_total += matched
        self.rows_unmatched_total += unmatched
        self.rows_ambiguous_total += ambiguous

    def record_parse_failure(self) -> None:
        """Record an unreadable source."""
        self.parse_failures_total += 1

    def record_export(self) -> None:
        """Record a written export file."""
        self.exports_total += 1

    def to_dict(self) -> dict[str, int]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "rows_read_total": self.rows_read_total,
            "rows_accepted_total": self.rows_accepted_total,
            "rows_dropped_total": self.rows_dropped_total,
            "rows_matched_total": self.rows_matched_total,
            "rows_unmatched_total": self.rows_unmatched_total,
            "rows_ambiguous_total": self.rows_ambiguous_total,
            "parse_failures_total": self.parse_failures_total,
            "exports_total": self.exports_total,
        }
