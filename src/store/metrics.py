"""Metrics collection for the snapshot store."""

from dataclasses import dataclass, field
from typing import ClassVar


@dataclass
class StoreMetrics:
    """Metrics for snapshot store operations.

    Attributes:
        snapshot_reads_total: Snapshot load attempts.
        snapshot_fallbacks_total: Loads that fell back to the catalog default.
        snapshot_writes_total: Snapshots written successfully.
        snapshot_write_failures_total: Snapshot writes that failed.
        db_tx_duration_ms: Cumulative transaction duration in milliseconds.
        db_tx_count: Number of committed transactions.
    """

    snapshot_reads_total: int = 0
    snapshot_fallbacks_total: int = 0
    snapshot_writes_total: int = 0
    snapshot_write_failures_total: int = 0
    db_tx_duration_ms: float = 0.0
    db_tx_count: int = 0

    _instance: ClassVar["StoreMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "StoreMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_read(self) -> None:
        """Record a snapshot load attempt."""
        self.snapshot_reads_total += 1

    def record_fallback(self) -> None:
        """Record a load that used the catalog default."""
        self.snapshot_fallbacks_total += 1

    def record_write(self) -> None:
        """Record a successful snapshot write."""
        self.snapshot_writes_total += 1

    def record_write_failure(self) -> None:
        """Record a failed snapshot write."""
        self.snapshot_write_failures_total += 1

    def record_tx_duration(self, duration_ms: float) -> None:
        """Record transaction duration.

        Args:
            duration_ms: Duration in milliseconds.
        """
        self.db_tx_duration_ms += duration_ms
        self.db_tx_count += 1

    def to_dict(self) -> dict[str, float | int]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "snapshot_reads_total": self.snapshot_reads_total,
            "snapshot_fallbacks_total": self.snapshot_fallbacks_total,
            "snapshot_writes_total": self.snapshot_writes_total,
            "snapshot_write_failures_total": self.snapshot_write_failures_total,
            "db_tx_duration_ms": self.db_tx_duration_ms,
            "db_tx_count": self.db_tx_count,
        }

    @property
    def avg_tx_duration_ms(self) -> float:
        """Calculate average transaction duration.

        Returns:
            Average duration in milliseconds.
        """
        if self.db_tx_count == 0:
            return 0.0
        return self.db_tx_duration_ms / self.db_tx_count


@dataclass
class TransactionContext:
    """Context for a single transaction with timing.

    Attributes:
        tx_id: Unique transaction identifier.
        start_time_ns: Start time in nanoseconds.
        operation: The operation being performed.
    """

    tx_id: str
    start_time_ns: int
    operation: str
    affected_rows: int = field(default=0)

    def add_affected_rows(self, rows: int) -> None:
        """Add to the affected row count.

        Args:
            rows: Number of rows affected.
        """
        self.affected_rows += rows
