"""Key-value stores backing ranking snapshots."""

import sqlite3
import time
import uuid
from collections.abc import Generator
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path
from typing import Protocol

import structlog

from src.catalog.constants import COMPONENT_STORE
from src.store.errors import StoreConnectionError, StoreOperationError
from src.store.metrics import StoreMetrics, TransactionContext
from src.store.migrations import CURRENT_VERSION, MigrationManager
from src.store.models import StoredRecord


logger = structlog.get_logger()


class KeyValueStore(Protocol):
    """Storage surface the snapshot repository needs."""

    def get(self, key: str) -> StoredRecord | None:
        """Read the record under ``key``, or None when absent."""
        ...

    def put(self, key: str, value: str) -> None:
        """Write ``value`` under ``key``, replacing any previous record."""
        ...

    def delete(self, key: str) -> bool:
        """Remove the record under ``key``; True when one existed."""
        ...


class MemoryKeyValueStore:
    """In-process store for tests and throwaway sessions."""

    def __init__(self) -> None:
        """Initialize an empty store."""
        self._records: dict[str, StoredRecord] = {}

    def get(self, key: str) -> StoredRecord | None:
        """Read the record under ``key``."""
        return self._records.get(key)

    def put(self, key: str, value: str) -> None:
        """Write ``value`` under ``key``."""
        self._records[key] = StoredRecord(key=key, value=value, updated_at=datetime.now(UTC))

    def delete(self, key: str) -> bool:
        """Remove the record under ``key``."""
        return self._records.pop(key, None) is not None

    def keys(self) -> list[str]:
        """All stored keys, sorted."""
        return sorted(self._records)


class SqliteKeyValueStore:
    """SQLite key-value store.

    Holds one row per storage key in the ``kv_store`` table. Uses WAL mode
    and applies schema migrations on connect.
    """

    def __init__(self, db_path: Path | str, session_id: str | None = None) -> None:
        """Initialize the store.

        Args:
            db_path: Path to SQLite database file.
            session_id: Optional session ID for logging context.
        """
        self._db_path = Path(db_path) if isinstance(db_path, str) else db_path
        self._session_id = session_id or str(uuid.uuid4())
        self._conn: sqlite3.Connection | None = None
        self._metrics = StoreMetrics.get_instance()
        self._log = logger.bind(
            component=COMPONENT_STORE,
            session_id=self._session_id,
            db_path=str(self._db_path),
        )

    @property
    def db_path(self) -> Path:
        """Get the database path."""
        return self._db_path

    @property
    def is_connected(self) -> bool:
        """Check if connected to database."""
        return self._conn is not None

    def connect(self) -> None:
        """Open connection to database and apply migrations.

        Creates the database file and parent directories if they don't exist.

        Raises:
            StoreConnectionError: If the database cannot be opened.
        """
        if self._conn is not None:
            return

        self._log.debug("connecting_to_database")
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(str(self._db_path))
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.execute("PRAGMA synchronous=NORMAL")
        except (OSError, sqlite3.Error) as e:
            self._conn = None
            self._log.error("database_connect_failed", error=str(e))
            raise StoreConnectionError(f"Cannot open {self._db_path}: {e}") from e

        migration_mgr = MigrationManager(self._conn)
        old_version = migration_mgr.get_current_version()
        applied = migration_mgr.apply_migrations()

        self._log.debug(
            "database_connected",
            old_version=old_version,
            new_version=CURRENT_VERSION,
            migrations_applied=applied,
        )

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            self._log.debug("database_closed")

    def __enter__(self) -> "SqliteKeyValueStore":
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: type | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Context manager exit."""
        self.close()

    def get_schema_version(self) -> int:
        """Get the applied schema version."""
        return MigrationManager(self._ensure_connected()).get_current_version()

    def _ensure_connected(self) -> sqlite3.Connection:
        """Ensure database is connected.

        Returns:
            The database connection.

        Raises:
            StoreConnectionError: If not connected.
        """
        if self._conn is None:
            raise StoreConnectionError("Database not connected. Call connect() first.")
        return self._conn

    @contextmanager
    def _transaction(self, operation: str) -> Generator[TransactionContext]:
        """Context manager for transactions with timing and logging.

        Args:
            operation: Name of the operation for logging.

        Yields:
            Transaction context with timing information.

        Raises:
            StoreOperationError: If SQLite rejects the transaction.
        """
        conn = self._ensure_connected()
        tx_id = str(uuid.uuid4())[:8]
        start_ns = time.perf_counter_ns()
        ctx = TransactionContext(tx_id=tx_id, start_time_ns=start_ns, operation=operation)

        self._log.debug("transaction_started", tx_id=tx_id, op=operation)

        try:
            yield ctx
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            duration_ms = (time.perf_counter_ns() - start_ns) / 1_000_000
            self._log.error(
                "transaction_failed",
                tx_id=tx_id,
                op=operation,
                duration_ms=round(duration_ms, 2),
                error=str(e),
            )
            raise StoreOperationError(operation, str(e)) from e

        duration_ms = (time.perf_counter_ns() - start_ns) / 1_000_000
        self._metrics.record_tx_duration(duration_ms)
        self._log.debug(
            "transaction_complete",
            tx_id=tx_id,
            op=operation,
            affected_rows=ctx.affected_rows,
            duration_ms=round(duration_ms, 2),
        )

    def get(self, key: str) -> StoredRecord | None:
        """Read the record under ``key``.

        Raises:
            StoreConnectionError: If not connected.
            StoreOperationError: If the query fails.
        """
        conn = self._ensure_connected()
        try:
            row = conn.execute(
                "SELECT key, value, updated_at FROM kv_store WHERE key = ?",
                (key,),
            ).fetchone()
        except sqlite3.Error as e:
            raise StoreOperationError("get", str(e)) from e

        if row is None:
            return None
        return StoredRecord(
            key=row["key"],
            value=row["value"],
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def put(self, key: str, value: str) -> None:
        """Write ``value`` under ``key``, replacing any previous record."""
        with self._transaction("put") as ctx:
            cursor = self._ensure_connected().execute(
                """
                INSERT INTO kv_store (key, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, value, datetime.now(UTC).isoformat()),
            )
            ctx.add_affected_rows(cursor.rowcount)

    def delete(self, key: str) -> bool:
        """Remove the record under ``key``."""
        with self._transaction("delete") as ctx:
            cursor = self._ensure_connected().execute(
                "DELETE FROM kv_store WHERE key = ?", (key,)
            )
            ctx.add_affected_rows(cursor.rowcount)
        return ctx.affected_rows > 0

    def keys(self) -> list[str]:
        """All stored keys, sorted."""
        conn = self._ensure_connected()
        try:
            rows = conn.execute("SELECT key FROM kv_store ORDER BY key").fetchall()
        except sqlite3.Error as e:
            raise StoreOperationError("keys", str(e)) from e
        return [row["key"] for row in rows]
