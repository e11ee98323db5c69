"""Integration tests for the SQLite key-value store."""

import sqlite3
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest

from src.store.errors import StoreConnectionError
from src.store.metrics import StoreMetrics
from src.store.migrations import CURRENT_VERSION
from src.store.snapshot import SnapshotRepository
from src.store.store import SqliteKeyValueStore
from tests.helpers.catalog import four_value_catalog, ranked_pairs, state_with


@pytest.fixture
def temp_db_path() -> Generator[Path]:
    """Create a temporary database path."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "test_state.sqlite"


@pytest.fixture
def store(temp_db_path: Path) -> Generator[SqliteKeyValueStore]:
    """Create a connected store."""
    StoreMetrics.reset()
    store = SqliteKeyValueStore(temp_db_path, session_id="test-session-001")
    store.connect()
    yield store
    store.close()


class TestStoreConnection:
    """Tests for store connection and setup."""

    @pytest.mark.integration
    def test_connect_creates_database(self, temp_db_path: Path) -> None:
        """Test connecting creates the database file."""
        store = SqliteKeyValueStore(temp_db_path)
        assert not temp_db_path.exists()

        store.connect()
        assert temp_db_path.exists()
        store.close()

    @pytest.mark.integration
    def test_connect_creates_parent_dirs(self, temp_db_path: Path) -> None:
        """Test connecting creates parent directories."""
        nested_path = temp_db_path.parent / "subdir" / "state.sqlite"
        with SqliteKeyValueStore(nested_path):
            pass
        assert nested_path.exists()

    @pytest.mark.integration
    def test_context_manager(self, temp_db_path: Path) -> None:
        """Test store works as context manager."""
        with SqliteKeyValueStore(temp_db_path) as store:
            assert store.is_connected
            assert store.get_schema_version() == CURRENT_VERSION

        assert not store.is_connected

    @pytest.mark.integration
    def test_wal_mode_enabled(self, store: SqliteKeyValueStore) -> None:
        """Test the journal mode is WAL."""
        conn = sqlite3.connect(str(store.db_path))
        mode = conn.execute("PRAGMA journal_mode").fetchone()[0]
        conn.close()
        assert mode == "wal"

    @pytest.mark.integration
    def test_operation_without_connect_raises(self, temp_db_path: Path) -> None:
        """Test using an unconnected store raises."""
        with pytest.raises(StoreConnectionError):
            SqliteKeyValueStore(temp_db_path).get("key")

    @pytest.mark.integration
    def test_unopenable_path_raises(self, temp_db_path: Path) -> None:
        """Test a directory in place of the database file fails to connect."""
        temp_db_path.mkdir()
        with pytest.raises(StoreConnectionError):
            SqliteKeyValueStore(temp_db_path).connect()


class TestKeyValueOperations:
    """Tests for get/put/delete."""

    @pytest.mark.integration
    def test_put_then_get(self, store: SqliteKeyValueStore) -> None:
        """Test a written value reads back."""
        store.put("k", "v1")
        record = store.get("k")

        assert record is not None
        assert record.value == "v1"
        assert record.updated_at.tzinfo is not None

    @pytest.mark.integration
    def test_put_replaces(self, store: SqliteKeyValueStore) -> None:
        """Test a second put overwrites the first."""
        store.put("k", "v1")
        store.put("k", "v2")

        record = store.get("k")
        assert record is not None
        assert record.value == "v2"
        assert store.keys() == ["k"]

    @pytest.mark.integration
    def test_get_missing(self, store: SqliteKeyValueStore) -> None:
        """Test reading an absent key."""
        assert store.get("missing") is None

    @pytest.mark.integration
    def test_delete(self, store: SqliteKeyValueStore) -> None:
        """Test deleting a key."""
        store.put("k", "v")
        assert store.delete("k")
        assert not store.delete("k")
        assert store.get("k") is None

    @pytest.mark.integration
    def test_transactions_timed(self, store: SqliteKeyValueStore) -> None:
        """Test committed writes are recorded in metrics."""
        store.put("k", "v")
        metrics = StoreMetrics.get_instance()
        assert metrics.db_tx_count == 1
        assert metrics.avg_tx_duration_ms >= 0


class TestSnapshotPersistence:
    """Snapshots surviving a reconnect."""

    @pytest.mark.integration
    def test_snapshot_survives_reopen(self, temp_db_path: Path) -> None:
        """Test a saved ranking is restored from a fresh connection."""
        catalog = four_value_catalog()
        saved = state_with(catalog, {"c": 1, "a": 2})

        with SqliteKeyValueStore(temp_db_path) as store:
            assert SnapshotRepository(store).save(saved)

        with SqliteKeyValueStore(temp_db_path) as store:
            result = SnapshotRepository(store).load(state_with(catalog, {}))

        assert result.restored
        assert ranked_pairs(result.state) == [("c", 1), ("a", 2)]
