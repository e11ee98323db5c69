"""Unit tests for the snapshot repository."""

import json
from collections.abc import Generator
from unittest.mock import MagicMock

import pytest

from src.ranking.models import RankingState
from src.ranking.views import ranking_view, unranked_pool
from src.store.errors import StoreOperationError
from src.store.metrics import StoreMetrics
from src.store.models import LoadSource, encode_snapshot
from src.store.snapshot import SnapshotRepository
from src.store.store import MemoryKeyValueStore
from tests.helpers.catalog import four_value_catalog, make_catalog, ranked_pairs, state_with


KEY = "life-values-sorting"


@pytest.fixture(autouse=True)
def fresh_metrics() -> Generator[None]:
    """Reset store metrics around each test."""
    StoreMetrics.reset()
    yield
    StoreMetrics.reset()


@pytest.fixture
def default_state() -> RankingState:
    """Default state of catalog [A, B, C, D]."""
    return RankingState.from_catalog(four_value_catalog())


class TestLoad:
    """Tests for SnapshotRepository.load."""

    @pytest.mark.unit
    def test_missing_snapshot_gives_default(self, default_state: RankingState) -> None:
        """Test an empty store yields the default state."""
        result = SnapshotRepository(MemoryKeyValueStore(), key=KEY).load(default_state)
        assert result.state is default_state
        assert result.source is LoadSource.MISSING
        assert not result.restored

    @pytest.mark.unit
    def test_saved_snapshot_restored(self, default_state: RankingState) -> None:
        """Test a saved state comes back."""
        store = MemoryKeyValueStore()
        repository = SnapshotRepository(store, key=KEY)
        saved = state_with(four_value_catalog(), {"d": 1, "a": 2})
        assert repository.save(saved)

        result = repository.load(default_state)
        assert result.restored
        assert ranked_pairs(result.state) == [("d", 1), ("a", 2)]
        assert result.state.last_updated == saved.last_updated

    @pytest.mark.unit
    def test_catalog_identity_wins_over_snapshot(self, default_state: RankingState) -> None:
        """Test only positions are taken from a reordered, renamed snapshot."""
        store = MemoryKeyValueStore()
        store.put(
            KEY,
            json.dumps(
                [
                    {"id": "d", "name": "D"},
                    {"id": "c", "name": "Old C", "description": "Stale", "position": 1},
                    {"id": "b", "name": "B"},
                    {"id": "a", "name": "A"},
                ]
            ),
        )

        result = SnapshotRepository(store, key=KEY).load(default_state)
        assert result.restored
        assert result.state.ids == ["a", "b", "c", "d"]
        assert [value.id for value in unranked_pool(result.state)] == ["a", "b", "d"]
        assert [(value.name, value.position) for value in ranking_view(result.state)] == [
            ("C", 1)
        ]
        assert result.state.get("c").description == "About C"

    @pytest.mark.unit
    def test_corrupt_snapshot_falls_back(self, default_state: RankingState) -> None:
        """Test unparsable JSON falls back to the default."""
        store = MemoryKeyValueStore()
        store.put(KEY, "{broken")

        result = SnapshotRepository(store, key=KEY).load(default_state)
        assert result.state is default_state
        assert result.source is LoadSource.UNREADABLE
        assert StoreMetrics.get_instance().snapshot_fallbacks_total == 1

    @pytest.mark.unit
    def test_snapshot_of_other_catalog_falls_back(self, default_state: RankingState) -> None:
        """Test a snapshot with a different ID set is not used."""
        store = MemoryKeyValueStore()
        other = RankingState.from_catalog(make_catalog("A", "B", "C", "E"))
        store.put(KEY, encode_snapshot(other))

        result = SnapshotRepository(store, key=KEY).load(default_state)
        assert result.source is LoadSource.MISMATCHED
        assert result.state is default_state

    @pytest.mark.unit
    def test_read_failure_falls_back(self, default_state: RankingState) -> None:
        """Test a failing store yields the default state."""
        store = MagicMock()
        store.get.side_effect = StoreOperationError("get", "disk I/O error")

        result = SnapshotRepository(store, key=KEY).load(default_state)
        assert result.source is LoadSource.UNAVAILABLE
        assert result.state is default_state

    @pytest.mark.unit
    def test_keys_isolated(self, default_state: RankingState) -> None:
        """Test snapshots under other keys are ignored."""
        store = MemoryKeyValueStore()
        SnapshotRepository(store, key="other").save(state_with(four_value_catalog(), {"a": 1}))

        result = SnapshotRepository(store, key=KEY).load(default_state)
        assert result.source is LoadSource.MISSING


class TestSave:
    """Tests for SnapshotRepository.save."""

    @pytest.mark.unit
    def test_write_counted(self, default_state: RankingState) -> None:
        """Test successful writes are counted."""
        repository = SnapshotRepository(MemoryKeyValueStore(), key=KEY)
        assert repository.save(default_state)
        assert StoreMetrics.get_instance().snapshot_writes_total == 1

    @pytest.mark.unit
    def test_write_failure_reported(self, default_state: RankingState) -> None:
        """Test a failing write returns False instead of raising."""
        store = MagicMock()
        store.put.side_effect = StoreOperationError("put", "database is locked")

        assert not SnapshotRepository(store, key=KEY).save(default_state)
        assert StoreMetrics.get_instance().snapshot_write_failures_total == 1

    @pytest.mark.unit
    def test_clear_removes_snapshot(self, default_state: RankingState) -> None:
        """Test clear deletes the stored snapshot."""
        store = MemoryKeyValueStore()
        repository = SnapshotRepository(store, key=KEY)
        repository.save(default_state)

        assert repository.clear()
        assert store.get(KEY) is None
        assert not repository.clear()
