"""Snapshot repository: loads and saves one ranking under a storage key."""

from dataclasses import dataclass

import structlog

from src.catalog.constants import COMPONENT_STORE, DEFAULT_STORAGE_KEY
from src.ranking.models import RankingState
from src.store.errors import SnapshotDecodeError, SnapshotStoreError
from src.store.metrics import StoreMetrics
from src.store.models import LoadSource, decode_snapshot, encode_snapshot
from src.store.store import KeyValueStore


logger = structlog.get_logger()


@dataclass(frozen=True)
class LoadResult:
    """Outcome of restoring a ranking.

    Attributes:
        state: The restored state, or the default when nothing usable was stored.
        source: Where ``state`` came from.
    """

    state: RankingState
    source: LoadSource

    @property
    def restored(self) -> bool:
        """Whether ``state`` came from the store."""
        return self.source is LoadSource.STORED


class SnapshotRepository:
    """Reads and writes ranking snapshots through a key-value store.

    Persistence is best-effort. Reads that fail for any reason fall back to
    the default state; writes that fail are logged and reported as False.
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str = DEFAULT_STORAGE_KEY,
        metrics: StoreMetrics | None = None,
    ) -> None:
        """Initialize the repository.

        Args:
            store: Backing key-value store.
            key: Storage key the snapshot lives under.
            metrics: Optional metrics instance.
        """
        self._store = store
        self._key = key
        self._metrics = metrics or StoreMetrics.get_instance()
        self._log = logger.bind(component=COMPONENT_STORE, storage_key=key)

    @property
    def key(self) -> str:
        """Get the storage key."""
        return self._key

    def load(self, default: RankingState) -> LoadResult:
        """Restore the stored ranking.

        A snapshot is only accepted when it holds exactly the value IDs of
        ``default``; anything else is treated like an unreadable snapshot.
        Only positions and the timestamp are taken from the snapshot. Order,
        names and descriptions always come from ``default``.

        Args:
            default: State to fall back to.

        Returns:
            LoadResult with the restored or default state.
        """
        self._metrics.record_read()
        try:
            record = self._store.get(self._key)
        except SnapshotStoreError as e:
            self._log.warning("snapshot_read_failed", error=str(e))
            return self._fallback(default, LoadSource.UNAVAILABLE)

        if record is None:
            self._log.debug("snapshot_missing")
            return self._fallback(default, LoadSource.MISSING)

        try:
            state = decode_snapshot(self._key, record.value)
        except SnapshotDecodeError as e:
            self._log.warning("snapshot_unreadable", reason=e.reason)
            return self._fallback(default, LoadSource.UNREADABLE)

        if sorted(state.ids) != sorted(default.ids):
            self._log.warning(
                "snapshot_catalog_mismatch",
                stored_count=len(state.values),
                catalog_count=len(default.values),
            )
            return self._fallback(default, LoadSource.MISMATCHED)

        restored = default.with_positions(
            {value.id: value.position for value in state.values}
        ).model_copy(update={"last_updated": state.last_updated})

        self._log.info(
            "snapshot_restored",
            ranked_count=sum(1 for value in restored.values if value.is_ranked),
            last_updated=restored.last_updated.isoformat(),
        )
        return LoadResult(state=restored, source=LoadSource.STORED)

    def save(self, state: RankingState) -> bool:
        """Write the full state under the storage key.

        Returns:
            True when the write succeeded.
        """
        try:
            self._store.put(self._key, encode_snapshot(state))
        except SnapshotStoreError as e:
            self._metrics.record_write_failure()
            self._log.error("snapshot_write_failed", error=str(e))
            return False

        self._metrics.record_write()
        self._log.debug("snapshot_written", last_updated=state.last_updated.isoformat())
        return True

    def clear(self) -> bool:
        """Delete the stored snapshot.

        Returns:
            True when a snapshot existed and was removed.
        """
        try:
            return self._store.delete(self._key)
        except SnapshotStoreError as e:
            self._log.error("snapshot_delete_failed", error=str(e))
            return False

    def _fallback(self, default: RankingState, source: LoadSource) -> LoadResult:
        self._metrics.record_fallback()
        return LoadResult(state=default, source=source)
