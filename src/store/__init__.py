"""Snapshot persistence for rankings."""

from src.store.errors import (
    MigrationError,
    SnapshotDecodeError,
    SnapshotStoreError,
    StoreConnectionError,
    StoreOperationError,
)
from src.store.metrics import StoreMetrics
from src.store.migrations import CURRENT_VERSION, MigrationManager
from src.store.models import LoadSource, StoredRecord, decode_snapshot, encode_snapshot
from src.store.snapshot import LoadResult, SnapshotRepository
from src.store.store import KeyValueStore, MemoryKeyValueStore, SqliteKeyValueStore


__all__ = [
    "CURRENT_VERSION",
    "KeyValueStore",
    "LoadResult",
    "LoadSource",
    "MemoryKeyValueStore",
    "MigrationError",
    "MigrationManager",
    "SnapshotDecodeError",
    "SnapshotRepository",
    "SnapshotStoreError",
    "StoreConnectionError",
    "StoreMetrics",
    "StoreOperationError",
    "StoredRecord",
    "SqliteKeyValueStore",
    "decode_snapshot",
    "encode_snapshot",
]
