"""Snapshot records and their JSON encoding."""

import json
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

from pydantic import ValidationError

from src.ranking.models import RankingState
from src.store.errors import SnapshotDecodeError


@dataclass(frozen=True)
class StoredRecord:
    """Raw row of the key-value table.

    Attributes:
        key: Storage key.
        value: Serialized snapshot text.
        updated_at: When the row was last written.
    """

    key: str
    value: str
    updated_at: datetime


class LoadSource(str, Enum):
    """Where a loaded ranking came from."""

    STORED = "stored"
    MISSING = "missing"
    UNREADABLE = "unreadable"
    MISMATCHED = "mismatched"
    UNAVAILABLE = "unavailable"


def encode_snapshot(state: RankingState) -> str:
    """Serialize a ranking state to snapshot JSON.

    Args:
        state: State to serialize.

    Returns:
        JSON text holding ``values`` and ``last_updated``.
    """
    return state.model_dump_json()


def decode_snapshot(key: str, text: str) -> RankingState:
    """Parse snapshot JSON back into a ranking state.

    A bare JSON array of values is accepted as well and gets the current
    time as its ``last_updated``.

    Args:
        key: Storage key, for error reporting.
        text: Stored snapshot text.

    Returns:
        The decoded state.

    Raises:
        SnapshotDecodeError: If the text is not valid JSON or does not
            describe a ranking state.
    """
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise SnapshotDecodeError(key, f"invalid JSON: {e.msg}") from e

    if isinstance(payload, list):
        payload = {"values": payload, "last_updated": datetime.now(UTC).isoformat()}

    try:
        return RankingState.model_validate(payload)
    except ValidationError as e:
        raise SnapshotDecodeError(key, f"{e.error_count()} validation error(s)") from e
