"""Shared, deterministic timestamps for tests."""

from datetime import UTC, date, datetime


FIXED_NOW = datetime(2025, 7, 14, 9, 30, 0, tzinfo=UTC)
FIXED_DAY = date(2025, 7, 14)
