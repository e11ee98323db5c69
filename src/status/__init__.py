"""User-facing status line messages."""

from src.status.models import (
    FAILURE_CODES,
    STATUS_TEXT_MAP,
    ActionOutcome,
    StatusCode,
    status_text,
)


__all__ = [
    "FAILURE_CODES",
    "STATUS_TEXT_MAP",
    "ActionOutcome",
    "StatusCode",
    "status_text",
]
