"""Models for user-facing status messages.

Every user action reports exactly one short line. Codes are stable;
the text is looked up from STATUS_TEXT_MAP and formatted with the value
name where the template needs one.
"""

from enum import Enum

from pydantic import Field

from src.data_model import StrictBaseModel


class StatusCode(str, Enum):
    """Machine-readable codes for status line messages."""

    READY = "READY"
    SELECTED = "SELECTED"
    MOVED_UP = "MOVED_UP"
    MOVED_DOWN = "MOVED_DOWN"
    MOVED_TO = "MOVED_TO"
    ADDED = "ADDED"
    REMOVED = "REMOVED"
    RESET = "RESET"
    EXPORTED = "EXPORTED"
    EXPORT_FAILED = "EXPORT_FAILED"
    IMPORTED = "IMPORTED"
    IMPORT_FAILED = "IMPORT_FAILED"
    NO_CHANGE = "NO_CHANGE"
    UNKNOWN_VALUE = "UNKNOWN_VALUE"


STATUS_TEXT_MAP: dict[StatusCode, str] = {
    StatusCode.READY: "Select a value to move it",
    StatusCode.SELECTED: "Selected: {name}",
    StatusCode.MOVED_UP: "Moved {name} up",
    StatusCode.MOVED_DOWN: "Moved {name} down",
    StatusCode.MOVED_TO: "Moved {name} to position {position}",
    StatusCode.ADDED: "Added {name} to the list",
    StatusCode.REMOVED: "Removed {name} from the list",
    StatusCode.RESET: "Order reset",
    StatusCode.EXPORTED: "List exported to CSV",
    StatusCode.EXPORT_FAILED: "Could not export the list",
    StatusCode.IMPORTED: "List imported from CSV",
    StatusCode.IMPORT_FAILED: "Could not import the list",
    StatusCode.NO_CHANGE: "No change",
    StatusCode.UNKNOWN_VALUE: "Unknown value: {name}",
}

FAILURE_CODES: frozenset[StatusCode] = frozenset(
    {
        StatusCode.EXPORT_FAILED,
        StatusCode.IMPORT_FAILED,
        StatusCode.UNKNOWN_VALUE,
    }
)


def status_text(code: StatusCode, **fields: object) -> str:
    """Render the message for a status code.

    Args:
        code: Status code.
        **fields: Template fields such as ``name`` or ``position``.

    Returns:
        The formatted one-line message.
    """
    return STATUS_TEXT_MAP[code].format(**fields)


class ActionOutcome(StrictBaseModel):
    """Result of one user action.

    Attributes:
        code: Stable status code.
        message: One-line message for the status bar.
        changed: Whether the ranking changed.
    """

    code: StatusCode
    message: str = Field(min_length=1)
    changed: bool = False

    @property
    def success(self) -> bool:
        """Whether the action succeeded."""
        return self.code not in FAILURE_CODES

    @classmethod
    def of(cls, code: StatusCode, *, changed: bool = False, **fields: object) -> "ActionOutcome":
        """Build an outcome with its formatted message."""
        return cls(code=code, message=status_text(code, **fields), changed=changed)
