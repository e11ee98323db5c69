"""Focus cursor state machine for keyboard and pointer navigation."""

from enum import Enum, auto

import structlog

from src.catalog.constants import COMPONENT_NAVIGATION


logger = structlog.get_logger()


class FocusState(Enum):
    """Focus cursor states.

    State transitions:
        IDLE -> FOCUSED: A ranked value receives focus
        FOCUSED -> FOCUSED: Cursor moves, or follows a moved value
        FOCUSED -> IDLE: Escape, or the last ranked value is removed
    """

    IDLE = auto()
    FOCUSED = auto()


class FocusStateError(Exception):
    """Raised when the cursor would point outside the ranking."""

    def __init__(self, index: int, ranked_count: int) -> None:
        """Initialize the error.

        Args:
            index: The rejected index.
            ranked_count: Size of the ranking at the time.
        """
        self.index = index
        self.ranked_count = ranked_count
        super().__init__(
            f"Focus index {index} outside ranking of {ranked_count} values"
        )


class FocusCursor:
    """Tracks which ranked value, if any, has keyboard focus.

    While FOCUSED the index is always valid for the ranking size it was
    last set or clamped against.
    """

    def __init__(self) -> None:
        """Initialize the cursor in IDLE state."""
        self._index: int | None = None
        self._log = logger.bind(component=COMPONENT_NAVIGATION)

    @property
    def state(self) -> FocusState:
        """Get the current state."""
        return FocusState.IDLE if self._index is None else FocusState.FOCUSED

    @property
    def index(self) -> int | None:
        """Focused index, or None when IDLE."""
        return self._index

    def is_idle(self) -> bool:
        """Check if nothing is focused."""
        return self._index is None

    def focus(self, index: int, ranked_count: int) -> None:
        """Focus a ranked value.

        Args:
            index: Zero-based index into the ranking view.
            ranked_count: Current ranking size.

        Raises:
            FocusStateError: If the index is outside the ranking.
        """
        if not 0 <= index < ranked_count:
            self._log.error(
                "invariant_violation",
                error_type="focus_out_of_range",
                index=index,
                ranked_count=ranked_count,
            )
            raise FocusStateError(index, ranked_count)
        self._set(index)

    def clear(self) -> None:
        """Return to IDLE."""
        self._set(None)

    def clamp(self, ranked_count: int) -> None:
        """Keep the cursor valid after the ranking changed size.

        Goes IDLE when the ranking is empty, otherwise pulls the index back
        onto the last value.
        """
        if self._index is None:
            return
        if ranked_count == 0:
            self._set(None)
        elif self._index >= ranked_count:
            self._set(ranked_count - 1)

    def _set(self, index: int | None) -> None:
        old_state, old_index = self.state, self._index
        self._index = index
        if old_index != index:
            self._log.debug(
                "focus_transition",
                from_state=old_state.name,
                to_state=self.state.name,
                from_index=old_index,
                to_index=index,
            )
