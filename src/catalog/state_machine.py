"""Catalog loading state machine implementation."""

from enum import Enum, auto
from typing import ClassVar


class CatalogState(Enum):
    """Catalog loading states.

    State transitions:
        UNLOADED -> LOADING: Start reading the catalog file
        LOADING -> VALIDATED: File parsed and every entry schema-checked
        VALIDATED -> READY: Catalog holds the expected number of values
        LOADING -> FAILED: File missing, unreadable, bad YAML or bad entries
        VALIDATED -> FAILED: Entries are fine but the catalog has the wrong size
    """

    UNLOADED = auto()
    LOADING = auto()
    VALIDATED = auto()
    READY = auto()
    FAILED = auto()


class CatalogStateError(Exception):
    """Raised when an invalid state transition is attempted."""

    def __init__(self, from_state: CatalogState, to_state: CatalogState) -> None:
        """Initialize the error.

        Args:
            from_state: The current state.
            to_state: The attempted target state.
        """
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Invalid catalog state transition: {from_state.name} -> {to_state.name}"
        )


class CatalogStateMachine:
    """State machine for catalog loading.

    A loader instance is single-use: READY and FAILED admit no further loads.
    Nothing can fail before loading starts, so UNLOADED has no FAILED edge.
    The state a failure happened in is kept as ``failed_stage``.
    """

    VALID_TRANSITIONS: ClassVar[dict[CatalogState, set[CatalogState]]] = {
        CatalogState.UNLOADED: {CatalogState.LOADING},
        CatalogState.LOADING: {CatalogState.VALIDATED, CatalogState.FAILED},
        CatalogState.VALIDATED: {CatalogState.READY, CatalogState.FAILED},
        CatalogState.READY: set(),
        CatalogState.FAILED: set(),
    }

    def __init__(self) -> None:
        """Initialize the state machine in UNLOADED state."""
        self._state = CatalogState.UNLOADED
        self._failed_stage: CatalogState | None = None

    @property
    def state(self) -> CatalogState:
        """Get the current state."""
        return self._state

    @property
    def failed_stage(self) -> CatalogState | None:
        """State the load failed in, None unless FAILED.

        LOADING for file and entry errors, VALIDATED for a catalog of the
        wrong size.
        """
        return self._failed_stage

    def can_transition(self, to_state: CatalogState) -> bool:
        """Check if a transition to the given state is valid."""
        return to_state in self.VALID_TRANSITIONS.get(self._state, set())

    def transition(self, to_state: CatalogState) -> None:
        """Transition to a new state.

        Args:
            to_state: The target state.

        Raises:
            CatalogStateError: If the transition is invalid.
        """
        if not self.can_transition(to_state):
            raise CatalogStateError(self._state, to_state)
        if to_state == CatalogState.FAILED:
            self._failed_stage = self._state
        self._state = to_state

    def is_ready(self) -> bool:
        """Check if the catalog is ready for use."""
        return self._state == CatalogState.READY

    def is_failed(self) -> bool:
        """Check if catalog loading has failed."""
        return self._state == CatalogState.FAILED
