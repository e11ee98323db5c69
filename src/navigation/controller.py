"""Navigation controller: keyboard and drag-and-drop over the ranking engine.

Both input paths reduce to the engine's ``move_within_ranking`` and
``demote``; the controller only decides which call to make and where the
focus cursor goes afterwards. A moved value keeps the focus: after any
move the cursor sits on the value's new slot.
"""

from dataclasses import dataclass

import structlog

from src.catalog.constants import COMPONENT_NAVIGATION
from src.navigation.keymap import KeyPress, NavigationEvent, event_for_key
from src.navigation.state_machine import FocusCursor, FocusState
from src.ranking.engine import RankingEngine
from src.ranking.models import RankingState
from src.ranking.views import ranking_view
from src.status.models import ActionOutcome, StatusCode


logger = structlog.get_logger()


@dataclass(frozen=True)
class NavigationResult:
    """Outcome of feeding one event to the controller.

    Attributes:
        state: Ranking state after the event (the input state if unchanged).
        handled: Whether the event was consumed by navigation.
        outcome: Status line update, None when there is nothing to report.
    """

    state: RankingState
    handled: bool
    outcome: ActionOutcome | None = None

    @property
    def changed(self) -> bool:
        """Whether the ranking changed."""
        return self.outcome is not None and self.outcome.changed


class NavigationController:
    """Interprets focus, key and drag events into ranking operations."""

    def __init__(self, engine: RankingEngine, cursor: FocusCursor | None = None) -> None:
        """Initialize the controller.

        Args:
            engine: Engine performing the ranking changes.
            cursor: Focus cursor; a fresh IDLE cursor when omitted.
        """
        self._engine = engine
        self._cursor = cursor or FocusCursor()
        self._drag_source: int | None = None
        self._log = logger.bind(component=COMPONENT_NAVIGATION)

    @property
    def cursor(self) -> FocusCursor:
        """Get the focus cursor."""
        return self._cursor

    @property
    def focus_state(self) -> FocusState:
        """Current cursor state."""
        return self._cursor.state

    @property
    def focused_index(self) -> int | None:
        """Focused index, or None when IDLE."""
        return self._cursor.index

    @property
    def drag_source(self) -> int | None:
        """Index picked up by an active drag, if any."""
        return self._drag_source

    def sync(self, state: RankingState) -> None:
        """Re-clamp the cursor after the ranking changed outside navigation."""
        count = len(ranking_view(state))
        self._cursor.clamp(count)
        if self._drag_source is not None and self._drag_source >= count:
            self._drag_source = None

    # ===== Focus =====

    def focus(self, state: RankingState, index: int) -> NavigationResult:
        """Give focus to the ranked value at ``index``.

        Out-of-range indices leave the cursor unchanged.
        """
        ranked = ranking_view(state)
        if not 0 <= index < len(ranked):
            return NavigationResult(state=state, handled=False)
        self._cursor.focus(index, len(ranked))
        return NavigationResult(
            state=state,
            handled=True,
            outcome=ActionOutcome.of(StatusCode.SELECTED, name=ranked[index].name),
        )

    # ===== Keyboard =====

    def handle_key(self, state: RankingState, press: KeyPress) -> NavigationResult:
        """Handle a raw key press.

        Keys that are not navigation keys pass through unhandled.
        """
        event = event_for_key(press)
        if event is None:
            return NavigationResult(state=state, handled=False)
        return self.handle_event(state, event)

    def handle_event(self, state: RankingState, event: NavigationEvent) -> NavigationResult:
        """Apply one navigation event.

        Args:
            state: Current ranking state.
            event: Event to apply.

        Returns:
            NavigationResult with the next state. Events arriving while
            IDLE are ignored and reported as unhandled.
        """
        ranked = ranking_view(state)
        count = len(ranked)
        self._cursor.clamp(count)
        index = self._cursor.index
        if index is None:
            return NavigationResult(state=state, handled=False)

        self._log.debug("navigation_event", nav_event=event.value, index=index)

        if event is NavigationEvent.CURSOR_UP:
            self._cursor.focus(max(0, index - 1), count)
            return NavigationResult(state=state, handled=True)

        if event is NavigationEvent.CURSOR_DOWN:
            self._cursor.focus(min(count - 1, index + 1), count)
            return NavigationResult(state=state, handled=True)

        if event in (NavigationEvent.MOVE_UP, NavigationEvent.MOVE_LEFT):
            return self._move_focused(state, index, index - 1, StatusCode.MOVED_UP)

        if event in (NavigationEvent.MOVE_DOWN, NavigationEvent.MOVE_RIGHT):
            return self._move_focused(state, index, index + 1, StatusCode.MOVED_DOWN)

        if event is NavigationEvent.SELECT:
            return NavigationResult(
                state=state,
                handled=True,
                outcome=ActionOutcome.of(StatusCode.SELECTED, name=ranked[index].name),
            )

        if event is NavigationEvent.DELETE:
            return self._delete_focused(state, index)

        if event is NavigationEvent.ESCAPE:
            self._cursor.clear()
            return NavigationResult(state=state, handled=True)

        return NavigationResult(state=state, handled=False)

    def _move_focused(
        self, state: RankingState, index: int, target: int, code: StatusCode
    ) -> NavigationResult:
        """Move the focused value one slot; the cursor follows it."""
        ranked = ranking_view(state)
        if not 0 <= target < len(ranked):
            return NavigationResult(state=state, handled=True)

        new_state = self._engine.move_within_ranking(state, index, target)
        self._cursor.focus(target, len(ranked))
        return NavigationResult(
            state=new_state,
            handled=True,
            outcome=ActionOutcome.of(code, changed=True, name=ranked[index].name),
        )

    def _delete_focused(self, state: RankingState, index: int) -> NavigationResult:
        """Demote the focused value and refocus its predecessor."""
        removed = ranking_view(state)[index]
        new_state = self._engine.demote(state, removed.id)
        remaining = len(ranking_view(new_state))

        if index > 0:
            self._cursor.focus(index - 1, remaining)
        elif remaining == 0:
            self._cursor.clear()
        else:
            self._cursor.focus(0, remaining)

        return NavigationResult(
            state=new_state,
            handled=True,
            outcome=ActionOutcome.of(StatusCode.REMOVED, changed=True, name=removed.name),
        )

    # ===== Drag and drop =====

    def drag_start(self, state: RankingState, index: int) -> None:
        """Record the index a drag picked up; invalid indices are ignored."""
        if 0 <= index < len(ranking_view(state)):
            self._drag_source = index

    def drag_over(self) -> None:
        """Hovering over a drop target changes nothing."""

    def drag_end(self) -> None:
        """Forget the drag source, whether or not a drop happened."""
        self._drag_source = None

    def drop(self, state: RankingState, target: int) -> NavigationResult:
        """Drop the dragged value at ``target``.

        Dropping where the drag started, without a drag, or outside the
        ranking is a no-op. The source is cleared in every case. The focus
        stays on the value it was on: the dragged value at its new slot, or
        another value shifted by one when the drag passed over it.
        """
        source = self._drag_source
        self._drag_source = None
        ranked = ranking_view(state)
        if (
            source is None
            or source == target
            or not 0 <= target < len(ranked)
            or source >= len(ranked)
        ):
            return NavigationResult(state=state, handled=source is not None)

        new_state = self._engine.move_within_ranking(state, source, target)
        focused = self._cursor.index
        if focused == source:
            self._cursor.focus(target, len(ranked))
        elif focused is not None and min(source, target) <= focused <= max(source, target):
            self._cursor.focus(focused - 1 if source < target else focused + 1, len(ranked))

        return NavigationResult(
            state=new_state,
            handled=True,
            outcome=ActionOutcome.of(
                StatusCode.MOVED_TO,
                changed=True,
                name=ranked[source].name,
                position=target + 1,
            ),
        )
