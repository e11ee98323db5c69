"""Input state machine for keyboard and drag-and-drop ranking.

Keeps a single focus cursor over the ranking and turns key presses and
drag gestures into ranking engine calls.
"""

from src.navigation.controller import NavigationController, NavigationResult
from src.navigation.keymap import KeyPress, NavigationEvent, event_for_key, parse_key_spec
from src.navigation.state_machine import FocusCursor, FocusState, FocusStateError


__all__ = [
    "FocusCursor",
    "FocusState",
    "FocusStateError",
    "KeyPress",
    "NavigationController",
    "NavigationEvent",
    "NavigationResult",
    "event_for_key",
    "parse_key_spec",
]
