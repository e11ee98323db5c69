"""Translation of raw key presses into navigation events."""

from dataclasses import dataclass
from enum import Enum


class NavigationEvent(str, Enum):
    """Discrete navigation events understood by the controller.

    CURSOR_* move the focus only. MOVE_* reorder the focused value:
    MOVE_UP/MOVE_DOWN come from the modified arrow keys, MOVE_LEFT and
    MOVE_RIGHT from the left/right arrows and the per-row buttons.
    """

    CURSOR_UP = "cursor_up"
    CURSOR_DOWN = "cursor_down"
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    SELECT = "select"
    DELETE = "delete"
    ESCAPE = "escape"


@dataclass(frozen=True)
class KeyPress:
    """A single key press.

    Attributes:
        key: Key name as reported by the UI (e.g. ``ArrowUp``, ``Delete``).
        shift: Whether the move modifier was held.
    """

    key: str
    shift: bool = False


_UNMODIFIED_KEYS: dict[str, NavigationEvent] = {
    "arrowup": NavigationEvent.CURSOR_UP,
    "up": NavigationEvent.CURSOR_UP,
    "arrowdown": NavigationEvent.CURSOR_DOWN,
    "down": NavigationEvent.CURSOR_DOWN,
    "arrowleft": NavigationEvent.MOVE_LEFT,
    "left": NavigationEvent.MOVE_LEFT,
    "arrowright": NavigationEvent.MOVE_RIGHT,
    "right": NavigationEvent.MOVE_RIGHT,
    "enter": NavigationEvent.SELECT,
    " ": NavigationEvent.SELECT,
    "space": NavigationEvent.SELECT,
    "delete": NavigationEvent.DELETE,
    "backspace": NavigationEvent.DELETE,
    "escape": NavigationEvent.ESCAPE,
    "esc": NavigationEvent.ESCAPE,
}

_MODIFIED_OVERRIDES: dict[NavigationEvent, NavigationEvent] = {
    NavigationEvent.CURSOR_UP: NavigationEvent.MOVE_UP,
    NavigationEvent.CURSOR_DOWN: NavigationEvent.MOVE_DOWN,
}


def event_for_key(press: KeyPress) -> NavigationEvent | None:
    """Map a key press to a navigation event.

    Returns:
        The event, or None for keys navigation does not handle.
    """
    key = press.key if press.key == " " else press.key.strip().lower()
    event = _UNMODIFIED_KEYS.get(key)
    if event is not None and press.shift:
        return _MODIFIED_OVERRIDES.get(event, event)
    return event


def parse_key_spec(spec: str) -> KeyPress:
    """Parse a textual key spec such as ``shift+ArrowUp``.

    A ``shift+`` prefix (any case) sets the modifier.
    """
    head, sep, tail = spec.partition("+")
    if sep and head.strip().lower() == "shift" and tail:
        return KeyPress(key=tail, shift=True)
    return KeyPress(key=spec)
