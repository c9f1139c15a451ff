from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Set, Tuple

from meadow.entities.core import Direction

# Checked in order; the first held key wins
BUNNY_KEYS: Tuple[Tuple[str, Direction], ...] = (
    ("ArrowUp", Direction.UP),
    ("ArrowDown", Direction.DOWN),
    ("ArrowLeft", Direction.LEFT),
    ("ArrowRight", Direction.RIGHT),
)
SNAKE_KEYS: Tuple[Tuple[str, Direction], ...] = (
    ("w", Direction.UP),
    ("s", Direction.DOWN),
    ("a", Direction.LEFT),
    ("d", Direction.RIGHT),
)
BRIDGE_KEY = " "
PAUSE_KEY = "p"
ACTION_KEY = "r"

GAME_KEYS = frozenset(
    [key for key, _ in BUNNY_KEYS] + [key for key, _ in SNAKE_KEYS] + [BRIDGE_KEY]
)


@dataclass(frozen=True)
class InputFrame:
    """What the player is doing during one tick.

    ``bridge_held`` is a level (held or not); the snake turns it into a
    toggle on the rising edge. ``pause_pressed`` and ``action_pressed`` are
    already edges: True only on the tick the key went down.
    """

    bunny_direction: Direction = Direction.NONE
    snake_direction: Direction = Direction.NONE
    bridge_held: bool = False
    pause_pressed: bool = False
    action_pressed: bool = False

    @staticmethod
    def idle() -> "InputFrame":
        return InputFrame()


def _normalize(key: str) -> str:
    # Letter keys are case-insensitive, named keys ("ArrowUp") are not
    return key.lower() if len(key) == 1 else key


class KeyboardState:
    def __init__(self):
        self._keys_down: Set[str] = set()
        self._pressed: Set[str] = set()

    @property
    def keys_down(self) -> frozenset:
        return frozenset(self._keys_down)

    def press(self, key: str) -> None:
        key = _normalize(key)
        if key not in self._keys_down:
            self._pressed.add(key)
        self._keys_down.add(key)

    def release(self, key: str) -> None:
        self._keys_down.discard(_normalize(key))

    def clear(self) -> None:
        self._keys_down.clear()
        self._pressed.clear()

    def is_pressed(self, key: str) -> bool:
        return _normalize(key) in self._keys_down

    def bunny_direction(self) -> Direction:
        return self._first_direction(BUNNY_KEYS)

    def snake_direction(self) -> Direction:
        return self._first_direction(SNAKE_KEYS)

    def handle_dom_event(self, event: Dict[str, Any]) -> bool:
        """Apply an ipyevents keyboard event; returns True for game keys."""
        key = event.get("key")
        if key is None:
            return False

        etype = event.get("type")
        if etype == "keydown":
            self.press(key)
        elif etype == "keyup":
            self.release(key)
        else:
            return False
        return _normalize(key) in GAME_KEYS

    def frame(self) -> InputFrame:
        """Snapshot the keyboard for one tick and consume pending key edges."""
        pressed, self._pressed = self._pressed, set()
        return InputFrame(
            bunny_direction=self.bunny_direction(),
            snake_direction=self.snake_direction(),
            bridge_held=BRIDGE_KEY in self._keys_down or BRIDGE_KEY in pressed,
            pause_pressed=PAUSE_KEY in pressed,
            action_pressed=ACTION_KEY in pressed,
        )

    def _first_direction(self, bindings: Iterable[Tuple[str, Direction]]) -> Direction:
        for key, direction in bindings:
            if key in self._keys_down:
                return direction
        return Direction.NONE
