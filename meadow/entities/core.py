from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from meadow.internal.math import Rect, Vector2D


class CharacterKind(Enum):
    BUNNY = "bunny"
    SNAKE = "snake"


class MotionState(Enum):
    IDLE = "idle"
    MOVING = "moving"
    BLOCKED = "blocked"
    COLLECTING = "collecting"


class Direction(Enum):
    NONE = (0, 0)
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @property
    def vector(self) -> Vector2D:
        return Vector2D(float(self.dx), float(self.dy))

    @property
    def is_none(self) -> bool:
        return self is Direction.NONE


@dataclass
class CharacterBase:
    """Data shared by every character kind.

    Behaviour lives in ``meadow.simulation``, which dispatches on ``kind``.
    """

    position: Vector2D
    size: Vector2D
    speed: float
    state: MotionState = MotionState.IDLE

    def __post_init__(self):
        self.position = self.position.copy()

    @property
    def x(self) -> float:
        return self.position.x

    @property
    def y(self) -> float:
        return self.position.y

    @property
    def width(self) -> float:
        return self.size.x

    @property
    def height(self) -> float:
        return self.size.y

    def bounds_at(self, position: Vector2D) -> Rect:
        return Rect.at(position, self.size)

    def update_position(self, position: Vector2D) -> None:
        self.position = position.copy()
