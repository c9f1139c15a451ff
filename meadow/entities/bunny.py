from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from meadow.config import GameConfig
from meadow.entities.core import CharacterBase, CharacterKind, MotionState
from meadow.internal.math import Rect, Vector2D


@dataclass
class Bunny(CharacterBase):
    kind: ClassVar[CharacterKind] = CharacterKind.BUNNY

    blocked_time: float = 0.0
    collecting_time: float = 0.0

    @classmethod
    def spawn(cls, start: Vector2D, config: GameConfig) -> "Bunny":
        return cls(
            position=start,
            size=Vector2D(config.bunny_size, config.bunny_size),
            speed=config.bunny_speed,
        )

    def bounds(self) -> Rect:
        return self.bounds_at(self.position)

    def show_blocked(self, duration: float) -> None:
        self.blocked_time = duration

    def start_collecting(self, duration: float) -> None:
        self.collecting_time = duration
        self.state = MotionState.COLLECTING

    def tick_effects(self, delta: float) -> None:
        if self.blocked_time > 0:
            self.blocked_time = max(0.0, self.blocked_time - delta)

        if self.collecting_time > 0:
            self.collecting_time = max(0.0, self.collecting_time - delta)
            if self.collecting_time == 0 and self.state is MotionState.COLLECTING:
                self.state = MotionState.IDLE
