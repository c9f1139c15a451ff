from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import ClassVar, Deque, List, Optional

from meadow.config import GameConfig
from meadow.entities.core import CharacterBase, CharacterKind, Direction
from meadow.internal.math import Rect, Vector2D


@dataclass
class Snake(CharacterBase):
    """Chain of fixed-size segments, head first.

    The chain only grows at the head and only shrinks at the tail: pushing a
    head onto a full chain evicts the oldest segment, so a bridge cannot be
    extended somewhere without being lost somewhere else.
    """

    kind: ClassVar[CharacterKind] = CharacterKind.SNAKE

    segments: Deque[Vector2D] = field(default_factory=deque)
    max_length: int = 8
    step: float = 16.0
    bridge_mode: bool = False
    trigger_held: bool = False
    move_timer: float = 0.0

    def __post_init__(self):
        super().__post_init__()
        segments = [segment.copy() for segment in self.segments] or [self.position.copy()]
        if len(segments) > self.max_length:
            raise ValueError(
                f"Snake has {len(segments)} segments, more than max_length={self.max_length}"
            )
        self.segments = deque(segments, maxlen=self.max_length)
        self.position = self.segments[0].copy()

    @classmethod
    def spawn(cls, start: Vector2D, config: GameConfig) -> "Snake":
        segments = [
            Vector2D(start.x - i * config.snake_segment_spacing, start.y)
            for i in range(config.snake_initial_segments)
        ]
        return cls(
            position=start,
            size=Vector2D(config.snake_segment_size, config.snake_segment_size),
            speed=config.snake_speed,
            segments=deque(segments),
            max_length=config.snake_max_length,
            step=config.snake_step,
        )

    @property
    def head(self) -> Vector2D:
        return self.segments[0]

    @property
    def tail(self) -> Vector2D:
        return self.segments[-1]

    @property
    def length(self) -> int:
        return len(self.segments)

    def segment_bounds(self) -> List[Rect]:
        return [self.bounds_at(segment) for segment in self.segments]

    def bounds(self) -> Rect:
        """Bounding box around every segment."""
        return Rect.union(self.segment_bounds())

    def press_bridge(self, held: bool) -> bool:
        """Feed the bridge trigger level; toggles only on the rising edge."""
        if not held:
            self.trigger_held = False
            return False
        if self.trigger_held:
            return False

        self.trigger_held = True
        self.bridge_mode = not self.bridge_mode
        return True

    def next_head(self, direction: Direction) -> Vector2D:
        return self.head + direction.vector * self.step

    def push_head(self, position: Vector2D) -> Optional[Vector2D]:
        """Add a new head; returns the tail segment it evicted, if any."""
        evicted = self.segments[-1] if len(self.segments) == self.max_length else None
        self.segments.appendleft(position.copy())
        self.update_position(position)
        return evicted

    def can_support(self, bounds: Rect) -> bool:
        if not self.bridge_mode:
            return False
        return any(segment.intersects(bounds) for segment in self.segment_bounds())

