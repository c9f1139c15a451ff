"""Game configuration constants and settings.

Distances are in canvas pixels and durations in milliseconds, matching the
frame deltas handed to ``GameSession.tick``.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any, Dict

# Canvas
CANVAS_WIDTH = 800
CANVAS_HEIGHT = 600

# Bunny
BUNNY_SIZE = 25.0
BUNNY_SPEED = 2.5  # pixels per tick
BLOCKED_INDICATOR_TIME = 500.0
COLLECTING_TIME = 500.0

# Snake
SNAKE_SEGMENT_SIZE = 18.0
SNAKE_SPEED = 2.0
SNAKE_STEP_MULTIPLIER = 8  # one chain step is speed * multiplier pixels
SNAKE_SEGMENT_SPACING = 20.0
SNAKE_INITIAL_SEGMENTS = 3
SNAKE_MAX_LENGTH = 8
SNAKE_MOVE_DELAY = 100.0

# Collectibles
COLLECTIBLE_SIZE = 20.0

# Frame timing
MAX_FRAME_DELTA = 100.0
DEFAULT_FRAME_DELTA = 16.0


@dataclass(frozen=True)
class GameConfig:
    canvas_width: float = CANVAS_WIDTH
    canvas_height: float = CANVAS_HEIGHT

    bunny_size: float = BUNNY_SIZE
    bunny_speed: float = BUNNY_SPEED
    blocked_indicator_time: float = BLOCKED_INDICATOR_TIME
    collecting_time: float = COLLECTING_TIME

    snake_segment_size: float = SNAKE_SEGMENT_SIZE
    snake_speed: float = SNAKE_SPEED
    snake_step_multiplier: float = SNAKE_STEP_MULTIPLIER
    snake_segment_spacing: float = SNAKE_SEGMENT_SPACING
    snake_initial_segments: int = SNAKE_INITIAL_SEGMENTS
    snake_max_length: int = SNAKE_MAX_LENGTH
    snake_move_delay: float = SNAKE_MOVE_DELAY

    collectible_size: float = COLLECTIBLE_SIZE

    max_frame_delta: float = MAX_FRAME_DELTA
    default_frame_delta: float = DEFAULT_FRAME_DELTA

    def __post_init__(self):
        if not 1 <= self.snake_initial_segments <= self.snake_max_length:
            raise ValueError(
                "snake_initial_segments must be between 1 and snake_max_length"
            )

    @property
    def snake_step(self) -> float:
        return self.snake_speed * self.snake_step_multiplier

    def replace(self, **overrides: Any) -> "GameConfig":
        return replace(self, **overrides)


def get_game_config(config: GameConfig | None = None) -> Dict[str, Any]:
    """Get the complete game configuration as a dictionary."""
    return asdict(config or GameConfig())
