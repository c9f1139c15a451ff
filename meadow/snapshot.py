"""Read-only views handed to rendering and UI code."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from meadow.entities.core import MotionState
from meadow.internal.math import Rect


class GamePhase(Enum):
    PLAYING = "playing"
    PAUSED = "paused"
    LEVEL_COMPLETE = "level_complete"
    GAME_COMPLETE = "game_complete"


class MessageKind(Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class BunnyView:
    bounds: Rect
    state: MotionState
    blocked: bool
    collecting: bool


@dataclass(frozen=True)
class SnakeView:
    segments: Tuple[Rect, ...]
    bridging: bool
    length: int
    max_length: int

    @property
    def head(self) -> Rect:
        return self.segments[0]


@dataclass(frozen=True)
class CollectibleView:
    bounds: Rect
    collected: bool


@dataclass(frozen=True)
class RenderSnapshot:
    phase: GamePhase
    level_id: int
    canvas_width: float
    canvas_height: float
    water_regions: Tuple[Rect, ...]
    bunny: BunnyView
    snake: SnakeView
    collectibles: Tuple[CollectibleView, ...]


@dataclass(frozen=True)
class StatusReport:
    phase: GamePhase
    level_id: int
    level_name: str
    score: int
    collected: int
    required: int
    total: int
    snake_length: int
    snake_max_length: int
    elapsed: float
    message: str
    message_kind: MessageKind
    tips: Tuple[str, ...] = ()

    @property
    def level_score(self) -> int:
        return self.collected

    @property
    def score_text(self) -> str:
        if self.required == self.total:
            return f"{self.collected}/{self.total}"
        return f"{self.collected}/{self.required} ({self.total} total)"
