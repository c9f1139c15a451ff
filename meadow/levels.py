"""Hand-authored level data and the catalog that serves it.

Levels are written as JSON-style dicts
(``bunnyStart``, ``water``, ``hearts``, ``requiredHearts`` ...) and turned
into frozen ``LevelData`` records when the catalog is built.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from meadow.config import BUNNY_SIZE, SNAKE_SEGMENT_SIZE
from meadow.errors import LevelDataError, LevelNotFound
from meadow.internal.math import Rect, Vector2D
from meadow.logic.terrain import Terrain, TerrainKind

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


@dataclass(frozen=True)
class LevelData:
    id: int
    name: str
    bunny_start: Point
    snake_start: Point
    water_regions: Tuple[Rect, ...]
    collectible_positions: Tuple[Point, ...]
    required_count: int
    description: str = ""
    tips: Tuple[str, ...] = ()

    def __post_init__(self):
        total = len(self.collectible_positions)
        if total == 0:
            raise LevelDataError(f"Level {self.id} has no collectibles")
        if not 1 <= self.required_count <= total:
            raise LevelDataError(
                f"Level {self.id} requires {self.required_count} of {total} collectibles"
            )

        terrain = Terrain(self.water_regions)
        bunny = Rect(*self.bunny_start, BUNNY_SIZE, BUNNY_SIZE)
        snake = Rect(*self.snake_start, SNAKE_SEGMENT_SIZE, SNAKE_SEGMENT_SIZE)
        for label, box in (("Bunny", bunny), ("Snake", snake)):
            if not terrain.is_within_bounds(box):
                raise LevelDataError(
                    f"Level {self.id}: {label} start {box.position} is off the canvas"
                )
        if terrain.classify(bunny) is TerrainKind.WATER:
            raise LevelDataError(
                f"Level {self.id}: Bunny start {bunny.position} is in water"
            )

    @property
    def total_count(self) -> int:
        return len(self.collectible_positions)

    @property
    def bunny_start_vector(self) -> Vector2D:
        return Vector2D.of(self.bunny_start)

    @property
    def snake_start_vector(self) -> Vector2D:
        return Vector2D.of(self.snake_start)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LevelData":
        try:
            hearts = tuple(
                (float(h["x"]), float(h["y"])) for h in data["hearts"]
            )
            water = tuple(
                Rect(float(w["x"]), float(w["y"]), float(w["width"]), float(w["height"]))
                for w in data.get("water", ())
            )
            bunny_x, bunny_y = data["bunnyStart"]
            snake_x, snake_y = data["snakeStart"]
            fields = dict(
                id=int(data["id"]),
                name=str(data["name"]),
                description=str(data.get("description", "")),
                bunny_start=(float(bunny_x), float(bunny_y)),
                snake_start=(float(snake_x), float(snake_y)),
                water_regions=water,
                collectible_positions=hearts,
                required_count=int(data.get("requiredHearts") or len(hearts)),
                tips=tuple(data.get("tips", ())),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise LevelDataError(f"Invalid level data: {exc}") from exc
        return cls(**fields)


DEFAULT_LEVELS: List[Dict[str, Any]] = [
    {
        "id": 1,
        "name": "First Steps",
        "description": "Learn to work together! Snake creates bridges for bunny.",
        "bunnyStart": [50, 50],
        "snakeStart": [100, 100],
        "water": [
            {"x": 200, "y": 150, "width": 150, "height": 80},
            {"x": 450, "y": 300, "width": 120, "height": 100},
        ],
        "hearts": [
            {"x": 280, "y": 160},
            {"x": 500, "y": 320},
            {"x": 650, "y": 500},
        ],
        "requiredHearts": 3,
        "tips": [
            "Press SPACE to activate bridge mode",
            "Bunny cannot enter water alone",
            "Work together to reach all hearts!",
        ],
    },
    {
        "id": 2,
        "name": "Strategic Thinking",
        "description": "Plan your moves! Snake length is limited.",
        "bunnyStart": [30, 30],
        "snakeStart": [80, 80],
        "water": [
            {"x": 150, "y": 100, "width": 100, "height": 150},
            {"x": 300, "y": 200, "width": 80, "height": 80},
            {"x": 500, "y": 100, "width": 120, "height": 200},
            {"x": 200, "y": 400, "width": 300, "height": 80},
        ],
        "hearts": [
            {"x": 180, "y": 120},
            {"x": 420, "y": 150},
            {"x": 650, "y": 200},
            {"x": 350, "y": 420},
            {"x": 700, "y": 50},
        ],
        "requiredHearts": 5,
        "tips": [
            "Snake has limited length!",
            "Plan your bridge path carefully",
            "Snake can reposition by moving backward",
        ],
    },
    {
        "id": 3,
        "name": "Master Challenge",
        "description": "The ultimate test of cooperation and strategy!",
        "bunnyStart": [40, 300],
        "snakeStart": [40, 200],
        "water": [
            {"x": 100, "y": 100, "width": 200, "height": 60},
            {"x": 200, "y": 200, "width": 60, "height": 200},
            {"x": 350, "y": 150, "width": 180, "height": 100},
            {"x": 580, "y": 300, "width": 100, "height": 200},
            {"x": 100, "y": 450, "width": 400, "height": 60},
        ],
        "hearts": [
            {"x": 180, "y": 110},
            {"x": 220, "y": 250},
            {"x": 420, "y": 170},
            {"x": 620, "y": 350},
            {"x": 280, "y": 470},
            {"x": 750, "y": 100},
        ],
        "requiredHearts": 4,
        "tips": [
            "Only 4 hearts needed out of 6!",
            "Choose your path wisely",
            "Snake management is crucial",
        ],
    },
    {
        "id": 4,
        "name": "The Great Flood",
        "description": "Pure water challenge - Snakie must bridge everything!",
        "bunnyStart": [50, 250],
        "snakeStart": [100, 280],
        "water": [
            {"x": 120, "y": 0, "width": 680, "height": 600},
            {"x": 0, "y": 0, "width": 800, "height": 120},
            {"x": 0, "y": 480, "width": 800, "height": 120},
        ],
        "hearts": [
            {"x": 200, "y": 200},
            {"x": 400, "y": 350},
            {"x": 600, "y": 150},
            {"x": 750, "y": 300},
        ],
        "requiredHearts": 3,
        "tips": [
            "Everything is flooded!",
            "Snake must bridge ALL movements",
            "Plan your 8-segment snake path carefully!",
            "Only 3 hearts needed out of 4",
        ],
    },
]


class LevelCatalog:
    """Fixed, read-only collection of levels keyed by id."""

    def __init__(self, levels: Iterable[LevelData]):
        self._levels: Dict[int, LevelData] = {}
        for level in levels:
            if level.id in self._levels:
                raise LevelDataError(f"Duplicate level id {level.id}")
            self._levels[level.id] = level
        if not self._levels:
            raise LevelDataError("A level catalog needs at least one level")

    @classmethod
    def from_dicts(cls, levels: Iterable[Mapping[str, Any]]) -> "LevelCatalog":
        return cls(LevelData.from_dict(data) for data in levels)

    @classmethod
    def default(cls) -> "LevelCatalog":
        return cls.from_dicts(DEFAULT_LEVELS)

    def __len__(self) -> int:
        return len(self._levels)

    def __contains__(self, level_id: object) -> bool:
        return level_id in self._levels

    def __iter__(self) -> Iterator[LevelData]:
        return iter(self._levels[i] for i in self.ids)

    @property
    def ids(self) -> List[int]:
        return sorted(self._levels)

    @property
    def first_id(self) -> int:
        return self.ids[0]

    def get_level(self, level_id: int) -> Optional[LevelData]:
        level = self._levels.get(level_id)
        logger.debug("Level %s %s", level_id, "found" if level else "NOT FOUND")
        return level

    def require_level(self, level_id: int) -> LevelData:
        level = self.get_level(level_id)
        if level is None:
            raise LevelNotFound(level_id)
        return level

    def next_id(self, level_id: int) -> Optional[int]:
        later = [i for i in self.ids if i > level_id]
        return later[0] if later else None
