from __future__ import annotations

from dataclasses import dataclass
from typing import List, Union

from meadow.config import GameConfig
from meadow.entities.bunny import Bunny
from meadow.entities.collectible import Collectible
from meadow.entities.snake import Snake
from meadow.internal.math import Vector2D
from meadow.levels import LevelData
from meadow.logic.terrain import Terrain

Character = Union[Bunny, Snake]


@dataclass
class World:
    """Everything that lives inside one attempt at a level.

    A World is built whole from level data and replaced whole on the next
    load or reset; nothing outside the session holds on to its parts.
    """

    level: LevelData
    terrain: Terrain
    bunny: Bunny
    snake: Snake
    collectibles: List[Collectible]

    @classmethod
    def from_level(cls, level: LevelData, config: GameConfig) -> "World":
        terrain = Terrain(
            level.water_regions,
            width=config.canvas_width,
            height=config.canvas_height,
        )
        size = Vector2D(config.collectible_size, config.collectible_size)
        collectibles = [
            Collectible(position=Vector2D.of(pos), size=size)
            for pos in level.collectible_positions
        ]
        return cls(
            level=level,
            terrain=terrain,
            bunny=Bunny.spawn(level.bunny_start_vector, config),
            snake=Snake.spawn(level.snake_start_vector, config),
            collectibles=collectibles,
        )

    @property
    def characters(self) -> List[Character]:
        # Update order: the bunny moves against last tick's bridge
        return [self.bunny, self.snake]

    @property
    def collected_count(self) -> int:
        return sum(1 for c in self.collectibles if c.collected)

    @property
    def total_count(self) -> int:
        return len(self.collectibles)

    @property
    def required_count(self) -> int:
        return self.level.required_count

    @property
    def is_complete(self) -> bool:
        return self.collected_count >= self.required_count

    def release_guards(self) -> None:
        for collectible in self.collectibles:
            collectible.release_guard()
