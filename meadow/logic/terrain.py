from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Tuple

import numpy as np

from meadow.config import CANVAS_HEIGHT, CANVAS_WIDTH
from meadow.entities.core import CharacterKind
from meadow.internal.math import Rect


class TerrainKind(Enum):
    LAND = "land"
    WATER = "water"


@dataclass(frozen=True)
class TerrainRule:
    bunny_passable: bool
    snake_passable: bool


TERRAIN_RULES = {
    TerrainKind.LAND: TerrainRule(bunny_passable=True, snake_passable=True),
    TerrainKind.WATER: TerrainRule(bunny_passable=False, snake_passable=True),
}


class Terrain:
    """Water regions of a level inside a fixed-size canvas.

    Everything inside the canvas that no water region covers is land. The
    region set is immutable; loading another level builds a new Terrain.
    """

    def __init__(
        self,
        water_regions: Iterable[Rect] = (),
        width: float = CANVAS_WIDTH,
        height: float = CANVAS_HEIGHT,
    ):
        self.width = width
        self.height = height
        self._regions: Tuple[Rect, ...] = tuple(water_regions)
        # One row per region: left, top, right, bottom
        self._extents = np.array(
            [(r.x, r.y, r.x + r.width, r.y + r.height) for r in self._regions],
            dtype=float,
        ).reshape(-1, 4)

    @property
    def water_regions(self) -> Tuple[Rect, ...]:
        return self._regions

    def with_regions(self, water_regions: Iterable[Rect]) -> "Terrain":
        return Terrain(water_regions, self.width, self.height)

    def classify(self, bounds: Rect) -> TerrainKind:
        if self._overlap_mask(bounds).any():
            return TerrainKind.WATER
        return TerrainKind.LAND

    def water_overlaps(self, bounds: Rect) -> List[Rect]:
        mask = self._overlap_mask(bounds)
        return [region for region, hit in zip(self._regions, mask) if hit]

    def overlap_count(self, bounds: Rect) -> int:
        return int(np.count_nonzero(self._overlap_mask(bounds)))

    def is_within_bounds(self, bounds: Rect) -> bool:
        return (
            bounds.x >= 0
            and bounds.y >= 0
            and bounds.x + bounds.width <= self.width
            and bounds.y + bounds.height <= self.height
        )

    def is_passable(self, kind: CharacterKind, bounds: Rect) -> bool:
        rule = TERRAIN_RULES[self.classify(bounds)]
        if kind is CharacterKind.BUNNY:
            return rule.bunny_passable
        if kind is CharacterKind.SNAKE:
            return rule.snake_passable
        raise TypeError(f"Unknown character kind: {kind!r}")

    def _overlap_mask(self, bounds: Rect) -> np.ndarray:
        ext = self._extents
        return (
            (bounds.x < ext[:, 2])
            & (bounds.x + bounds.width > ext[:, 0])
            & (bounds.y < ext[:, 3])
            & (bounds.y + bounds.height > ext[:, 1])
        )

    def __repr__(self) -> str:
        return (
            f"Terrain(water_regions={len(self._regions)}, "
            f"size={self.width}x{self.height})"
        )
