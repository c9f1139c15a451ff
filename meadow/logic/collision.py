"""Movement validation and pickup detection.

This module is the single authority on whether a character may occupy a
proposed position. Denials are reported as verdicts, never raised.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence

from meadow.internal.math import Rect, Vector2D

if TYPE_CHECKING:
    from meadow.entities.bunny import Bunny
    from meadow.entities.collectible import Collectible
    from meadow.entities.snake import Snake
    from meadow.logic.terrain import Terrain

logger = logging.getLogger(__name__)


class MoveVerdict(Enum):
    ALLOW = "allow"
    ALLOW_ESCAPE = "allow_escape"    # leaving water for dry land
    ALLOW_BRIDGE = "allow_bridge"    # entering water onto a bridge segment
    ALLOW_RETREAT = "allow_retreat"  # fewer water regions than before
    DENY_BOUNDS = "deny_bounds"
    DENY_WATER = "deny_water"

    @property
    def allowed(self) -> bool:
        return self in (
            MoveVerdict.ALLOW,
            MoveVerdict.ALLOW_ESCAPE,
            MoveVerdict.ALLOW_BRIDGE,
            MoveVerdict.ALLOW_RETREAT,
        )


def rects_overlap(a: Rect, b: Rect) -> bool:
    return a.intersects(b)


def water_collisions(bounds: Rect, water_regions: Iterable[Rect]) -> List[Rect]:
    return [water for water in water_regions if rects_overlap(bounds, water)]


def _water_verdict(
    current_hits: int,
    new_hits: int,
    new_bounds: Rect,
    snake: Optional[Snake],
) -> MoveVerdict:
    if current_hits > 0 and new_hits == 0:
        return MoveVerdict.ALLOW_ESCAPE

    if new_hits > 0:
        if snake is not None and snake.can_support(new_bounds):
            return MoveVerdict.ALLOW_BRIDGE
        return MoveVerdict.DENY_WATER

    return MoveVerdict.ALLOW


def can_bunny_move_to(
    bunny: Bunny,
    proposed: Vector2D,
    snake: Optional[Snake],
    water_regions: Sequence[Rect],
) -> bool:
    """Terrain rule for the bunny, without canvas bounds or fallback."""
    new_bounds = bunny.bounds_at(proposed)
    current_hits = len(water_collisions(bunny.bounds(), water_regions))
    new_hits = len(water_collisions(new_bounds, water_regions))
    return _water_verdict(current_hits, new_hits, new_bounds, snake).allowed


def check_bunny_move(
    bunny: Bunny,
    proposed: Vector2D,
    snake: Optional[Snake],
    terrain: Terrain,
) -> MoveVerdict:
    """Full decision for a bunny step.

    Canvas bounds are checked first and always win. A move the water rule
    denies is still allowed when it reduces the number of water regions the
    bunny overlaps, so a bunny stranded in water by a vanished bridge can
    always work its way out.
    """
    new_bounds = bunny.bounds_at(proposed)
    if not terrain.is_within_bounds(new_bounds):
        return MoveVerdict.DENY_BOUNDS

    current_hits = terrain.overlap_count(bunny.bounds())
    new_hits = terrain.overlap_count(new_bounds)
    verdict = _water_verdict(current_hits, new_hits, new_bounds, snake)

    if not verdict.allowed and new_hits < current_hits:
        logger.debug(
            "Bunny retreating from water: %d -> %d regions", current_hits, new_hits
        )
        return MoveVerdict.ALLOW_RETREAT
    return verdict


def can_snake_move_to(snake: Snake, proposed_head: Vector2D, terrain: Terrain) -> bool:
    # The snake may enter any terrain; only the canvas edge stops it
    return terrain.is_within_bounds(snake.bounds_at(proposed_head))


def find_collectible(
    bounds: Rect,
    collectibles: Iterable[Collectible],
) -> Optional[Collectible]:
    """First available collectible overlapping ``bounds``, in list order."""
    for collectible in collectibles:
        if collectible.available and rects_overlap(bounds, collectible.bounds()):
            return collectible
    return None
