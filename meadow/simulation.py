from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from meadow.config import GameConfig
from meadow.entities.bunny import Bunny
from meadow.entities.collectible import Collectible
from meadow.entities.core import CharacterKind, Direction, MotionState
from meadow.entities.snake import Snake
from meadow.internal.math import Vector2D
from meadow.logic.collision import (
    MoveVerdict,
    can_snake_move_to,
    check_bunny_move,
    find_collectible,
)
from meadow.logic.input import InputFrame
from meadow.logic.terrain import Terrain
from meadow.world import Character, World

logger = logging.getLogger(__name__)


@dataclass
class TickReport:
    delta: float = 0.0
    bunny_verdict: Optional[MoveVerdict] = None
    collected: List[Collectible] = field(default_factory=list)
    bridge_toggled: bool = False
    snake_moved: bool = False
    evicted: Optional[Vector2D] = None


def step_world(
    world: World,
    frame: InputFrame,
    delta: float,
    config: GameConfig,
) -> TickReport:
    report = TickReport(delta=delta)
    for character in world.characters:
        update_character(character, world, frame, delta, config, report)
    return report


def update_character(
    character: Character,
    world: World,
    frame: InputFrame,
    delta: float,
    config: GameConfig,
    report: TickReport,
) -> None:
    if character.kind is CharacterKind.BUNNY:
        update_bunny(character, world, frame, delta, config, report)
    elif character.kind is CharacterKind.SNAKE:
        update_snake(character, world, frame, delta, config, report)
    else:
        raise TypeError(f"Unknown character kind: {character.kind!r}")


def update_bunny(
    bunny: Bunny,
    world: World,
    frame: InputFrame,
    delta: float,
    config: GameConfig,
    report: TickReport,
) -> None:
    direction = frame.bunny_direction
    if direction.is_none:
        if bunny.state is not MotionState.COLLECTING:
            bunny.state = MotionState.IDLE
    else:
        proposed = bunny.position + direction.vector * bunny.speed
        verdict = check_bunny_move(bunny, proposed, world.snake, world.terrain)
        report.bunny_verdict = verdict
        if verdict.allowed:
            bunny.update_position(proposed)
            bunny.state = MotionState.MOVING
        else:
            logger.debug("Bunny move to %s denied: %s", proposed, verdict.value)
            # Re-show the indicator only when the bunny was not already stuck
            if bunny.state is not MotionState.BLOCKED:
                bunny.show_blocked(config.blocked_indicator_time)
            bunny.state = MotionState.BLOCKED

    # No new pickup until the collect animation has finished
    if bunny.collecting_time <= 0:
        collectible = collect_items(world)
        if collectible is not None:
            report.collected.append(collectible)
            bunny.start_collecting(config.collecting_time)

    bunny.tick_effects(delta)


def collect_items(world: World) -> Optional[Collectible]:
    """Collect at most one item under the bunny."""
    collectible = find_collectible(world.bunny.bounds(), world.collectibles)
    if collectible is not None and collectible.collect():
        return collectible
    return None


def update_snake(
    snake: Snake,
    world: World,
    frame: InputFrame,
    delta: float,
    config: GameConfig,
    report: TickReport,
) -> None:
    if snake.press_bridge(frame.bridge_held):
        report.bridge_toggled = True
        logger.debug("Bridge mode %s", "on" if snake.bridge_mode else "off")

    if not snake.bridge_mode:
        return

    snake.move_timer += delta
    if snake.move_timer < config.snake_move_delay:
        return

    direction = frame.snake_direction
    if direction.is_none:
        snake.state = MotionState.IDLE
        return

    tail = snake.tail if snake.length == snake.max_length else None
    if advance_snake(snake, direction, world.terrain):
        report.snake_moved = True
        report.evicted = tail
    snake.move_timer = 0.0
    snake.state = MotionState.MOVING


def advance_snake(snake: Snake, direction: Direction, terrain: Terrain) -> bool:
    """Extend the chain one step; dropped silently off-canvas or when idle."""
    if not snake.bridge_mode or direction.is_none:
        return False

    new_head = snake.next_head(direction)
    if not can_snake_move_to(snake, new_head, terrain):
        return False

    snake.push_head(new_head)
    logger.debug("Snake head at %s, %d/%d segments", new_head, snake.length, snake.max_length)
    return True
