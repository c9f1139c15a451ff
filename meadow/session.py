"""Level and session lifecycle.

``GameSession`` owns the current ``World`` and the game phase. External
collaborators drive it with ``tick`` and the session actions, and read it
back through ``snapshot`` and ``status``.

Score policy: the score counts every item collected in completed levels
plus the items collected in the current attempt. Resetting an unfinished
level, or leaving it for another one, takes that attempt's items back off
the score, so the running level score always starts from zero. Once a level
is complete its items stay banked, so replaying it by reset or by loading
it again adds its items a second time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from graphviz import Digraph

from meadow.config import GameConfig
from meadow.errors import LevelNotFound
from meadow.fsm.core import EventData, Machine
from meadow.internal.timing import clamp_delta
from meadow.levels import LevelCatalog, LevelData
from meadow.logic.input import InputFrame
from meadow.simulation import TickReport, step_world
from meadow.snapshot import (
    BunnyView,
    CollectibleView,
    GamePhase,
    MessageKind,
    RenderSnapshot,
    SnakeView,
    StatusReport,
)
from meadow.world import World

logger = logging.getLogger(__name__)


class SessionEvent(Enum):
    COLLECTED = "collected"
    LEVEL_LOADED = "level_loaded"
    LEVEL_RESET = "level_reset"
    LEVEL_COMPLETE = "level_complete"
    GAME_COMPLETE = "game_complete"
    PAUSED = "paused"
    RESUMED = "resumed"
    RESTARTED = "restarted"
    LOAD_FAILED = "load_failed"


@dataclass(frozen=True)
class SessionEventData:
    event: SessionEvent
    level_id: int
    score: int
    details: Dict[str, Any] = field(default_factory=dict)


Listener = Callable[[SessionEventData], None]


@dataclass(frozen=True)
class SessionState:
    level_id: int
    score: int
    phase: GamePhase
    elapsed: float


class GameSession:
    def __init__(
        self,
        catalog: Optional[LevelCatalog] = None,
        config: Optional[GameConfig] = None,
        start_level: Optional[int] = None,
    ):
        self.catalog = catalog or LevelCatalog.default()
        self.config = config or GameConfig()

        self.score: int = 0
        self.elapsed: float = 0.0
        self.message: str = ""
        self.message_kind: MessageKind = MessageKind.INFO
        self._listeners: List[Listener] = []

        self._machine = Machine(states=GamePhase, initial_state=GamePhase.PLAYING)
        self._setup_phase_transitions()

        level = self.catalog.require_level(
            self.catalog.first_id if start_level is None else start_level
        )
        self.level_id: int = level.id
        self.world: World = World.from_level(level, self.config)
        self._install(self.world)

    def _setup_phase_transitions(self) -> None:
        m = self._machine
        m.add_transition("pause", GamePhase.PLAYING, GamePhase.PAUSED)
        m.add_transition("resume", GamePhase.PAUSED, GamePhase.PLAYING)
        m.add_transition("complete", GamePhase.PLAYING, GamePhase.LEVEL_COMPLETE)
        m.add_transition("finish", GamePhase.LEVEL_COMPLETE, GamePhase.GAME_COMPLETE)
        m.add_transition("start", "*", GamePhase.PLAYING)

        m.on_enter(GamePhase.LEVEL_COMPLETE, self._on_level_complete)
        m.on_enter(GamePhase.GAME_COMPLETE, self._on_game_complete)

    # ------------------------------------------------------------------ #
    # Read side
    # ------------------------------------------------------------------ #
    @property
    def phase(self) -> GamePhase:
        return self._machine.state

    @property
    def level(self) -> LevelData:
        return self.world.level

    @property
    def state(self) -> SessionState:
        return SessionState(
            level_id=self.level_id,
            score=self.score,
            phase=self.phase,
            elapsed=self.elapsed,
        )

    def snapshot(self) -> RenderSnapshot:
        world = self.world
        bunny = world.bunny
        snake = world.snake
        return RenderSnapshot(
            phase=self.phase,
            level_id=self.level_id,
            canvas_width=world.terrain.width,
            canvas_height=world.terrain.height,
            water_regions=world.terrain.water_regions,
            bunny=BunnyView(
                bounds=bunny.bounds(),
                state=bunny.state,
                blocked=bunny.blocked_time > 0,
                collecting=bunny.collecting_time > 0,
            ),
            snake=SnakeView(
                segments=tuple(snake.segment_bounds()),
                bridging=snake.bridge_mode,
                length=snake.length,
                max_length=snake.max_length,
            ),
            collectibles=tuple(
                CollectibleView(bounds=c.bounds(), collected=c.collected)
                for c in world.collectibles
            ),
        )

    def status(self) -> StatusReport:
        world = self.world
        return StatusReport(
            phase=self.phase,
            level_id=self.level_id,
            level_name=world.level.name,
            score=self.score,
            collected=world.collected_count,
            required=world.required_count,
            total=world.total_count,
            snake_length=world.snake.length,
            snake_max_length=world.snake.max_length,
            elapsed=self.elapsed,
            message=self.message,
            message_kind=self.message_kind,
            tips=world.level.tips,
        )

    def phase_diagram(self) -> Digraph:
        return self._machine.to_graphviz()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------ #
    # Simulation
    # ------------------------------------------------------------------ #
    def tick(self, delta: float, frame: Optional[InputFrame] = None) -> TickReport:
        delta = clamp_delta(
            delta,
            self.config.max_frame_delta,
            self.config.default_frame_delta,
        )
        if not self._machine.is_state(GamePhase.PLAYING):
            return TickReport(delta=delta)

        self.elapsed += delta
        self.world.release_guards()
        report = step_world(self.world, frame or InputFrame.idle(), delta, self.config)

        for collectible in report.collected:
            self.score += 1
            self._emit(SessionEvent.COLLECTED, position=collectible.position.as_tuple())

        if self.world.is_complete:
            self._machine.trigger("complete")
        return report

    def apply_global_input(self, frame: InputFrame) -> bool:
        """Handle pause and the context-sensitive action key."""
        handled = False
        if frame.pause_pressed:
            handled = self.toggle_pause() or handled

        if frame.action_pressed:
            phase = self.phase
            if phase is GamePhase.PLAYING:
                handled = self.reset_current_level() or handled
            elif phase is GamePhase.LEVEL_COMPLETE:
                handled = self.advance_level() or handled
            elif phase is GamePhase.GAME_COMPLETE:
                handled = self.restart_session() or handled
        return handled

    # ------------------------------------------------------------------ #
    # Session actions
    # ------------------------------------------------------------------ #
    def load_level(self, level_id: int) -> bool:
        try:
            level = self.catalog.require_level(level_id)
        except LevelNotFound as exc:
            logger.warning("Failed to load level: %s", exc)
            self._set_message(f"Failed to load level {level_id}", MessageKind.ERROR)
            self._emit(SessionEvent.LOAD_FAILED, requested=level_id)
            return False

        world = World.from_level(level, self.config)
        self._drop_attempt_score()
        self._install(world)
        return True

    def reset_current_level(self) -> bool:
        if self.phase is GamePhase.GAME_COMPLETE:
            return False

        world = World.from_level(self.world.level, self.config)
        self._drop_attempt_score()
        self.world = world
        self._machine.trigger("start")
        self._set_message(self._playing_message(), MessageKind.INFO)
        logger.info("Level %d reset", self.level_id)
        self._emit(SessionEvent.LEVEL_RESET)
        return True

    def advance_level(self) -> bool:
        if not self._machine.is_state(GamePhase.LEVEL_COMPLETE):
            return False

        next_id = self.catalog.next_id(self.level_id)
        if next_id is None:
            return self._machine.trigger("finish")
        return self.load_level(next_id)

    def restart_session(self) -> bool:
        level = self.catalog.require_level(self.catalog.first_id)
        world = World.from_level(level, self.config)
        self.score = 0
        self.elapsed = 0.0
        logger.info("Restarting session from level %d", level.id)
        self._install(world)
        self._emit(SessionEvent.RESTARTED)
        return True

    def toggle_pause(self) -> bool:
        if self._machine.trigger("pause"):
            self._set_message("Game Paused - Press P to resume", MessageKind.INFO)
            self._emit(SessionEvent.PAUSED)
            return True
        if self._machine.trigger("resume"):
            self._set_message(
                f"Level {self.level_id} - Work together to collect all hearts!",
                MessageKind.INFO,
            )
            self._emit(SessionEvent.RESUMED)
            return True
        return False

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #
    def _drop_attempt_score(self) -> None:
        # A completed level keeps its items
        if self.phase in (GamePhase.PLAYING, GamePhase.PAUSED):
            self.score -= self.world.collected_count

    def _install(self, world: World) -> None:
        self.world = world
        self.level_id = world.level.id
        self._machine.trigger("start")
        self._set_message(self._playing_message(), MessageKind.INFO)
        logger.info(
            "Level %d loaded: %s (%d/%d collectibles required, %d water regions)",
            world.level.id,
            world.level.name,
            world.required_count,
            world.total_count,
            len(world.terrain.water_regions),
        )
        self._emit(SessionEvent.LEVEL_LOADED, name=world.level.name)

    def _playing_message(self) -> str:
        return f"Level {self.level_id} - Snake: Press SPACE to bridge, then WASD to extend!"

    def _on_level_complete(self, data: EventData) -> None:
        collected = self.world.collected_count
        required = self.world.required_count
        total = self.world.total_count

        message = f"Level {self.level_id} Complete! "
        if collected == total:
            message += f"Perfect score: {collected}/{total} hearts! "
        else:
            message += f"{collected}/{required} hearts collected! "
        message += "Press R to continue"

        self._set_message(message, MessageKind.SUCCESS)
        logger.info("Level %d complete with %d/%d", self.level_id, collected, total)
        self._emit(SessionEvent.LEVEL_COMPLETE, collected=collected)

    def _on_game_complete(self, data: EventData) -> None:
        self._set_message(
            "CONGRATULATIONS! You completed all levels! "
            "Press R to play again from Level 1!",
            MessageKind.SUCCESS,
        )
        logger.info("All levels complete, final score %d", self.score)
        self._emit(SessionEvent.GAME_COMPLETE)

    def _set_message(self, message: str, kind: MessageKind) -> None:
        self.message = message
        self.message_kind = kind

    def _emit(self, event: SessionEvent, **details: Any) -> None:
        data = SessionEventData(
            event=event,
            level_id=self.level_id,
            score=self.score,
            details=details,
        )
        for listener in list(self._listeners):
            listener(data)
