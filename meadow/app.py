from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

from ipyevents import Event

from meadow.config import GameConfig
from meadow.internal.timing import FrameClock
from meadow.levels import LevelCatalog
from meadow.logic.input import KeyboardState
from meadow.render import Renderer
from meadow.session import GameSession, SessionEvent, SessionEventData

logger = logging.getLogger(__name__)


class MeadowGame:
    """
    Notebook front end: keyboard in, canvas out.

    Parameters
    ----------
    catalog: LevelCatalog | None
        Levels to play; the built-in four when omitted.
    config: GameConfig | None
        Tuning constants shared by the session and the renderer.
    frame_interval: float
        Seconds between two logic ticks of the asyncio loop.

    Display ``game.widget`` in a cell, then call ``game.start()``.
    Arrow keys move the bunny, SPACE toggles bridge mode, WASD extends the
    snake, P pauses and R resets / continues / restarts.
    """

    def __init__(
        self,
        *,
        catalog: Optional[LevelCatalog] = None,
        config: Optional[GameConfig] = None,
        start_level: Optional[int] = None,
        frame_interval: float = 1 / 60.0,
    ) -> None:
        self.config = config or GameConfig()
        self.session = GameSession(catalog, self.config, start_level=start_level)
        self.frame_interval = frame_interval

        self.keyboard = KeyboardState()
        self.clock = FrameClock(
            self.config.max_frame_delta,
            self.config.default_frame_delta,
        )
        self.renderer = Renderer(
            int(self.config.canvas_width),
            int(self.config.canvas_height),
        )

        self._logic_task: Optional[asyncio.Task] = None
        self._draw_task: Optional[asyncio.Task] = None

        self.session.subscribe(self._on_session_event)
        self._bind_events()
        self._draw()
        self._focus()

    @property
    def widget(self):
        return self.renderer.widget

    # ------------------------------------------------------------------ #
    # Input binding
    # ------------------------------------------------------------------ #
    def _bind_events(self) -> None:
        self._event = Event(
            source=self.renderer.widget,
            watched_events=["keydown", "keyup"],
            prevent_default_action=True,
            stop_propagation=True,
        )
        self._event.on_dom_event(self._handle_dom_event)

    def _handle_dom_event(self, event: Dict[str, Any]) -> None:
        self.keyboard.handle_dom_event(event)

    def _focus(self) -> None:
        # Key events only reach a focused canvas
        try:
            self.renderer.widget.focus()
        except Exception:
            logger.debug("Canvas focus unavailable", exc_info=True)

    # ------------------------------------------------------------------ #
    # Game loop & rendering
    # ------------------------------------------------------------------ #
    def start(self) -> None:
        self.clock.reset()
        if self._logic_task is None or self._logic_task.done():
            self._logic_task = asyncio.create_task(self._logic_loop())
        if self._draw_task is None or self._draw_task.done():
            self._draw_task = asyncio.create_task(self._draw_loop())
        self._focus()

    def stop(self) -> None:
        if self._logic_task and not self._logic_task.done():
            self._logic_task.cancel()
        self._logic_task = None
        if self._draw_task and not self._draw_task.done():
            self._draw_task.cancel()
        self._draw_task = None
        self.keyboard.clear()

    async def _logic_loop(self) -> None:
        try:
            while True:
                self._update()
                await asyncio.sleep(self.frame_interval)
        except asyncio.CancelledError:
            pass

    async def _draw_loop(self) -> None:
        try:
            while True:
                self._draw()
                await asyncio.sleep(self.frame_interval)
        except asyncio.CancelledError:
            pass

    def _update(self) -> None:
        delta = self.clock.tick()
        frame = self.keyboard.frame()
        self.session.apply_global_input(frame)
        self.session.tick(delta, frame)

    def _draw(self) -> None:
        self.renderer.draw(self.session.snapshot(), self.session.status())

    def _on_session_event(self, data: SessionEventData) -> None:
        if data.event is SessionEvent.LEVEL_LOADED:
            # New level: drop keys held across the swap and redraw terrain
            self.keyboard.clear()
            self.renderer.mark_all_dirty()
        elif data.event is SessionEvent.COLLECTED:
            logger.debug("Collected on level %d, score %d", data.level_id, data.score)
