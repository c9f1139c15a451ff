from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from ipycanvas import Canvas, MultiCanvas, hold_canvas

from meadow.internal.math import Rect
from meadow.snapshot import (
    BunnyView,
    CollectibleView,
    GamePhase,
    MessageKind,
    RenderSnapshot,
    SnakeView,
    StatusReport,
)


@dataclass(frozen=True)
class Colors:
    land: str = "#7ec850"
    water: str = "#3a7bd5"
    water_edge: str = "#2a5fa8"
    label: str = "#ffffff"
    panel: str = "rgba(28, 29, 36, 0.80)"

    bunny: str = "#f5f5f5"
    bunny_outline: str = "#5a5a5a"
    bunny_blocked: str = "#ff5f5f"
    bunny_collecting: str = "#ffd166"

    snake_head: str = "#2d8a3e"
    snake_body: str = "#4caf50"
    snake_bridge: str = "#f4c542"

    heart: str = "#e63946"

    message_info: str = "#ffffff"
    message_success: str = "#16c542"
    message_error: str = "#ff5f5f"


MESSAGE_COLORS: Dict[MessageKind, str] = {
    MessageKind.INFO: Colors.message_info,
    MessageKind.SUCCESS: Colors.message_success,
    MessageKind.ERROR: Colors.message_error,
}


class Renderer:
    """Draws session snapshots on a layered ipycanvas widget."""

    class RenderLayer(Enum):
        TERRAIN = "terrain"
        ENTITIES = "entities"
        HUD = "hud"

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height

        self.canvas: MultiCanvas = MultiCanvas(
            len(Renderer.RenderLayer),
            width=width,
            height=height,
        )
        self.canvas.layout.width = f"{width}px"
        self.canvas.layout.height = f"{height}px"
        self.canvas.layout.border = "2px solid #444444"

        self._layers: Dict[Renderer.RenderLayer, Canvas] = {
            name: self.canvas[i]
            for i, name in enumerate(Renderer.RenderLayer)
        }
        # Terrain only changes with the level
        self._terrain_key: Optional[Tuple[int, Tuple[Rect, ...]]] = None

    @property
    def widget(self) -> MultiCanvas:
        return self.canvas

    def mark_all_dirty(self):
        self._terrain_key = None

    def draw(self, snapshot: RenderSnapshot, status: StatusReport):
        terrain_key = (snapshot.level_id, snapshot.water_regions)
        if terrain_key != self._terrain_key:
            self._terrain_key = terrain_key
            self._render_terrain(self._layers[Renderer.RenderLayer.TERRAIN], snapshot)

        self._render_entities(self._layers[Renderer.RenderLayer.ENTITIES], snapshot)
        self._render_hud(self._layers[Renderer.RenderLayer.HUD], snapshot, status)

    def _clear(self, canvas: Canvas, color=None):
        canvas.clear()
        if color:
            canvas.fill_style = color
            canvas.fill_rect(0, 0, self.width, self.height)

    def _render_terrain(self, canvas: Canvas, snapshot: RenderSnapshot):
        with hold_canvas(canvas):
            self._clear(canvas, Colors.land)
            canvas.line_width = 2
            for region in snapshot.water_regions:
                canvas.fill_style = Colors.water
                canvas.fill_rect(region.x, region.y, region.width, region.height)
                canvas.stroke_style = Colors.water_edge
                canvas.stroke_rect(region.x, region.y, region.width, region.height)

    def _render_entities(self, canvas: Canvas, snapshot: RenderSnapshot):
        with hold_canvas(canvas):
            self._clear(canvas)
            for collectible in snapshot.collectibles:
                self._draw_heart(canvas, collectible)
            self._draw_snake(canvas, snapshot.snake)
            self._draw_bunny(canvas, snapshot.bunny)

    def _draw_heart(self, canvas: Canvas, collectible: CollectibleView):
        if collectible.collected:
            return
        bounds = collectible.bounds
        lobe = bounds.width / 4.0
        cx, cy = bounds.center.x, bounds.center.y

        canvas.fill_style = Colors.heart
        canvas.begin_path()
        canvas.arc(cx - lobe, bounds.y + lobe * 1.5, lobe, math.pi, 0)
        canvas.arc(cx + lobe, bounds.y + lobe * 1.5, lobe, math.pi, 0)
        canvas.line_to(cx, bounds.bottom)
        canvas.close_path()
        canvas.fill()

    def _draw_snake(self, canvas: Canvas, snake: SnakeView):
        # Tail first so the head ends up on top
        for index in reversed(range(len(snake.segments))):
            rect = snake.segments[index]
            center = rect.center
            radius = rect.width / 2.0

            canvas.fill_style = Colors.snake_head if index == 0 else Colors.snake_body
            canvas.begin_path()
            canvas.arc(center.x, center.y, radius, 0, 2 * math.pi)
            canvas.fill()

            if snake.bridging:
                canvas.stroke_style = Colors.snake_bridge
                canvas.line_width = 3
                canvas.begin_path()
                canvas.arc(center.x, center.y, radius + 1.5, 0, 2 * math.pi)
                canvas.stroke()

    def _draw_bunny(self, canvas: Canvas, bunny: BunnyView):
        rect = bunny.bounds
        canvas.fill_style = Colors.bunny
        canvas.fill_rect(rect.x, rect.y, rect.width, rect.height)

        outline = Colors.bunny_outline
        if bunny.blocked:
            outline = Colors.bunny_blocked
        elif bunny.collecting:
            outline = Colors.bunny_collecting
        canvas.stroke_style = outline
        canvas.line_width = 2
        canvas.stroke_rect(rect.x, rect.y, rect.width, rect.height)

        # ears
        ear_w = rect.width / 5.0
        ear_h = rect.height / 2.5
        canvas.fill_style = Colors.bunny
        canvas.fill_rect(rect.x + ear_w, rect.y - ear_h, ear_w, ear_h)
        canvas.fill_rect(rect.right - 2 * ear_w, rect.y - ear_h, ear_w, ear_h)

    def _render_hud(self, canvas: Canvas, snapshot: RenderSnapshot, status: StatusReport):
        with hold_canvas(canvas):
            self._clear(canvas)

            canvas.fill_style = Colors.panel
            canvas.fill_rect(0, 0, self.width, 30)

            canvas.fill_style = Colors.label
            canvas.font = "14px monospace"
            canvas.text_align = "left"
            canvas.fill_text(f"Level {status.level_id}: {status.level_name}", 10, 20)
            canvas.fill_text(f"Hearts: {status.score_text}", 300, 20)
            canvas.fill_text(f"Score: {status.score}", 470, 20)
            canvas.fill_text(
                f"Snake: {status.snake_length}/{status.snake_max_length}",
                self.width - 120,
                20,
            )

            if status.message:
                canvas.fill_style = Colors.panel
                canvas.fill_rect(0, self.height - 30, self.width, 30)
                canvas.fill_style = MESSAGE_COLORS[status.message_kind]
                canvas.font = "13px monospace"
                canvas.text_align = "center"
                canvas.fill_text(status.message, self.width / 2, self.height - 10)

            if snapshot.phase is not GamePhase.PLAYING:
                self._draw_overlay(canvas, snapshot.phase)
            canvas.text_align = "left"

    def _draw_overlay(self, canvas: Canvas, phase: GamePhase):
        titles = {
            GamePhase.PAUSED: "PAUSED",
            GamePhase.LEVEL_COMPLETE: "LEVEL COMPLETE",
            GamePhase.GAME_COMPLETE: "ALL LEVELS COMPLETE",
        }
        canvas.fill_style = "rgba(0, 0, 0, 0.55)"
        canvas.fill_rect(0, self.height / 2 - 30, self.width, 60)
        canvas.fill_style = Colors.label
        canvas.font = "24px monospace"
        canvas.text_align = "center"
        canvas.fill_text(titles[phase], self.width / 2, self.height / 2 + 8)
