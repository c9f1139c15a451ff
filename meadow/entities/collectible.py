from __future__ import annotations

from dataclasses import dataclass, field

from meadow.internal.math import Rect, Vector2D


@dataclass(eq=False)
class Collectible:
    """Heart carrot picked up by the bunny.

    ``collected`` only goes from False to True until the level is rebuilt.
    ``being_collected`` is held from the moment of pickup until the start of
    the next tick so that repeated checks within one tick cannot count the
    same item twice.
    """

    position: Vector2D
    size: Vector2D = field(default_factory=lambda: Vector2D(20.0, 20.0))
    collected: bool = False
    being_collected: bool = False

    def bounds(self) -> Rect:
        return Rect.at(self.position, self.size)

    @property
    def available(self) -> bool:
        return not (self.collected or self.being_collected)

    def collect(self) -> bool:
        if not self.available:
            return False
        self.being_collected = True
        self.collected = True
        return True

    def release_guard(self) -> None:
        self.being_collected = False
