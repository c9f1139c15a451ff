from dataclasses import dataclass

import numpy as np


@dataclass
class Vector2D:
    x: float
    y: float

    def __add__(self, other: "Vector2D") -> "Vector2D":
        return Vector2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vector2D") -> "Vector2D":
        return Vector2D(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> "Vector2D":
        return Vector2D(self.x * scalar, self.y * scalar)

    @staticmethod
    def of(pair) -> "Vector2D":
        x, y = pair
        return Vector2D(float(x), float(y))

    def copy(self) -> "Vector2D":
        return Vector2D(self.x, self.y)

    def as_tuple(self) -> tuple:
        return (self.x, self.y)

    def magnitude(self) -> float:
        return float(np.hypot(self.x, self.y))


@dataclass(frozen=True)
class Rect:
    """Axis-aligned box anchored at its top-left corner."""

    x: float
    y: float
    width: float
    height: float

    def __post_init__(self):
        if not (self.width > 0 and self.height > 0):
            raise ValueError(
                f"Rect size must be positive, got {self.width}x{self.height}"
            )

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def position(self) -> Vector2D:
        return Vector2D(self.x, self.y)

    @property
    def center(self) -> Vector2D:
        return Vector2D(self.x + self.width / 2, self.y + self.height / 2)

    def intersects(self, other: "Rect") -> bool:
        # Strict: rectangles sharing only an edge do not overlap
        return (
            self.x < other.x + other.width
            and self.x + self.width > other.x
            and self.y < other.y + other.height
            and self.y + self.height > other.y
        )

    def moved_to(self, position: Vector2D) -> "Rect":
        return Rect(position.x, position.y, self.width, self.height)

    def as_tuple(self) -> tuple:
        return (self.x, self.y, self.width, self.height)

    @staticmethod
    def at(position: Vector2D, size: Vector2D) -> "Rect":
        return Rect(position.x, position.y, size.x, size.y)

    @staticmethod
    def union(rects) -> "Rect":
        rects = list(rects)
        if not rects:
            raise ValueError("Cannot take the union of no rectangles")
        min_x = min(r.x for r in rects)
        min_y = min(r.y for r in rects)
        max_x = max(r.right for r in rects)
        max_y = max(r.bottom for r in rects)
        return Rect(min_x, min_y, max_x - min_x, max_y - min_y)
