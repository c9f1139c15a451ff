from __future__ import annotations

import logging
import math
import time
from typing import Callable, Optional

from meadow.config import DEFAULT_FRAME_DELTA, MAX_FRAME_DELTA

logger = logging.getLogger(__name__)


def clamp_delta(
    delta: float,
    max_delta: float = MAX_FRAME_DELTA,
    default: float = DEFAULT_FRAME_DELTA,
) -> float:
    """Return ``delta`` if it is a sane frame time, else ``default``.

    Negative, non-finite and implausibly large deltas (a suspended tab, a
    debugger pause) are replaced rather than propagated so a single frame
    never teleports an entity past a collision check.
    """
    try:
        value = float(delta)
    except (TypeError, ValueError):
        logger.debug("Non-numeric frame delta %r replaced by %s", delta, default)
        return default

    if not math.isfinite(value) or value < 0 or value > max_delta:
        logger.debug("Frame delta %s out of range, using %s", value, default)
        return default
    return value


class FrameClock:
    def __init__(
        self,
        max_delta: float = MAX_FRAME_DELTA,
        default: float = DEFAULT_FRAME_DELTA,
        now: Optional[Callable[[], float]] = None,
    ):
        self.max_delta = max_delta
        self.default = default
        self._now = now or (lambda: time.perf_counter() * 1000.0)
        self._last: Optional[float] = None

    def reset(self) -> None:
        self._last = None

    def tick(self) -> float:
        """Milliseconds since the previous tick, clamped."""
        current = self._now()
        if self._last is None:
            self._last = current
            return self.default
        delta = current - self._last
        self._last = current
        return clamp_delta(delta, self.max_delta, self.default)
