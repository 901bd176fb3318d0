"""Timed events and easing functions."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable

__all__ = [
    "Event",
    "interpolate",
    "ease_linear",
    "ease_in",
    "ease_out",
    "ease_in_out",
]

Easing = Callable[[float], float]


def interpolate(start: float, end: float, part: float) -> float:
    """Linear blend from ``start`` (part 0) to ``end`` (part 1)."""
    return part * (end - start) + start


def ease_linear(value: float) -> float:
    """No easing: the fraction as a float."""
    return float(value)


def ease_in(value: float) -> float:
    return value * value


def ease_out(value: float) -> float:
    return 1 - ease_in(1 - value)


def ease_in_out(value: float) -> float:
    return interpolate(ease_in(value), ease_out(value), value)


@dataclass
class Event:
    """A span of time that started at ``start_time`` and lasts ``length`` seconds."""

    length: float = 0.0
    start_time: float = 0.0
    clock: Callable[[], float] = field(default=time.monotonic, repr=False, compare=False)

    def start(self, length: float) -> "Event":
        """Restart the event now with a new length."""
        self.length = length
        self.start_time = self.clock()
        return self

    def remainder(self) -> float:
        """Seconds left, never negative."""
        return max(0.0, self.length + self.start_time - self.clock())

    def part(self, easing: Easing = ease_linear) -> float:
        """Eased fraction of the event still remaining (1 at start, 0 when done)."""
        if self.length == 0.0:
            return 0.0
        return easing(self.remainder() / self.length)