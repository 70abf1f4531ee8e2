# invaders_server/utils/helpers.py
"""Utility functions and helpers."""

import itertools
import math


def calculate_distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """Calculate distance between two points."""
    return math.hypot(x2 - x1, y2 - y1)


def is_within(a, b, radius: float) -> bool:
    """Check whether two positioned entities are closer than radius."""
    return calculate_distance(a.x, a.y, b.x, b.y) < radius


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(value, high))


def is_in_arena(x: float, y: float, width: float, height: float, margin: float) -> bool:
    """Check if a point lies strictly inside the arena grown by margin."""
    return -margin < x < width + margin and -margin < y < height + margin


class IdGenerator:
    """Monotonic integer ids, unique within one session."""

    def __init__(self, start: int = 1):
        self._counter = itertools.count(start)

    def next_id(self) -> int:
        return next(self._counter)
