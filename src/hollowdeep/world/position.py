from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Position:
    """Integer grid coordinate; (0, 0) is top-left, y grows down."""

    x: int
    y: int

    def manhattan_distance(self, other: "Position") -> int:
        return abs(self.x - other.x) + abs(self.y - other.y)

    def chebyshev_distance(self, other: "Position") -> int:
        return max(abs(self.x - other.x), abs(self.y - other.y))

    def distance_squared(self, other: "Position") -> int:
        dx = self.x - other.x
        dy = self.y - other.y
        return dx * dx + dy * dy

    def euclidean_distance(self, other: "Position") -> float:
        return math.sqrt(self.distance_squared(other))
