from __future__ import annotations

import logging
from typing import List, Set

from .map import Map
from .position import Position

logger = logging.getLogger(__name__)

# Octant transforms (xx, xy, yx, yy): map-x = col*xx + row*xy, map-y = col*yx + row*yy.
# The scan works on one canonical octant; these reflect/transpose it into all eight.
_OCTANTS = (
    (1, 0, 0, 1),
    (0, 1, 1, 0),
    (0, 1, -1, 0),
    (1, 0, 0, -1),
    (-1, 0, 0, -1),
    (0, -1, -1, 0),
    (0, -1, 1, 0),
    (-1, 0, 0, 1),
)


class _Scan:
    """State for one compute_fov call: the grid, origin and the visible list built so far."""

    def __init__(self, grid: Map, origin: Position, radius: int) -> None:
        self.grid = grid
        self.origin = origin
        self.radius = radius
        self.radius_squared = radius * radius
        self.visible: List[Position] = []
        self.seen: Set[Position] = set()

    def mark(self, x: int, y: int) -> None:
        if not self.grid.in_bounds(x, y):
            return
        self.grid.set_visible(x, y, True)
        pos = Position(x, y)
        if pos not in self.seen:
            self.seen.add(pos)
            self.visible.append(pos)

    def cast_light(self, row: int, start_slope: float, end_slope: float, xx: int, xy: int, yx: int, yy: int) -> None:
        if start_slope < end_slope:
            return

        next_start_slope = start_slope
        for j in range(row, self.radius + 1):
            blocked = False
            dy = -j
            for dx in range(dy, 1):
                map_x = self.origin.x + dx * xx + dy * xy
                map_y = self.origin.y + dx * yx + dy * yy
                left_slope = (dx - 0.5) / (dy + 0.5)
                right_slope = (dx + 0.5) / (dy - 0.5)

                if start_slope < right_slope:
                    continue
                if end_slope > left_slope:
                    break

                if dx * dx + dy * dy <= self.radius_squared:
                    self.mark(map_x, map_y)

                opaque = self.grid.is_opaque(map_x, map_y)
                if blocked:
                    if opaque:
                        next_start_slope = right_slope
                    else:
                        blocked = False
                        start_slope = next_start_slope
                elif opaque and j < self.radius:
                    # Wall starts a shadow: scan the lit part beyond it as a child run.
                    blocked = True
                    self.cast_light(j + 1, start_slope, left_slope, xx, xy, yx, yy)
                    next_start_slope = right_slope

            if blocked:
                break


def compute_fov(grid: Map, origin: Position, radius: int) -> List[Position]:
    """
    Recursive shadowcasting field of view.

    Clears every tile's `visible` flag, then marks (visible + explored) each
    in-bounds tile within the circular `radius` that is not shadowed by an
    opaque tile. Opaque tiles themselves are visible when lit. The origin is
    always visible. Returns the visible positions in discovery order, without
    duplicates; identical inputs always give identical output.
    """
    if radius < 0:
        raise ValueError("radius must be >= 0")
    if not grid.in_bounds(origin.x, origin.y):
        raise ValueError("Origin out of bounds")

    grid.clear_visibility()
    scan = _Scan(grid, origin, radius)
    scan.mark(origin.x, origin.y)

    for xx, xy, yx, yy in _OCTANTS:
        scan.cast_light(1, 1.0, 0.0, xx, xy, yx, yy)

    logger.debug("FOV from (%d,%d) radius %d -> %d visible tiles", origin.x, origin.y, radius, len(scan.visible))
    return scan.visible
