from __future__ import annotations

from typing import TYPE_CHECKING, List, Tuple

from .position import Position
from .tiles import TileType

if TYPE_CHECKING:  # pragma: no cover
    from .map import Map

CARDINALS: Tuple[Tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
DIAGONALS: Tuple[Tuple[int, int], ...] = ((-1, -1), (1, -1), (-1, 1), (1, 1))


def is_narrow_passage(grid: "Map", pos: Position) -> bool:
    """Whether occupying `pos` could cut the floor in two.

    A tile is treated as a chokepoint when it is:
    - a corridor tile
    - a dead end (at most one walkable cardinal neighbour)
    - a straight-through cell (exactly two walkable cardinal neighbours, opposite each other)
    - cramped (at most three walkable neighbours counting diagonals)
    """
    tile = grid.get_tile(pos.x, pos.y)
    if tile is not None and tile.tile_type == TileType.CORRIDOR:
        return True

    walkable_cardinal: List[Tuple[int, int]] = [
        (pos.x + dx, pos.y + dy) for dx, dy in CARDINALS if grid.is_walkable(pos.x + dx, pos.y + dy)
    ]
    if len(walkable_cardinal) <= 1:
        return True

    if len(walkable_cardinal) == 2:
        (x1, y1), (x2, y2) = walkable_cardinal
        horizontal = y1 == y2 == pos.y
        vertical = x1 == x2 == pos.x
        if horizontal or vertical:
            return True

    walkable_diag = sum(1 for dx, dy in DIAGONALS if grid.is_walkable(pos.x + dx, pos.y + dy))
    return len(walkable_cardinal) + walkable_diag <= 3
