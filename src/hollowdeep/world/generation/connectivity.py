from __future__ import annotations

from collections import deque
from typing import Optional, Set

from ..map import Map
from ..passages import CARDINALS
from ..position import Position


def flood_fill(grid: Map, start: Position) -> Set[Position]:
    """Return every walkable position 4-connected to `start` (empty if start is not walkable)."""
    if not grid.is_walkable(start.x, start.y):
        return set()
    seen: Set[Position] = {start}
    q = deque([start])
    while q:
        p = q.popleft()
        for dx, dy in CARDINALS:
            n = Position(p.x + dx, p.y + dy)
            if n not in seen and grid.is_walkable(n.x, n.y):
                seen.add(n)
                q.append(n)
    return seen


def find_path_bfs(grid: Map, start: Position, goal: Position) -> Optional[int]:
    """Breadth-first search shortest path length over walkable tiles; returns steps or None.

    Uses 4-directional movement.
    """
    if not grid.is_walkable(start.x, start.y) or not grid.is_walkable(goal.x, goal.y):
        return None

    q = deque([(start, 0)])
    seen = {start}
    while q:
        p, d = q.popleft()
        if p == goal:
            return d
        for dx, dy in CARDINALS:
            n = Position(p.x + dx, p.y + dy)
            if n not in seen and grid.is_walkable(n.x, n.y):
                seen.add(n)
                q.append((n, d + 1))
    return None


def is_exit_reachable(grid: Map) -> bool:
    if grid.exit_pos is None:
        return False
    return find_path_bfs(grid, grid.start_pos, grid.exit_pos) is not None
