from __future__ import annotations

import logging
from typing import Iterable, List

from ...core.random import RandomSource
from ..map import Map
from ..position import Position
from ..tiles import TileType

logger = logging.getLogger(__name__)

ROOM_MIN_SHRINE_DISTANCE = 8
CAVE_MIN_SHRINE_DISTANCE = 15
ELITE_CORRUPTION_CHANCE = 0.4

# Enchanting needs gold the player only has after a few floors.
ENCHANT_MIN_FLOOR = 5
CORRUPTION_MIN_FLOOR = 3


def available_shrine_types(rng: RandomSource, floor: int) -> List[TileType]:
    """Shrine types that may appear on this floor, each at most once."""
    types = [TileType.SHRINE_REST, TileType.SHRINE_SKILL]
    if floor >= ENCHANT_MIN_FLOOR:
        types.append(TileType.SHRINE_ENCHANT)
    if floor >= CORRUPTION_MIN_FLOOR and rng.chance(0.3 + min(floor * 0.02, 0.3)):
        types.append(TileType.SHRINE_CORRUPTION)
    return types


def is_valid_shrine_site(grid: Map, pos: Position) -> bool:
    return (
        grid.is_walkable(pos.x, pos.y)
        and not grid.is_narrow_passage(pos)
        and pos != grid.start_pos
        and pos != grid.exit_pos
    )


def place_shrines(
    rng: RandomSource,
    grid: Map,
    candidates: Iterable[Position],
    floor: int,
    max_shrines: int,
    min_distance: int,
    elite_corruption_chance: float = 0.0,
) -> List[Position]:
    """Place up to `max_shrines` shrines of distinct types on shuffled candidate sites.

    Candidates closer than `min_distance` (Manhattan) to an already placed
    shrine, or no longer valid sites, are skipped. Inside an elite zone the
    corruption shrine may be pulled forward with `elite_corruption_chance`,
    but only while it is still unused, so types never repeat.
    Returns the positions that received a shrine.
    """
    types = available_shrine_types(rng, floor)
    rng.shuffle(types)
    pool = list(candidates)
    rng.shuffle(pool)

    placed: List[Position] = []
    for pos in pool:
        slot = len(placed)
        if slot >= max_shrines or slot >= len(types):
            break
        if not is_valid_shrine_site(grid, pos):
            continue
        if any(pos.manhattan_distance(p) < min_distance for p in placed):
            continue

        shrine = types[slot]
        if (
            elite_corruption_chance > 0.0
            and shrine != TileType.SHRINE_CORRUPTION
            and grid.is_elite_zone(pos)
            and rng.chance(elite_corruption_chance)
            and TileType.SHRINE_CORRUPTION in types[slot:]
        ):
            j = types.index(TileType.SHRINE_CORRUPTION)
            types[slot], types[j] = types[j], types[slot]
            shrine = types[slot]

        grid.set_tile(pos.x, pos.y, shrine)
        placed.append(pos)
        logger.debug("Placed %s at (%d,%d)", shrine.value, pos.x, pos.y)

    return placed
