"""Floor generation entry point and the post-processing passes shared by all generators."""
from __future__ import annotations

import logging
import math
from typing import List, Optional, Tuple

from ...core.random import RandomSource
from ..biomes import Biome, BiomeConfig, biome_for_floor
from ..map import Map
from ..position import Position
from ..tiles import TileType
from .base import FloorGenerator
from .caves import CavesGenerator
from .connectivity import find_path_bfs, flood_fill, is_exit_reachable
from .rooms import Room, RoomsGenerator

logger = logging.getLogger(__name__)

MAX_LIGHT = 255


def generate_floor(
    rng: RandomSource,
    floor: int,
    biome: Optional[Biome] = None,
    config: Optional[BiomeConfig] = None,
) -> Map:
    """Build a finished, solvable floor.

    The biome's cave_factor picks the layout generator; hazards, decorations
    and lighting are layered on top, and the stairs invariant is enforced
    before and after those passes. Degenerate layouts are repaired in place,
    never reported.
    """
    if biome is None:
        biome = biome_for_floor(floor)
    cfg = config or biome.config()

    generator: FloorGenerator
    if rng.chance(cfg.cave_factor):
        generator = CavesGenerator()
    else:
        generator = RoomsGenerator()
    logger.debug("generate_floor: floor %d biome=%s using %s", floor, biome.value, type(generator).__name__)

    grid = generator.generate(rng, floor, biome, cfg)

    ensure_stairs_exist(grid)
    add_hazards(rng, grid, cfg)
    add_biome_decorations(rng, grid, cfg)
    apply_lighting(grid, cfg)
    # Hazards or decorations must never leave the floor without its exit.
    ensure_stairs_exist(grid)

    logger.info(
        "Generated floor %d (%s, %s): start=(%d,%d) exit=(%d,%d) elite=%d shrines=%d",
        floor,
        biome.value,
        type(generator).__name__,
        grid.start_pos.x,
        grid.start_pos.y,
        grid.exit_pos.x if grid.exit_pos else -1,
        grid.exit_pos.y if grid.exit_pos else -1,
        len(grid.elite_rooms),
        len(grid.shrine_positions()),
    )
    return grid


def ensure_stairs_exist(grid: Map) -> None:
    """Guarantee `grid.exit_pos` is set and holds stairs down.

    - exit set but overwritten: restore the stairs in place
    - exit unset (or out of bounds): use the walkable tile farthest from the
      start by squared distance, excluding the start itself
    - no walkable tile at all: stairs at the grid centre
    """
    exit_pos = grid.exit_pos
    if exit_pos is not None and grid.in_bounds(exit_pos.x, exit_pos.y):
        tile = grid.tile_at(exit_pos)
        if tile is not None and tile.tile_type == TileType.STAIRS_DOWN:
            return
        logger.warning("Exit tile at (%d,%d) was overwritten; restoring stairs", exit_pos.x, exit_pos.y)
        grid.set_tile(exit_pos.x, exit_pos.y, TileType.STAIRS_DOWN)
        return

    candidates: List[Position] = []
    for y in range(1, grid.height - 1):
        for x in range(1, grid.width - 1):
            if grid.is_walkable(x, y):
                pos = Position(x, y)
                if pos != grid.start_pos:
                    candidates.append(pos)

    if not candidates:
        center = Position(grid.width // 2, grid.height // 2)
        logger.warning("No walkable tile for stairs; forcing stairs at centre (%d,%d)", center.x, center.y)
        grid.set_tile(center.x, center.y, TileType.STAIRS_DOWN)
        grid.exit_pos = center
        return

    best = max(candidates, key=lambda p: p.distance_squared(grid.start_pos))
    logger.warning("Exit missing; placing stairs at (%d,%d)", best.x, best.y)
    grid.set_tile(best.x, best.y, TileType.STAIRS_DOWN)
    grid.exit_pos = best


def add_hazards(rng: RandomSource, grid: Map, config: BiomeConfig) -> List[Position]:
    """Scatter the biome's hazard over walkable tiles other than start and exit.

    Chokepoints are never covered. If a blocking hazard still manages to cut
    the start off from the exit, the whole pass is undone.
    Returns the positions that kept a hazard.
    """
    hazard_tile = config.primary_hazard.tile_type
    if config.hazard_chance <= 0.0 or hazard_tile is None:
        return []

    placed: List[Tuple[Position, TileType]] = []
    for y in range(1, grid.height - 1):
        for x in range(1, grid.width - 1):
            pos = Position(x, y)
            if pos == grid.start_pos or pos == grid.exit_pos:
                continue
            if not grid.is_walkable(x, y) or grid.is_narrow_passage(pos):
                continue
            if grid.tiles[grid.xy_to_idx(x, y)].tile_type.is_shrine:
                continue
            if rng.chance(config.hazard_chance):
                placed.append((pos, grid.tiles[grid.xy_to_idx(x, y)].tile_type))
                grid.set_tile(x, y, hazard_tile)

    if placed and not hazard_tile.is_walkable and grid.exit_pos is not None and not is_exit_reachable(grid):
        logger.warning("Hazards on floor %d cut off the exit; rolling back %d tiles", grid.floor_number, len(placed))
        for pos, previous in placed:
            grid.set_tile(pos.x, pos.y, previous)
        return []

    logger.debug("Placed %d %s hazard tiles", len(placed), hazard_tile.value)
    return [pos for pos, _ in placed]


def add_biome_decorations(rng: RandomSource, grid: Map, config: BiomeConfig) -> int:
    """Swap plain floor/corridor tiles for entries of the biome's decoration palette."""
    if not config.decorations or config.decoration_density <= 0.0:
        return 0

    count = 0
    for y in range(1, grid.height - 1):
        for x in range(1, grid.width - 1):
            tile = grid.get_tile(x, y)
            if tile is None or tile.tile_type not in (TileType.FLOOR, TileType.CORRIDOR):
                continue
            pos = Position(x, y)
            if pos == grid.start_pos or pos == grid.exit_pos:
                continue
            if rng.chance(config.decoration_density):
                grid.set_tile(x, y, rng.choice(config.decorations))
                count += 1
    return count


def apply_lighting(grid: Map, config: BiomeConfig) -> None:
    """Bake per-tile light levels from light-source tiles.

    Linear falloff inside each source's radius, scaled by the biome's light
    modifier; overlapping sources keep the brightest value.
    """
    for tile in grid.tiles:
        tile.light_level = 0

    for idx, source in enumerate(grid.tiles):
        radius = source.tile_type.light_radius
        if radius is None:
            continue
        sx, sy = grid.idx_to_xy(idx)
        for dy in range(-radius, radius + 1):
            for dx in range(-radius, radius + 1):
                d2 = dx * dx + dy * dy
                if d2 > radius * radius:
                    continue
                tile = grid.get_tile(sx + dx, sy + dy)
                if tile is None:
                    continue
                falloff = 1.0 - math.sqrt(d2) / (radius + 1)
                level = min(MAX_LIGHT, max(0, int(MAX_LIGHT * falloff * config.light_modifier)))
                if level > tile.light_level:
                    tile.light_level = level


__all__ = [
    "CavesGenerator",
    "FloorGenerator",
    "Room",
    "RoomsGenerator",
    "add_biome_decorations",
    "add_hazards",
    "apply_lighting",
    "biome_for_floor",
    "ensure_stairs_exist",
    "find_path_bfs",
    "flood_fill",
    "generate_floor",
    "is_exit_reachable",
]
