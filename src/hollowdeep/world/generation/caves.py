from __future__ import annotations

import logging
from typing import List, Optional, Set

from ...core.random import RandomSource
from ..biomes import Biome, BiomeConfig
from ..map import MAP_HEIGHT, MAP_WIDTH, Map
from ..position import Position
from ..tiles import TileType
from .base import FloorGenerator
from .connectivity import flood_fill
from .shrines import CAVE_MIN_SHRINE_DISTANCE, place_shrines

logger = logging.getLogger(__name__)

FILL_PROBABILITY = 0.45
SMOOTHING_PASSES = 5
# Wall count in the Moore neighbourhood at which a cell is left unchanged.
WALL_THRESHOLD = 4
SHRINE_MIN_DIST_FROM_STAIRS = 10


class CavesGenerator(FloorGenerator):
    """Cellular automata caverns generator.

    Algorithm:
    - Fill the interior randomly with floor at FILL_PROBABILITY.
    - Smooth a fixed number of times with the 8-neighbour majority rule.
    - Flood fill from a random floor tile; if less than half of the floor is
      reached, tunnel every unreached tile to its nearest reached one.
    - Wall in anything still unreached so the cave is a single region.
    - Start on a random reached tile, stairs on the one farthest from it.
    """

    def __init__(self, width: int = MAP_WIDTH, height: int = MAP_HEIGHT) -> None:
        self.width = width
        self.height = height

    def generate(
        self,
        rng: RandomSource,
        floor: int,
        biome: Biome,
        config: Optional[BiomeConfig] = None,
    ) -> Map:
        cfg = config or biome.config()
        grid = Map(self.width, self.height, floor, biome)

        for y in range(1, self.height - 1):
            for x in range(1, self.width - 1):
                if rng.chance(FILL_PROBABILITY):
                    grid.set_tile(x, y, TileType.FLOOR)

        for _ in range(SMOOTHING_PASSES):
            self._smooth(grid)

        reachable = self._ensure_connectivity(grid, rng)
        self._place_start_and_exit(grid, rng, reachable)
        self._add_decorations(rng, grid, cfg)
        self._add_shrines(rng, grid, floor)

        logger.debug(
            "CavesGenerator: floor %d -> %d reachable tiles, start=%s exit=%s",
            floor,
            len(reachable),
            grid.start_pos,
            grid.exit_pos,
        )
        return grid

    # ---- Cellular automata -----------------------------------------------
    @staticmethod
    def _count_wall_neighbors(grid: Map, x: int, y: int) -> int:
        count = 0
        for dy in (-1, 0, 1):
            for dx in (-1, 0, 1):
                if dx == 0 and dy == 0:
                    continue
                if not grid.is_walkable(x + dx, y + dy):
                    count += 1
        return count

    def _smooth(self, grid: Map) -> None:
        # Next state is computed entirely from the current one, then swapped in.
        next_types = [t.tile_type for t in grid.tiles]
        for y in range(1, grid.height - 1):
            for x in range(1, grid.width - 1):
                walls = self._count_wall_neighbors(grid, x, y)
                if walls > WALL_THRESHOLD:
                    next_types[grid.xy_to_idx(x, y)] = TileType.WALL
                elif walls < WALL_THRESHOLD:
                    next_types[grid.xy_to_idx(x, y)] = TileType.FLOOR
        for tile, tile_type in zip(grid.tiles, next_types):
            tile.tile_type = tile_type

    # ---- Connectivity ----------------------------------------------------
    def _ensure_connectivity(self, grid: Map, rng: RandomSource) -> Set[Position]:
        floors = grid.walkable_positions()
        if not floors:
            logger.warning("CavesGenerator: automaton sealed the cave, carving fallback cavern")
            for y in range(10, min(40, grid.height - 1)):
                for x in range(10, min(70, grid.width - 1)):
                    grid.set_tile(x, y, TileType.FLOOR)
            floors = grid.walkable_positions()

        origin = floors[rng.randrange(0, len(floors))]
        reached = flood_fill(grid, origin)

        if len(reached) < len(floors) // 2:
            connected = [p for p in floors if p in reached]
            unreached = [p for p in floors if p not in reached]
            logger.debug(
                "CavesGenerator: only %d/%d floor tiles connected, tunnelling %d",
                len(reached),
                len(floors),
                len(unreached),
            )
            for tile in unreached:
                target = min(connected, key=lambda t: abs(t.x - tile.x) + abs(t.y - tile.y))
                self._carve_tunnel(grid, tile, target)
            reached = flood_fill(grid, origin)

        stray = [p for p in grid.walkable_positions() if p not in reached]
        if stray:
            logger.debug("CavesGenerator: walling in %d isolated floor tiles", len(stray))
            for p in stray:
                grid.set_tile(p.x, p.y, TileType.WALL)
        return reached

    @staticmethod
    def _carve_tunnel(grid: Map, start: Position, target: Position) -> None:
        """Manhattan tunnel: step x toward the target, then y, carving each cell."""
        x, y = start.x, start.y
        while x != target.x or y != target.y:
            if x < target.x:
                x += 1
            elif x > target.x:
                x -= 1
            grid.set_tile(x, y, TileType.CORRIDOR)

            if y < target.y:
                y += 1
            elif y > target.y:
                y -= 1
            grid.set_tile(x, y, TileType.CORRIDOR)

    # ---- Placement -------------------------------------------------------
    @staticmethod
    def _place_start_and_exit(grid: Map, rng: RandomSource, reachable: Set[Position]) -> None:
        # Row-major order keeps the draw independent of set iteration order.
        tiles = [p for p in grid.walkable_positions() if p in reachable]
        if len(tiles) < 2:
            logger.warning("CavesGenerator: fewer than two reachable tiles, exit left to the orchestrator")
            if tiles:
                grid.start_pos = tiles[0]
            return

        start = tiles[rng.randrange(0, len(tiles))]
        grid.start_pos = start
        exit_pos = max(tiles, key=lambda p: p.manhattan_distance(start))
        grid.set_tile(exit_pos.x, exit_pos.y, TileType.STAIRS_DOWN)
        grid.exit_pos = exit_pos

    @staticmethod
    def _add_decorations(rng: RandomSource, grid: Map, cfg: BiomeConfig) -> None:
        if not cfg.cave_features:
            return
        for y in range(1, grid.height - 1):
            for x in range(1, grid.width - 1):
                if not grid.is_walkable(x, y):
                    continue
                pos = Position(x, y)
                if pos == grid.start_pos or pos == grid.exit_pos:
                    continue
                for tile_type, chance in cfg.cave_features:
                    if rng.chance(chance):
                        grid.set_tile(x, y, tile_type)

    @staticmethod
    def _add_shrines(rng: RandomSource, grid: Map, floor: int) -> None:
        candidates: List[Position] = []
        for y in range(1, grid.height - 1):
            for x in range(1, grid.width - 1):
                if not grid.is_walkable(x, y):
                    continue
                pos = Position(x, y)
                if pos.manhattan_distance(grid.start_pos) < SHRINE_MIN_DIST_FROM_STAIRS:
                    continue
                if grid.exit_pos is not None and pos.manhattan_distance(grid.exit_pos) < SHRINE_MIN_DIST_FROM_STAIRS:
                    continue
                if grid.is_narrow_passage(pos):
                    continue
                candidates.append(pos)

        if not candidates:
            return
        max_shrines = 2 if len(candidates) > 50 else 1
        place_shrines(
            rng,
            grid,
            candidates,
            floor,
            max_shrines=max_shrines,
            min_distance=CAVE_MIN_SHRINE_DISTANCE,
        )
