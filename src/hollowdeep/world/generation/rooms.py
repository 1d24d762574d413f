from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional

from ...core.random import RandomSource
from ..biomes import Biome, BiomeConfig
from ..map import MAP_HEIGHT, MAP_WIDTH, Map
from ..position import Position
from ..tiles import TileType
from .base import FloorGenerator
from .shrines import (
    ELITE_CORRUPTION_CHANCE,
    ROOM_MIN_SHRINE_DISTANCE,
    is_valid_shrine_site,
    place_shrines,
)

logger = logging.getLogger(__name__)

MAX_PLACEMENT_ATTEMPTS = 100
ELITE_GLYPH = "✧"


@dataclass
class Room:
    """Axis-aligned rectangle; the carved interior excludes the outline."""

    x1: int
    y1: int
    x2: int
    y2: int

    @classmethod
    def from_size(cls, x: int, y: int, w: int, h: int) -> "Room":
        return cls(x, y, x + w, y + h)

    def center(self) -> Position:
        return Position((self.x1 + self.x2) // 2, (self.y1 + self.y2) // 2)

    def intersects(self, other: "Room") -> bool:
        return self.x1 <= other.x2 and self.x2 >= other.x1 and self.y1 <= other.y2 and self.y2 >= other.y1

    def interior(self) -> Iterator[Position]:
        for y in range(self.y1 + 1, self.y2):
            for x in range(self.x1 + 1, self.x2):
                yield Position(x, y)

    def inner_cells(self) -> Iterator[Position]:
        """Interior cells at least one step away from the room's edge."""
        for y in range(self.y1 + 2, self.y2 - 1):
            for x in range(self.x1 + 2, self.x2 - 1):
                yield Position(x, y)

    def corners(self) -> List[Position]:
        return [
            Position(self.x1 + 1, self.y1 + 1),
            Position(self.x2 - 1, self.y1 + 1),
            Position(self.x1 + 1, self.y2 - 1),
            Position(self.x2 - 1, self.y2 - 1),
        ]


class RoomsGenerator(FloorGenerator):
    """Rooms + corridors generator.

    Places non-overlapping rectangular rooms and chains each new room to the
    previous one with a two-wide L-shaped corridor. Start is the first room's
    centre, stairs the last room's. Middle rooms may be tagged elite and host
    shrines.
    """

    def __init__(self, width: int = MAP_WIDTH, height: int = MAP_HEIGHT) -> None:
        self.width = width
        self.height = height

    @staticmethod
    def max_rooms_for_floor(floor: int) -> int:
        # Deeper floors get more (and, relative to the map, smaller) rooms.
        return 18 + min(floor // 2, 10)

    @staticmethod
    def elite_chance_for_floor(floor: int) -> float:
        return 0.20 + min(floor * 0.02, 0.20)

    def generate(
        self,
        rng: RandomSource,
        floor: int,
        biome: Biome,
        config: Optional[BiomeConfig] = None,
    ) -> Map:
        cfg = config or biome.config()
        grid = Map(self.width, self.height, floor, biome)
        max_rooms = self.max_rooms_for_floor(floor)

        rooms: List[Room] = []
        for _ in range(MAX_PLACEMENT_ATTEMPTS):
            if len(rooms) >= max_rooms:
                break
            w = rng.randint(cfg.room_min_size, cfg.room_max_size)
            h = rng.randint(cfg.room_min_size, cfg.room_max_size)
            x = rng.randrange(1, self.width - w - 1)
            y = rng.randrange(1, self.height - h - 1)
            new_room = Room.from_size(x, y, w, h)
            if any(new_room.intersects(other) for other in rooms):
                continue

            self._carve_room(grid, new_room)
            if rooms:
                self._connect(rng, grid, rooms[-1].center(), new_room.center())
            rooms.append(new_room)

        if not rooms:
            logger.warning("RoomsGenerator: no room placed on floor %d, carving fallback room", floor)
            fallback = Room.from_size(self.width // 4, self.height // 4, self.width // 2, self.height // 2)
            self._carve_room(grid, fallback)
            rooms.append(fallback)

        grid.start_pos = rooms[0].center()
        if len(rooms) > 1:
            exit_pos = rooms[-1].center()
            grid.set_tile(exit_pos.x, exit_pos.y, TileType.STAIRS_DOWN)
            grid.exit_pos = exit_pos
        else:
            logger.warning("RoomsGenerator: single room on floor %d, leaving exit to the orchestrator", floor)

        if len(rooms) > 3:
            self._tag_elite_rooms(rng, grid, rooms, floor)

        self._add_decorations(rng, grid, rooms, cfg)

        if len(rooms) > 2:
            self._add_shrines(rng, grid, rooms, floor)

        logger.debug(
            "RoomsGenerator: floor %d -> %d rooms (max %d), %d elite",
            floor,
            len(rooms),
            max_rooms,
            len(grid.elite_rooms),
        )
        return grid

    # ---- Carving ---------------------------------------------------------
    @staticmethod
    def _carve_room(grid: Map, room: Room) -> None:
        for p in room.interior():
            grid.set_tile(p.x, p.y, TileType.FLOOR)

    def _connect(self, rng: RandomSource, grid: Map, prev: Position, new: Position) -> None:
        if rng.chance(0.5):
            self._carve_h_corridor(grid, prev.x, new.x, prev.y)
            self._carve_v_corridor(grid, prev.y, new.y, new.x)
            self._fill_corner(grid, new.x, prev.y)
        else:
            self._carve_v_corridor(grid, prev.y, new.y, prev.x)
            self._carve_h_corridor(grid, prev.x, new.x, new.y)
            self._fill_corner(grid, prev.x, new.y)

    @staticmethod
    def _carve_h_corridor(grid: Map, x1: int, x2: int, y: int) -> None:
        # Two rows wide so the corridor never degrades to diagonal-only steps.
        if x2 < x1:
            x1, x2 = x2, x1
        for x in range(x1, x2 + 1):
            grid.set_tile(x, y, TileType.CORRIDOR)
            grid.set_tile(x, y + 1, TileType.CORRIDOR)

    @staticmethod
    def _carve_v_corridor(grid: Map, y1: int, y2: int, x: int) -> None:
        if y2 < y1:
            y1, y2 = y2, y1
        for y in range(y1, y2 + 1):
            grid.set_tile(x, y, TileType.CORRIDOR)
            grid.set_tile(x + 1, y, TileType.CORRIDOR)

    @staticmethod
    def _fill_corner(grid: Map, x: int, y: int) -> None:
        """Open a 3x3 patch at the elbow, never touching the outer border."""
        for dy in (-1, 0, 1):
            for dx in (-1, 0, 1):
                nx, ny = x + dx, y + dy
                if 0 < nx < grid.width - 1 and 0 < ny < grid.height - 1:
                    grid.set_tile(nx, ny, TileType.CORRIDOR)

    # ---- Features --------------------------------------------------------
    def _tag_elite_rooms(self, rng: RandomSource, grid: Map, rooms: List[Room], floor: int) -> None:
        chance = self.elite_chance_for_floor(floor)
        for room in rooms[1:-1]:
            if not rng.chance(chance):
                continue
            grid.add_elite_room(room.center())
            for corner in room.corners():
                tile = grid.tile_at(corner)
                if tile is not None:
                    tile.glyph = ELITE_GLYPH

    @staticmethod
    def _add_decorations(rng: RandomSource, grid: Map, rooms: List[Room], cfg: BiomeConfig) -> None:
        for room in rooms:
            for tile_type, chance in cfg.room_features:
                if not rng.chance(chance):
                    continue
                pos = Position(rng.randrange(room.x1 + 2, room.x2 - 1), rng.randrange(room.y1 + 2, room.y2 - 1))
                if pos == grid.start_pos or pos == grid.exit_pos:
                    continue
                grid.set_tile(pos.x, pos.y, tile_type)

    @staticmethod
    def _add_shrines(rng: RandomSource, grid: Map, rooms: List[Room], floor: int) -> None:
        middle = list(rooms[1:-1])
        if len(middle) >= 6:
            max_shrines = 3
        elif len(middle) >= 3:
            max_shrines = 2
        else:
            max_shrines = 1

        rng.shuffle(middle)
        candidates: List[Position] = []
        for room in middle:
            valid = [p for p in room.inner_cells() if is_valid_shrine_site(grid, p)]
            if valid:
                candidates.append(rng.choice(valid))

        place_shrines(
            rng,
            grid,
            candidates,
            floor,
            max_shrines=max_shrines,
            min_distance=ROOM_MIN_SHRINE_DISTANCE,
            elite_corruption_chance=ELITE_CORRUPTION_CHANCE,
        )
