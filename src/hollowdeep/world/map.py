from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from .biomes import Biome, BiomeConfig
from .passages import is_narrow_passage
from .position import Position
from .tiles import Tile, TileType

logger = logging.getLogger(__name__)

# Chebyshev radius around an elite anchor that external spawn logic treats as elite.
ELITE_RADIUS = 5

MAP_WIDTH = 80
MAP_HEIGHT = 50


class Map:
    """
    One dungeon floor: a row-major tile buffer plus floor metadata.

    Generators and the FOV pass take the map for the duration of a single call
    and mutate it in place; nothing here holds RNG or cross-call state.
    Out-of-bounds reads return None (or "not walkable"/"opaque"), out-of-bounds
    writes are ignored so carving helpers never need to clip.
    """

    def __init__(self, width: int, height: int, floor_number: int, biome: Biome) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("Map width/height must be > 0")
        self.width = width
        self.height = height
        self.floor_number = floor_number
        self.biome = biome
        self.tiles: List[Tile] = [Tile() for _ in range(width * height)]
        self.start_pos: Position = Position(0, 0)
        self.exit_pos: Optional[Position] = None
        self.elite_rooms: List[Position] = []

    # ---- Indexing --------------------------------------------------------
    def xy_to_idx(self, x: int, y: int) -> int:
        return y * self.width + x

    def idx_to_xy(self, idx: int) -> Tuple[int, int]:
        return idx % self.width, idx // self.width

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    # ---- Tile access -----------------------------------------------------
    def get_tile(self, x: int, y: int) -> Optional[Tile]:
        if not self.in_bounds(x, y):
            return None
        return self.tiles[self.xy_to_idx(x, y)]

    def tile_at(self, pos: Position) -> Optional[Tile]:
        return self.get_tile(pos.x, pos.y)

    def set_tile(self, x: int, y: int, tile_type: TileType) -> None:
        if self.in_bounds(x, y):
            self.tiles[self.xy_to_idx(x, y)].tile_type = tile_type

    def is_walkable(self, x: int, y: int) -> bool:
        tile = self.get_tile(x, y)
        return tile is not None and tile.is_walkable()

    def is_opaque(self, x: int, y: int) -> bool:
        tile = self.get_tile(x, y)
        return tile is None or not tile.is_transparent()

    # ---- Visibility flags ------------------------------------------------
    def mark_explored(self, x: int, y: int) -> None:
        tile = self.get_tile(x, y)
        if tile is not None:
            tile.explored = True

    def set_visible(self, x: int, y: int, visible: bool) -> None:
        tile = self.get_tile(x, y)
        if tile is None:
            return
        tile.visible = visible
        if visible:
            tile.explored = True

    def clear_visibility(self) -> None:
        for tile in self.tiles:
            tile.visible = False

    # ---- Elite zones -----------------------------------------------------
    def add_elite_room(self, pos: Position) -> None:
        self.elite_rooms.append(pos)

    def is_elite_zone(self, pos: Position) -> bool:
        return any(anchor.chebyshev_distance(pos) <= ELITE_RADIUS for anchor in self.elite_rooms)

    # ---- Queries for spawn placement ------------------------------------
    def is_narrow_passage(self, pos: Position) -> bool:
        return is_narrow_passage(self, pos)

    def walkable_positions(self) -> List[Position]:
        out: List[Position] = []
        for idx, tile in enumerate(self.tiles):
            if tile.is_walkable():
                x, y = self.idx_to_xy(idx)
                out.append(Position(x, y))
        return out

    def spawn_positions(self, min_dist_from_start: int) -> List[Position]:
        """Walkable positions at least `min_dist_from_start` (Chebyshev) from the start."""
        return [
            pos
            for pos in self.walkable_positions()
            if pos.chebyshev_distance(self.start_pos) >= min_dist_from_start
        ]

    def npc_spawn_positions(self, min_dist_from_start: int) -> List[Position]:
        """Like spawn_positions, but never in a passage an NPC could block."""
        return [pos for pos in self.spawn_positions(min_dist_from_start) if not self.is_narrow_passage(pos)]

    def shrine_positions(self) -> List[Position]:
        out: List[Position] = []
        for idx, tile in enumerate(self.tiles):
            if tile.tile_type.is_shrine:
                x, y = self.idx_to_xy(idx)
                out.append(Position(x, y))
        return out

    # ---- Export ----------------------------------------------------------
    def to_ascii(self, config: Optional[BiomeConfig] = None) -> List[str]:
        """Debug rendering, '@' at the start; with a biome config walls and floors use its glyphs."""
        lines: List[str] = []
        for y in range(self.height):
            row = []
            for x in range(self.width):
                tile = self.tiles[self.xy_to_idx(x, y)]
                if self.start_pos.x == x and self.start_pos.y == y:
                    row.append("@")
                elif config is not None and tile.glyph is None:
                    row.append(config.tile_glyph(tile.tile_type, x, y))
                else:
                    row.append(tile.display_glyph())
            lines.append("".join(row))
        return lines

    @classmethod
    def test_map(cls) -> "Map":
        """Hand-built development floor: three rooms, two corridors, stairs."""
        m = cls(MAP_WIDTH, MAP_HEIGHT, 1, Biome.SUNKEN_CATACOMBS)

        def fill(x0: int, x1: int, y0: int, y1: int, tile_type: TileType) -> None:
            for yy in range(y0, y1):
                for xx in range(x0, x1):
                    m.set_tile(xx, yy, tile_type)

        fill(5, 20, 5, 15, TileType.FLOOR)
        fill(30, 50, 5, 20, TileType.FLOOR)
        fill(40, 60, 25, 40, TileType.FLOOR)
        fill(20, 31, 10, 11, TileType.CORRIDOR)
        fill(45, 46, 19, 26, TileType.CORRIDOR)

        m.set_tile(7, 7, TileType.TORCH)
        m.set_tile(35, 10, TileType.BONES)
        m.set_tile(42, 12, TileType.BLOOD_STAIN)
        m.set_tile(55, 30, TileType.RUBBLE)
        m.set_tile(45, 35, TileType.BRAZIER)
        m.set_tile(50, 32, TileType.STAIRS_DOWN)

        m.start_pos = Position(10, 10)
        m.exit_pos = Position(50, 32)
        return m

    def __repr__(self) -> str:
        return f"Map({self.width}x{self.height}, floor={self.floor_number}, biome={self.biome.value})"
