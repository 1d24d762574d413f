"""Floor model, biome tables and the visibility pass."""
from .biomes import Biome, BiomeConfig, HazardType, biome_for_floor, load_biome_configs
from .fov import compute_fov
from .map import Map
from .passages import is_narrow_passage
from .position import Position
from .snapshot import MapSnapshot
from .tiles import Tile, TileType

__all__ = [
    "Biome",
    "BiomeConfig",
    "HazardType",
    "Map",
    "MapSnapshot",
    "Position",
    "Tile",
    "TileType",
    "biome_for_floor",
    "compute_fov",
    "is_narrow_passage",
    "load_biome_configs",
]
