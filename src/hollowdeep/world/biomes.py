from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from importlib.resources import files as resource_files
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from ..errors import BiomeConfigError
from ..schema import validate_document
from .tiles import RGB, TileType

logger = logging.getLogger(__name__)

# Interior inset used by room decorations and shrines needs at least this size.
MIN_ROOM_SIZE = 4
MAX_ROOM_SIZE = 20


class Biome(str, Enum):
    """Named visual/gameplay theme for a range of floors."""

    SUNKEN_CATACOMBS = "sunken_catacombs"
    BLEEDING_CRYPTS = "bleeding_crypts"
    HOLLOW_CATHEDRAL = "hollow_cathedral"
    THE_ABYSS = "the_abyss"

    def config(self) -> "BiomeConfig":
        return default_biome_configs()[self]

    @property
    def display_name(self) -> str:
        return self.config().name

    @property
    def description(self) -> str:
        return self.config().description

    @property
    def ambient_color(self) -> RGB:
        return self.config().ambient_color

    def prefers_caves(self) -> bool:
        return self.config().cave_factor > 0.5


class HazardType(str, Enum):
    NONE = "none"
    LAVA = "lava"
    PIT = "pit"
    CORRUPTION = "corruption"

    @property
    def tile_type(self) -> Optional[TileType]:
        # Corruption leaves a blood marker rather than a blocking tile.
        return {
            HazardType.NONE: None,
            HazardType.LAVA: TileType.LAVA,
            HazardType.PIT: TileType.PIT,
            HazardType.CORRUPTION: TileType.BLOOD_STAIN,
        }[self]


@dataclass(frozen=True)
class BiomeConfig:
    """Read-only generation dials for one biome."""

    name: str
    description: str
    wall_color: RGB
    floor_color: RGB
    ambient_color: RGB
    cave_factor: float
    light_modifier: float
    hazard_chance: float
    primary_hazard: HazardType
    decorations: Tuple[TileType, ...]
    decoration_density: float
    room_min_size: int
    room_max_size: int
    room_features: Tuple[Tuple[TileType, float], ...] = ()
    cave_features: Tuple[Tuple[TileType, float], ...] = ()
    wall_glyphs: Tuple[str, ...] = ("#",)
    floor_glyphs: Tuple[str, ...] = (".",)

    @classmethod
    def from_dict(cls, key: str, raw: Dict[str, Any]) -> "BiomeConfig":
        if not isinstance(raw, dict):
            raise BiomeConfigError(f"Biome '{key}' must be a mapping, got {type(raw).__name__}")
        try:
            cfg = cls(
                name=str(raw.get("name", key)),
                description=str(raw.get("description", "")),
                wall_color=_rgb(raw.get("wall_color", (128, 128, 128))),
                floor_color=_rgb(raw.get("floor_color", (64, 64, 64))),
                ambient_color=_rgb(raw.get("ambient_color", (32, 32, 32))),
                cave_factor=float(raw.get("cave_factor", 0.0)),
                light_modifier=float(raw.get("light_modifier", 1.0)),
                hazard_chance=float(raw.get("hazard_chance", 0.0)),
                primary_hazard=HazardType(raw.get("primary_hazard", "none")),
                decorations=tuple(TileType(t) for t in raw.get("decorations", [])),
                decoration_density=float(raw.get("decoration_density", 0.0)),
                room_min_size=int(raw.get("room_min_size", MIN_ROOM_SIZE)),
                room_max_size=int(raw.get("room_max_size", 8)),
                room_features=_features(raw.get("room_features", [])),
                cave_features=_features(raw.get("cave_features", [])),
                wall_glyphs=tuple(str(g) for g in raw.get("wall_glyphs", ["#"])),
                floor_glyphs=tuple(str(g) for g in raw.get("floor_glyphs", ["."])),
            )
        except (TypeError, ValueError) as exc:
            raise BiomeConfigError(f"Invalid biome '{key}': {exc}") from exc
        cfg.validate(key)
        return cfg

    def validate(self, key: str) -> None:
        for label, value in (
            ("cave_factor", self.cave_factor),
            ("hazard_chance", self.hazard_chance),
            ("decoration_density", self.decoration_density),
        ):
            if not (0.0 <= value <= 1.0):
                raise BiomeConfigError(f"Biome '{key}': {label} must be in [0, 1], got {value}")
        if self.light_modifier < 0.0:
            raise BiomeConfigError(f"Biome '{key}': light_modifier must be >= 0")
        if not (MIN_ROOM_SIZE <= self.room_min_size <= self.room_max_size <= MAX_ROOM_SIZE):
            raise BiomeConfigError(
                f"Biome '{key}': room sizes must satisfy "
                f"{MIN_ROOM_SIZE} <= min <= max <= {MAX_ROOM_SIZE}, "
                f"got {self.room_min_size}..{self.room_max_size}"
            )
        for tile_type, chance in self.room_features + self.cave_features:
            if not tile_type.is_walkable:
                raise BiomeConfigError(f"Biome '{key}': feature {tile_type.value} must be walkable")
            if not (0.0 <= chance <= 1.0):
                raise BiomeConfigError(f"Biome '{key}': feature chance must be in [0, 1]")
        for tile_type in self.decorations:
            if not tile_type.is_walkable:
                raise BiomeConfigError(f"Biome '{key}': decoration {tile_type.value} must be walkable")
        if not self.wall_glyphs or not self.floor_glyphs:
            raise BiomeConfigError(f"Biome '{key}': wall_glyphs and floor_glyphs must not be empty")

    # ---- Themed rendering ------------------------------------------------
    def tile_glyph(self, tile_type: TileType, x: int, y: int) -> str:
        """Biome glyph for plain walls and floors, varied by position; other tiles keep their own."""
        if tile_type == TileType.WALL:
            return self.wall_glyphs[(x * 31 + y * 17) % len(self.wall_glyphs)]
        if tile_type in (TileType.FLOOR, TileType.CORRIDOR):
            return self.floor_glyphs[(x * 31 + y * 17) % len(self.floor_glyphs)]
        return tile_type.glyph

    def tile_color(self, tile_type: TileType) -> RGB:
        if tile_type == TileType.WALL:
            return self.wall_color
        if tile_type in (TileType.FLOOR, TileType.CORRIDOR):
            return self.floor_color
        return tile_type.fg_color


def _rgb(value: Any) -> RGB:
    r, g, b = (int(c) for c in value)
    return (r, g, b)


def _features(raw: Any) -> Tuple[Tuple[TileType, float], ...]:
    out = []
    for entry in raw:
        tile_name, chance = entry
        out.append((TileType(tile_name), float(chance)))
    return tuple(out)


def load_biome_configs(path: Optional[Path] = None) -> Dict[Biome, BiomeConfig]:
    """Load biome tuning tables from YAML.

    If path is None, loads the embedded default resource at
    hollowdeep/data/biomes.yaml. Every Biome must be present.
    """
    if path is None:
        data = resource_files("hollowdeep.data").joinpath("biomes.yaml").read_text(encoding="utf-8")
        logger.debug("Loaded embedded biome config resource")
    else:
        with open(path, "r", encoding="utf-8") as f:
            data = f.read()
        logger.debug("Loaded biome config from path: %s", path)

    try:
        raw = yaml.safe_load(data) or {}
    except yaml.YAMLError as exc:
        raise BiomeConfigError(f"Biome config is not valid YAML: {exc}") from exc
    if not isinstance(raw, dict):
        raise BiomeConfigError("Biome config must be a mapping of biome name to settings")
    validate_document("biomes", raw, BiomeConfigError)

    configs: Dict[Biome, BiomeConfig] = {}
    for key, entry in raw.items():
        try:
            biome = Biome(key)
        except ValueError:
            logger.warning("Ignoring unknown biome '%s' in config", key)
            continue
        configs[biome] = BiomeConfig.from_dict(key, entry)

    missing = [b.value for b in Biome if b not in configs]
    if missing:
        raise BiomeConfigError(f"Biome config missing entries for: {', '.join(missing)}")
    logger.info("Loaded %d biome configs", len(configs))
    return configs


@lru_cache(maxsize=1)
def default_biome_configs() -> Dict[Biome, BiomeConfig]:
    return load_biome_configs()


def biome_for_floor(floor: int) -> Biome:
    """Biome assigned to a floor number (five floors per biome, abyss beyond)."""
    if floor <= 5:
        return Biome.SUNKEN_CATACOMBS
    if floor <= 10:
        return Biome.BLEEDING_CRYPTS
    if floor <= 15:
        return Biome.HOLLOW_CATHEDRAL
    return Biome.THE_ABYSS
