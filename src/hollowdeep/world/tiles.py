from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

RGB = Tuple[int, int, int]


class TileType(Enum):
    """Closed set of terrain and feature variants a grid cell can hold.

    Per-variant behaviour lives in the lookup tables below; every table must
    name every member (checked at import) so a new variant cannot be added
    without deciding its walkability, transparency, glyph and colours.
    """

    # Basic terrain
    FLOOR = "floor"
    WALL = "wall"

    # Special floor types
    CORRIDOR = "corridor"
    LAVA = "lava"
    PIT = "pit"

    # Interactables
    DOOR_CLOSED = "door_closed"
    DOOR_OPEN = "door_open"
    STAIRS_DOWN = "stairs_down"
    STAIRS_UP = "stairs_up"

    # Decorative floor variations
    RUBBLE = "rubble"
    BONES = "bones"
    BLOOD_STAIN = "blood_stain"
    COBWEB = "cobweb"
    CRACKS = "cracks"
    MOSS = "moss"
    ASHES = "ashes"
    GRIME = "grime"

    # Light sources
    TORCH = "torch"
    BRAZIER = "brazier"

    # Shrines
    SHRINE_SKILL = "shrine_skill"
    SHRINE_ENCHANT = "shrine_enchant"
    SHRINE_REST = "shrine_rest"
    SHRINE_CORRUPTION = "shrine_corruption"

    @property
    def is_walkable(self) -> bool:
        return self not in _BLOCKING

    @property
    def is_transparent(self) -> bool:
        return self not in _OPAQUE

    @property
    def glyph(self) -> str:
        return _GLYPHS[self]

    @property
    def fg_color(self) -> RGB:
        return _FG_COLORS[self]

    @property
    def bg_color(self) -> RGB:
        return _BG_COLORS[self]

    @property
    def light_radius(self) -> Optional[int]:
        return _LIGHT_RADIUS[self]

    @property
    def is_light_source(self) -> bool:
        return _LIGHT_RADIUS[self] is not None

    @property
    def is_shrine(self) -> bool:
        return self in SHRINE_TYPES

    @property
    def is_decoration(self) -> bool:
        return self in DECORATION_TYPES

    @property
    def is_hazard(self) -> bool:
        return self in (TileType.LAVA, TileType.PIT)


_BLOCKING = frozenset({TileType.WALL, TileType.LAVA, TileType.PIT, TileType.DOOR_CLOSED})
_OPAQUE = frozenset({TileType.WALL, TileType.DOOR_CLOSED})

SHRINE_TYPES = frozenset(
    {
        TileType.SHRINE_SKILL,
        TileType.SHRINE_ENCHANT,
        TileType.SHRINE_REST,
        TileType.SHRINE_CORRUPTION,
    }
)

DECORATION_TYPES = frozenset(
    {
        TileType.RUBBLE,
        TileType.BONES,
        TileType.BLOOD_STAIN,
        TileType.COBWEB,
        TileType.CRACKS,
        TileType.MOSS,
        TileType.ASHES,
        TileType.GRIME,
    }
)

_GLYPHS: Dict[TileType, str] = {
    TileType.FLOOR: ".",
    TileType.WALL: "#",
    TileType.CORRIDOR: ".",
    TileType.LAVA: "≈",
    TileType.PIT: " ",
    TileType.DOOR_CLOSED: "+",
    TileType.DOOR_OPEN: "/",
    TileType.STAIRS_DOWN: ">",
    TileType.STAIRS_UP: "<",
    TileType.RUBBLE: ",",
    TileType.BONES: "%",
    TileType.BLOOD_STAIN: "·",
    TileType.COBWEB: "░",
    TileType.CRACKS: "≡",
    TileType.MOSS: "`",
    TileType.ASHES: "∴",
    TileType.GRIME: "·",
    TileType.TORCH: "☀",
    TileType.BRAZIER: "♨",
    TileType.SHRINE_SKILL: "⚝",
    TileType.SHRINE_ENCHANT: "✦",
    TileType.SHRINE_REST: "☥",
    TileType.SHRINE_CORRUPTION: "☠",
}

_FG_COLORS: Dict[TileType, RGB] = {
    TileType.FLOOR: (80, 80, 80),
    TileType.WALL: (130, 110, 90),
    TileType.CORRIDOR: (70, 70, 70),
    TileType.LAVA: (255, 100, 0),
    TileType.PIT: (20, 20, 20),
    TileType.DOOR_CLOSED: (139, 90, 43),
    TileType.DOOR_OPEN: (139, 90, 43),
    TileType.STAIRS_DOWN: (200, 200, 200),
    TileType.STAIRS_UP: (200, 200, 200),
    TileType.RUBBLE: (100, 90, 80),
    TileType.BONES: (200, 200, 180),
    TileType.BLOOD_STAIN: (150, 30, 30),
    TileType.COBWEB: (180, 180, 170),
    TileType.CRACKS: (90, 85, 75),
    TileType.MOSS: (60, 100, 50),
    TileType.ASHES: (100, 95, 90),
    TileType.GRIME: (70, 65, 50),
    TileType.TORCH: (255, 200, 50),
    TileType.BRAZIER: (255, 150, 50),
    TileType.SHRINE_SKILL: (200, 100, 255),
    TileType.SHRINE_ENCHANT: (100, 200, 255),
    TileType.SHRINE_REST: (100, 255, 100),
    TileType.SHRINE_CORRUPTION: (180, 50, 100),
}

_BG_COLORS: Dict[TileType, RGB] = {
    TileType.FLOOR: (20, 18, 15),
    TileType.WALL: (40, 35, 30),
    TileType.CORRIDOR: (15, 13, 10),
    TileType.LAVA: (80, 20, 0),
    TileType.PIT: (5, 5, 5),
    TileType.DOOR_CLOSED: (30, 25, 20),
    TileType.DOOR_OPEN: (20, 18, 15),
    TileType.STAIRS_DOWN: (20, 18, 15),
    TileType.STAIRS_UP: (20, 18, 15),
    TileType.RUBBLE: (25, 22, 18),
    TileType.BONES: (20, 18, 15),
    TileType.BLOOD_STAIN: (40, 15, 15),
    TileType.COBWEB: (22, 20, 18),
    TileType.CRACKS: (18, 16, 14),
    TileType.MOSS: (15, 25, 15),
    TileType.ASHES: (25, 24, 22),
    TileType.GRIME: (20, 18, 12),
    TileType.TORCH: (30, 25, 15),
    TileType.BRAZIER: (35, 25, 15),
    TileType.SHRINE_SKILL: (30, 15, 40),
    TileType.SHRINE_ENCHANT: (15, 30, 40),
    TileType.SHRINE_REST: (15, 35, 15),
    TileType.SHRINE_CORRUPTION: (40, 10, 25),
}

_LIGHT_RADIUS: Dict[TileType, Optional[int]] = {t: None for t in TileType}
_LIGHT_RADIUS.update(
    {
        TileType.TORCH: 4,
        TileType.BRAZIER: 6,
        TileType.LAVA: 3,
        TileType.SHRINE_SKILL: 3,
        TileType.SHRINE_ENCHANT: 3,
        TileType.SHRINE_REST: 3,
        TileType.SHRINE_CORRUPTION: 4,
    }
)


def _check_tables_complete() -> None:
    for name, table in (
        ("glyph", _GLYPHS),
        ("fg_color", _FG_COLORS),
        ("bg_color", _BG_COLORS),
        ("light_radius", _LIGHT_RADIUS),
    ):
        missing = set(TileType) - set(table)
        if missing:
            raise RuntimeError(f"{name} table missing variants: {sorted(t.name for t in missing)}")


_check_tables_complete()


@dataclass
class Tile:
    """A single cell of a floor.

    `explored` is sticky once set; `visible` is recomputed by the FOV pass.
    `glyph` is a render-only override (elite room markers and the like).
    """

    tile_type: TileType = TileType.WALL
    explored: bool = False
    visible: bool = False
    light_level: int = 0
    glyph: Optional[str] = None

    def is_walkable(self) -> bool:
        return self.tile_type.is_walkable

    def is_transparent(self) -> bool:
        return self.tile_type.is_transparent

    def display_glyph(self) -> str:
        return self.glyph if self.glyph is not None else self.tile_type.glyph

    def fg_color(self, lit: bool) -> RGB:
        r, g, b = self.tile_type.fg_color
        if lit:
            return (r, g, b)
        return (r // 3, g // 3, b // 3)

    def bg_color(self, lit: bool) -> RGB:
        r, g, b = self.tile_type.bg_color
        if lit:
            return (r, g, b)
        return (r // 3, g // 3, b // 3)
