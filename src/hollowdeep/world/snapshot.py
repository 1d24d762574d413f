from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..errors import SnapshotError
from ..schema import validate_document
from .biomes import Biome, BiomeConfig
from .generation import apply_lighting
from .map import Map
from .position import Position
from .tiles import TileType

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1

# (tile type value, explored, glyph override)
TileRecord = Tuple[str, bool, Optional[str]]


def _canonical_dumps(obj: Dict[str, Any]) -> str:
    return json.dumps(obj, separators=(",", ":"), sort_keys=True, ensure_ascii=False)


def _pos_to_list(pos: Position) -> List[int]:
    return [pos.x, pos.y]


def _pos_from(raw: Any, label: str) -> Position:
    try:
        x, y = raw
        return Position(int(x), int(y))
    except (TypeError, ValueError) as exc:
        raise SnapshotError(f"Invalid {label} position: {raw!r}") from exc


@dataclass
class MapSnapshot:
    """Persistable form of a floor.

    Only what a save needs survives: tile type, the explored flag and any
    glyph override per cell, plus the floor's metadata. Light levels are
    re-baked on load; visibility starts cleared until the next FOV pass.
    """

    width: int
    height: int
    floor_number: int
    biome: Biome
    start_pos: Position
    exit_pos: Optional[Position]
    elite_rooms: List[Position] = field(default_factory=list)
    tiles: List[TileRecord] = field(default_factory=list)

    @classmethod
    def from_map(cls, grid: Map) -> "MapSnapshot":
        return cls(
            width=grid.width,
            height=grid.height,
            floor_number=grid.floor_number,
            biome=grid.biome,
            start_pos=grid.start_pos,
            exit_pos=grid.exit_pos,
            elite_rooms=list(grid.elite_rooms),
            tiles=[(t.tile_type.value, t.explored, t.glyph) for t in grid.tiles],
        )

    def to_map(self, config: Optional[BiomeConfig] = None) -> Map:
        """Rebuild a Map cell by cell and re-bake its lighting; no generation step runs.

        `config` defaults to the snapshot biome's embedded tuning table.
        """
        grid = Map(self.width, self.height, self.floor_number, self.biome)
        for idx, (type_value, explored, glyph) in enumerate(self.tiles):
            tile = grid.tiles[idx]
            tile.tile_type = TileType(type_value)
            tile.glyph = glyph
            if explored:
                x, y = grid.idx_to_xy(idx)
                grid.mark_explored(x, y)
        grid.start_pos = self.start_pos
        grid.exit_pos = self.exit_pos
        grid.elite_rooms = list(self.elite_rooms)
        apply_lighting(grid, config or self.biome.config())
        return grid

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": SNAPSHOT_VERSION,
            "width": self.width,
            "height": self.height,
            "floor": self.floor_number,
            "biome": self.biome.value,
            "start": _pos_to_list(self.start_pos),
            "exit": _pos_to_list(self.exit_pos) if self.exit_pos is not None else None,
            "elite_rooms": [_pos_to_list(p) for p in self.elite_rooms],
            "tiles": [[t, e, g] for t, e, g in self.tiles],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MapSnapshot":
        if not isinstance(data, dict):
            raise SnapshotError("Snapshot must be a mapping")
        if data.get("version") != SNAPSHOT_VERSION:
            raise SnapshotError(f"Unsupported snapshot version: {data.get('version')!r}")
        validate_document("snapshot", data, SnapshotError)

        try:
            width = int(data["width"])
            height = int(data["height"])
            floor_number = int(data["floor"])
            biome = Biome(data["biome"])
            raw_tiles = data["tiles"]
        except (KeyError, TypeError, ValueError) as exc:
            raise SnapshotError(f"Malformed snapshot header: {exc}") from exc

        if len(raw_tiles) != width * height:
            raise SnapshotError(f"Snapshot must hold exactly {width * height} tiles")

        tiles: List[TileRecord] = []
        for idx, entry in enumerate(raw_tiles):
            try:
                type_value, explored, glyph = entry
                TileType(type_value)
            except (TypeError, ValueError) as exc:
                raise SnapshotError(f"Invalid tile at index {idx}: {entry!r}") from exc
            tiles.append((type_value, bool(explored), None if glyph is None else str(glyph)))

        exit_raw = data.get("exit")
        snap = cls(
            width=width,
            height=height,
            floor_number=floor_number,
            biome=biome,
            start_pos=_pos_from(data.get("start"), "start"),
            exit_pos=_pos_from(exit_raw, "exit") if exit_raw is not None else None,
            elite_rooms=[_pos_from(p, "elite room") for p in data.get("elite_rooms", [])],
            tiles=tiles,
        )
        logger.debug("Decoded snapshot for floor %d (%dx%d)", floor_number, width, height)
        return snap

    def signature(self) -> str:
        """BLAKE2b digest of the canonical JSON form; equal floors give equal signatures."""
        data = _canonical_dumps(self.to_dict()).encode("utf-8")
        return hashlib.blake2b(data, digest_size=16).hexdigest()
