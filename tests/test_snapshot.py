import dataclasses
import json

import pytest

from hollowdeep.core.random import RandomSource
from hollowdeep.errors import SnapshotError
from hollowdeep.world import MapSnapshot, TileType, compute_fov
from hollowdeep.world.generation import generate_floor


def _explored_floor():
    grid = generate_floor(RandomSource.from_seed(404), 8)
    compute_fov(grid, grid.start_pos, 8)
    return grid


def test_round_trip_preserves_persisted_fields():
    grid = _explored_floor()
    data = json.loads(json.dumps(MapSnapshot.from_map(grid).to_dict()))
    restored = MapSnapshot.from_dict(data).to_map()

    assert (restored.width, restored.height) == (grid.width, grid.height)
    assert restored.floor_number == grid.floor_number
    assert restored.biome == grid.biome
    assert restored.start_pos == grid.start_pos
    assert restored.exit_pos == grid.exit_pos
    assert restored.elite_rooms == grid.elite_rooms
    for before, after in zip(grid.tiles, restored.tiles):
        assert after.tile_type == before.tile_type
        assert after.explored == before.explored
        assert after.glyph == before.glyph
        # visibility is recomputed, never persisted
        assert not after.visible


def test_signature_is_stable_and_sensitive():
    grid = _explored_floor()
    snap = MapSnapshot.from_map(grid)
    assert snap.signature() == MapSnapshot.from_dict(snap.to_dict()).signature()
    grid.get_tile(0, 0).explored = not grid.get_tile(0, 0).explored
    assert MapSnapshot.from_map(grid).signature() != snap.signature()


def test_rejects_wrong_tile_count():
    data = MapSnapshot.from_map(_explored_floor()).to_dict()
    data["tiles"] = data["tiles"][:-1]
    with pytest.raises(SnapshotError):
        MapSnapshot.from_dict(data)


def test_rejects_unknown_tile_type():
    data = MapSnapshot.from_map(_explored_floor()).to_dict()
    data["tiles"][0] = ["quicksand", False, None]
    with pytest.raises(SnapshotError):
        MapSnapshot.from_dict(data)


@pytest.mark.parametrize(
    "field,value",
    [("version", 99), ("biome", "frozen_vault"), ("width", 0), ("start", "nowhere")],
)
def test_rejects_bad_header(field, value):
    data = MapSnapshot.from_map(_explored_floor()).to_dict()
    data[field] = value
    with pytest.raises(SnapshotError):
        MapSnapshot.from_dict(data)


def test_rejects_non_mapping():
    with pytest.raises(SnapshotError):
        MapSnapshot.from_dict(["not", "a", "snapshot"])


def test_loading_rebakes_light_levels():
    grid = _explored_floor()
    restored = MapSnapshot.from_map(grid).to_map()
    assert [t.light_level for t in restored.tiles] == [t.light_level for t in grid.tiles]


def test_loading_applies_an_explicit_biome_config():
    grid = _explored_floor()
    grid.set_tile(5, 5, TileType.TORCH)
    dark = dataclasses.replace(grid.biome.config(), light_modifier=0.0)
    restored = MapSnapshot.from_map(grid).to_map(dark)
    assert all(t.light_level == 0 for t in restored.tiles)
    assert MapSnapshot.from_map(grid).to_map().get_tile(5, 5).light_level > 0
