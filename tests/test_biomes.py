from importlib.resources import files

import pytest
import yaml

from hollowdeep.errors import BiomeConfigError
from hollowdeep.world import Biome, HazardType, TileType, biome_for_floor, load_biome_configs


def _embedded_raw():
    return yaml.safe_load(files("hollowdeep.data").joinpath("biomes.yaml").read_text(encoding="utf-8"))


def test_embedded_config_covers_every_biome():
    configs = load_biome_configs()
    assert set(configs) == set(Biome)
    for cfg in configs.values():
        assert 0.0 <= cfg.cave_factor <= 1.0
        assert 0.0 <= cfg.hazard_chance <= 1.0
        assert cfg.decorations
        assert 4 <= cfg.room_min_size <= cfg.room_max_size


def test_biome_accessors():
    assert Biome.SUNKEN_CATACOMBS.display_name == "Sunken Catacombs"
    assert Biome.THE_ABYSS.description
    assert len(Biome.BLEEDING_CRYPTS.ambient_color) == 3
    assert not Biome.SUNKEN_CATACOMBS.prefers_caves()


def test_hazard_tile_mapping():
    assert HazardType.LAVA.tile_type == TileType.LAVA
    assert HazardType.PIT.tile_type == TileType.PIT
    assert HazardType.CORRUPTION.tile_type == TileType.BLOOD_STAIN
    assert HazardType.NONE.tile_type is None


@pytest.mark.parametrize(
    "floor,expected",
    [
        (1, Biome.SUNKEN_CATACOMBS),
        (5, Biome.SUNKEN_CATACOMBS),
        (6, Biome.BLEEDING_CRYPTS),
        (10, Biome.BLEEDING_CRYPTS),
        (11, Biome.HOLLOW_CATHEDRAL),
        (15, Biome.HOLLOW_CATHEDRAL),
        (16, Biome.THE_ABYSS),
        (99, Biome.THE_ABYSS),
    ],
)
def test_biome_for_floor(floor, expected):
    assert biome_for_floor(floor) == expected


def test_missing_biome_raises(tmp_path):
    raw = _embedded_raw()
    del raw["the_abyss"]
    path = tmp_path / "biomes.yaml"
    path.write_text(yaml.safe_dump(raw), encoding="utf-8")
    with pytest.raises(BiomeConfigError):
        load_biome_configs(path)


def test_out_of_range_probability_raises(tmp_path):
    raw = _embedded_raw()
    raw["bleeding_crypts"]["hazard_chance"] = 1.5
    path = tmp_path / "biomes.yaml"
    path.write_text(yaml.safe_dump(raw), encoding="utf-8")
    with pytest.raises(BiomeConfigError):
        load_biome_configs(path)


def test_blocking_decoration_rejected(tmp_path):
    raw = _embedded_raw()
    raw["sunken_catacombs"]["decorations"] = ["wall"]
    path = tmp_path / "biomes.yaml"
    path.write_text(yaml.safe_dump(raw), encoding="utf-8")
    with pytest.raises(BiomeConfigError):
        load_biome_configs(path)


def test_unknown_biome_is_ignored(tmp_path):
    raw = _embedded_raw()
    raw["frozen_vault"] = dict(raw["sunken_catacombs"])
    path = tmp_path / "biomes.yaml"
    path.write_text(yaml.safe_dump(raw, allow_unicode=True), encoding="utf-8")
    configs = load_biome_configs(path)
    assert set(configs) == set(Biome)


def test_invalid_yaml_raises(tmp_path):
    path = tmp_path / "biomes.yaml"
    path.write_text("sunken_catacombs: [unclosed", encoding="utf-8")
    with pytest.raises(BiomeConfigError):
        load_biome_configs(path)


def test_themed_glyphs_and_colors():
    cfg = Biome.BLEEDING_CRYPTS.config()
    walls = {cfg.tile_glyph(TileType.WALL, x, y) for x in range(10) for y in range(10)}
    floors = {cfg.tile_glyph(TileType.FLOOR, x, y) for x in range(10) for y in range(10)}
    assert walls <= set(cfg.wall_glyphs) and len(walls) > 1
    assert floors <= set(cfg.floor_glyphs)
    assert cfg.tile_glyph(TileType.CORRIDOR, 3, 4) == cfg.tile_glyph(TileType.FLOOR, 3, 4)
    assert cfg.tile_glyph(TileType.STAIRS_DOWN, 3, 4) == ">"
    assert cfg.tile_color(TileType.WALL) == cfg.wall_color
    assert cfg.tile_color(TileType.CORRIDOR) == cfg.floor_color
    assert cfg.tile_color(TileType.TORCH) == TileType.TORCH.fg_color


def test_empty_glyph_set_rejected(tmp_path):
    raw = _embedded_raw()
    raw["hollow_cathedral"]["wall_glyphs"] = []
    path = tmp_path / "biomes.yaml"
    path.write_text(yaml.safe_dump(raw, allow_unicode=True), encoding="utf-8")
    with pytest.raises(BiomeConfigError):
        load_biome_configs(path)
