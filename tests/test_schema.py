import pytest

from hollowdeep.errors import BiomeConfigError, SnapshotError
from hollowdeep.schema import load_schema, validate_document


def test_bundled_schemas_load():
    assert load_schema("snapshot")["type"] == "object"
    assert "biome" in load_schema("biomes")["$defs"]


def test_violations_are_listed_with_their_path():
    with pytest.raises(SnapshotError) as excinfo:
        validate_document("snapshot", {"version": 1, "width": "wide"}, SnapshotError)
    message = str(excinfo.value)
    assert "At width" in message
    assert "tiles" in message


def test_unknown_biome_field_rejected():
    raw = {"sunken_catacombs": {"name": "x", "cave_factor": 0.1, "hazard_chance": 0.0,
                                "primary_hazard": "pit", "decorations": [], "decoration_density": 0.0,
                                "sparkles": True}}
    with pytest.raises(BiomeConfigError):
        validate_document("biomes", raw, BiomeConfigError)
