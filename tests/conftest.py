import sys
from pathlib import Path

import pytest

# Put 'src' on sys.path so tests run against the checkout without installing it
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from hollowdeep.world import Biome, Map, TileType  # noqa: E402


@pytest.fixture
def walled_room():
    """Factory: a width x height map whose outline is wall and whose inside is floor."""

    def make(width: int, height: int) -> Map:
        grid = Map(width, height, 1, Biome.SUNKEN_CATACOMBS)
        for y in range(1, height - 1):
            for x in range(1, width - 1):
                grid.set_tile(x, y, TileType.FLOOR)
        return grid

    return make
