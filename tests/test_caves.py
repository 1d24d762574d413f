import pytest

from hollowdeep.core.random import RandomSource
from hollowdeep.world import Biome, Map, Position, TileType
from hollowdeep.world.generation import CavesGenerator, find_path_bfs, flood_fill
from hollowdeep.world.generation.caves import SHRINE_MIN_DIST_FROM_STAIRS
from hollowdeep.world.generation.shrines import CAVE_MIN_SHRINE_DISTANCE


@pytest.mark.parametrize("seed", [3, 11, 42])
def test_cave_is_single_region_with_reachable_exit(seed):
    grid = CavesGenerator().generate(RandomSource.from_seed(seed), 2, Biome.BLEEDING_CRYPTS)
    assert (grid.width, grid.height) == (80, 50)
    assert grid.exit_pos is not None
    assert grid.get_tile(grid.exit_pos.x, grid.exit_pos.y).tile_type == TileType.STAIRS_DOWN
    assert find_path_bfs(grid, grid.start_pos, grid.exit_pos) is not None
    assert flood_fill(grid, grid.start_pos) == set(grid.walkable_positions())


def test_exit_is_farthest_reachable_tile():
    grid = CavesGenerator().generate(RandomSource.from_seed(8), 1, Biome.THE_ABYSS)
    best = max(p.manhattan_distance(grid.start_pos) for p in grid.walkable_positions())
    assert grid.exit_pos.manhattan_distance(grid.start_pos) == best


def test_cave_shrines_keep_their_distance():
    for seed in range(6):
        grid = CavesGenerator().generate(RandomSource.from_seed(seed), 12, Biome.HOLLOW_CATHEDRAL)
        shrines = grid.shrine_positions()
        assert len(shrines) <= 2
        types = [grid.get_tile(p.x, p.y).tile_type for p in shrines]
        assert len(types) == len(set(types))
        for i, a in enumerate(shrines):
            assert a.manhattan_distance(grid.start_pos) >= SHRINE_MIN_DIST_FROM_STAIRS
            for b in shrines[i + 1:]:
                assert a.manhattan_distance(b) >= CAVE_MIN_SHRINE_DISTANCE


def test_smoothing_fills_single_wall_in_open_area():
    grid = Map(5, 5, 1, Biome.SUNKEN_CATACOMBS)
    for y in range(1, 4):
        for x in range(1, 4):
            grid.set_tile(x, y, TileType.FLOOR)
    grid.set_tile(2, 2, TileType.WALL)
    CavesGenerator()._smooth(grid)
    assert grid.get_tile(2, 2).tile_type == TileType.FLOOR
    # border is never touched
    assert grid.get_tile(0, 0).tile_type == TileType.WALL


def test_sealed_cave_gets_fallback_cavern():
    grid = Map(80, 50, 1, Biome.SUNKEN_CATACOMBS)
    reached = CavesGenerator()._ensure_connectivity(grid, RandomSource.from_seed(1))
    assert Position(10, 10) in reached
    assert len(reached) == 60 * 30


def test_disconnected_pockets_are_tunnelled():
    grid = Map(30, 20, 1, Biome.SUNKEN_CATACOMBS)
    # one small and one large pocket; whichever is picked, both end up joined or walled
    for y in range(2, 5):
        for x in range(2, 5):
            grid.set_tile(x, y, TileType.FLOOR)
    for y in range(8, 18):
        for x in range(10, 28):
            grid.set_tile(x, y, TileType.FLOOR)
    reached = CavesGenerator()._ensure_connectivity(grid, RandomSource.from_seed(4))
    walkable = set(grid.walkable_positions())
    assert reached == walkable
    assert len(walkable) >= 180


def test_manhattan_tunnel_connects_endpoints():
    grid = Map(12, 12, 1, Biome.SUNKEN_CATACOMBS)
    grid.set_tile(1, 1, TileType.FLOOR)
    grid.set_tile(8, 9, TileType.FLOOR)
    CavesGenerator._carve_tunnel(grid, Position(1, 1), Position(8, 9))
    assert find_path_bfs(grid, Position(1, 1), Position(8, 9)) is not None


def test_smoothing_reads_only_the_previous_generation():
    rng = RandomSource.from_seed(17)
    grid = Map(30, 20, 1, Biome.SUNKEN_CATACOMBS)
    for y in range(1, 19):
        for x in range(1, 29):
            if rng.chance(0.45):
                grid.set_tile(x, y, TileType.FLOOR)

    before = [[grid.is_walkable(x, y) for x in range(30)] for y in range(20)]
    expected = [row[:] for row in before]
    for y in range(1, 19):
        for x in range(1, 29):
            walls = sum(
                1
                for dy in (-1, 0, 1)
                for dx in (-1, 0, 1)
                if (dx or dy) and not before[y + dy][x + dx]
            )
            if walls > 4:
                expected[y][x] = False
            elif walls < 4:
                expected[y][x] = True

    CavesGenerator()._smooth(grid)
    assert [[grid.is_walkable(x, y) for x in range(30)] for y in range(20)] == expected
