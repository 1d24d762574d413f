from hollowdeep.world import Biome, Map, Position, TileType, is_narrow_passage


def _corridor_map():
    grid = Map(10, 10, 1, Biome.SUNKEN_CATACOMBS)
    for x in range(2, 8):
        grid.set_tile(x, 5, TileType.FLOOR)
    return grid


def test_straight_one_wide_passage_is_narrow():
    grid = _corridor_map()
    assert is_narrow_passage(grid, Position(4, 5))


def test_dead_end_is_narrow():
    grid = _corridor_map()
    assert is_narrow_passage(grid, Position(2, 5))


def test_corridor_tile_is_always_narrow(walled_room):
    grid = walled_room(9, 9)
    grid.set_tile(4, 4, TileType.CORRIDOR)
    assert is_narrow_passage(grid, Position(4, 4))


def test_open_room_interior_is_not_narrow():
    # 5x5 open interior spanning (2..6, 2..6)
    grid = Map(9, 9, 1, Biome.SUNKEN_CATACOMBS)
    for y in range(2, 7):
        for x in range(2, 7):
            grid.set_tile(x, y, TileType.FLOOR)
    assert not is_narrow_passage(grid, Position(4, 4))
    assert not grid.is_narrow_passage(Position(3, 3))


def test_room_corner_is_cramped():
    grid = Map(9, 9, 1, Biome.SUNKEN_CATACOMBS)
    for y in range(2, 7):
        for x in range(2, 7):
            grid.set_tile(x, y, TileType.FLOOR)
    # two cardinal + one diagonal neighbour
    assert is_narrow_passage(grid, Position(2, 2))
