import pytest

from hollowdeep.core.random import RandomSource


def test_same_seed_same_sequence():
    a = RandomSource.from_seed(1234)
    b = RandomSource.from_seed(1234)
    assert [a.randint(0, 100) for _ in range(20)] == [b.randint(0, 100) for _ in range(20)]


def test_chance_extremes():
    rng = RandomSource.from_seed(1)
    assert not any(rng.chance(0.0) for _ in range(50))
    assert all(rng.chance(1.0) for _ in range(50))


def test_chance_always_consumes_one_draw():
    a = RandomSource.from_seed(99)
    b = RandomSource.from_seed(99)
    a.chance(0.0)
    b.random()
    assert a.random() == b.random()


def test_choice_empty_raises():
    with pytest.raises(ValueError):
        RandomSource.from_seed(0).choice([])


def test_randrange_half_open():
    rng = RandomSource.from_seed(5)
    values = {rng.randrange(3, 5) for _ in range(200)}
    assert values == {3, 4}
