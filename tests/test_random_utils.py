import pytest

from dogstory.random_utils import (
    generate_double_from_interval,
    generate_integer_from_interval,
)


def test_double_within_half_open_interval():
    values = [generate_double_from_interval(-2.5, 7.5) for _ in range(500)]
    assert all(-2.5 <= v < 7.5 for v in values)
    assert len(set(values)) > 1


def test_double_degenerate_interval():
    assert generate_double_from_interval(3.25, 3.25) == 3.25


def test_integer_covers_both_ends():
    values = {generate_integer_from_interval(0, 1) for _ in range(300)}
    assert values == {0, 1}


def test_integer_within_interval():
    values = [generate_integer_from_interval(-4, 9) for _ in range(300)]
    assert all(-4 <= v <= 9 for v in values)


def test_integer_degenerate_interval():
    assert generate_integer_from_interval(42, 42) == 42


@pytest.mark.parametrize("func", [generate_double_from_interval, generate_integer_from_interval])
def test_reversed_bounds_raise(func):
    with pytest.raises(ValueError):
        func(5, 1)