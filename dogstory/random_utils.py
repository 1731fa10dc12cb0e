"""Random numbers drawn from an interval."""

from __future__ import annotations

import random

_rng = random.SystemRandom()


def generate_double_from_interval(lower: float, upper: float) -> float:
    """Uniform float in [lower, upper)."""
    if lower > upper:
        raise ValueError("lower bound must not exceed upper bound")
    if lower == upper:
        return lower
    value = lower + (upper - lower) * _rng.random()
    return value if value < upper else lower


def generate_integer_from_interval(lower: int, upper: int) -> int:
    """Uniform integer in [lower, upper], both ends included."""
    if lower > upper:
        raise ValueError("lower bound must not exceed upper bound")
    return _rng.randint(lower, upper)