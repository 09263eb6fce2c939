"""Numeric helpers shared by the scoring stages."""

import math
from typing import Union

Number = Union[int, float]


def clamp(value: Number, low: Number = 0, high: Number = 100) -> Number:
    """Bound value to [low, high]."""
    return max(low, min(high, value))


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with halves going up (2.5 -> 3), unlike Python's banker's rounding."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def to_score(value: float) -> int:
    """Round a raw score and clamp it into the 0-100 integer range."""
    return int(clamp(round_half_up(value), 0, 100))
