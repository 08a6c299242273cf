"""Small numeric helpers shared by the scoring services."""

import math


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero for positive values (0.25 -> 0.3, 37.5 -> 38).

    The built-in `round` uses banker's rounding, which would turn 37.5 into 38
    but 36.5 into 36.
    """
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    """Bound `value` into [low, high]."""
    return max(low, min(high, value))


def score(value: float) -> int:
    """Clamp to [0, 100] and round to an integer score."""
    return int(round_half_up(clamp(value)))
