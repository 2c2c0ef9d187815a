"""Numeric helpers."""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounding towards +infinity.

    Python's round() uses banker's rounding (round(52.5) == 52); XP and
    average scores are displayed with half-up rounding instead.
    """
    return math.floor(value + 0.5)


def clamp(value: int, lower: int, upper: int) -> int:
    return max(lower, min(upper, value))
