"""Integer rounding shared by combat and rewards."""

import math


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, ties towards positive infinity.

    Python's ``round`` sends ties to the even neighbour (8.5 -> 8); game
    numbers always go up on a tie (8.5 -> 9, 2.5 -> 3).
    """
    return math.floor(value + 0.5)
