"""Handicap adjustment policy.

Handicaps move after every finalized round according to the society's
category table:

    handicap <=  3.0  buffer 19  cut 0.1 per point over 20
    handicap <=  7.0  buffer 18  cut 0.2
    handicap <= 10.0  buffer 17  cut 0.3
    otherwise         buffer 16  cut 0.4

Scores above 20 cut the handicap, scores below the buffer add 0.1, and
anything from the buffer up to 20 leaves it alone.
"""

import math
from typing import NamedTuple

from .constants import (
    DEFAULT_CATEGORY,
    HANDICAP_CATEGORIES,
    HANDICAP_INCREASE,
    TARGET_SCORE,
)


class HandicapCategory(NamedTuple):
    buffer: int
    cut_factor: float


def get_category(handicap: float) -> HandicapCategory:
    """Look up the buffer and cut factor for a handicap."""
    for upper_bound, buffer, cut_factor in HANDICAP_CATEGORIES:
        if handicap <= upper_bound:
            return HandicapCategory(buffer, cut_factor)
    return HandicapCategory(*DEFAULT_CATEGORY)


def calculate_adjustment(current_handicap: float, stableford_score: int) -> float:
    """
    Calculate the handicap change for one round.

    Args:
        current_handicap: Player's handicap before the round
        stableford_score: Stableford points scored

    Returns:
        Signed delta (negative is a cut)

    Example:
        calculate_adjustment(10.0, 25)  # -1.5
        calculate_adjustment(10.0, 15)  # 0.1
    """
    category = get_category(current_handicap)

    if stableford_score > TARGET_SCORE:
        points_over = stableford_score - TARGET_SCORE
        return -(points_over * category.cut_factor)

    if stableford_score < category.buffer:
        return HANDICAP_INCREASE

    return 0


def round_handicap(value: float) -> float:
    """Round to one decimal place, halves rounding up."""
    # Strip float noise first so 10.0 - 1.5 lands on 85, not 84.99999
    scaled = round(value * 10, 9)
    return math.floor(scaled + 0.5) / 10


def apply_adjustment(current_handicap: float, stableford_score: int) -> float:
    """Return the new handicap after a round, rounded to one decimal."""
    delta = calculate_adjustment(current_handicap, stableford_score)
    return round_handicap(current_handicap + delta)
