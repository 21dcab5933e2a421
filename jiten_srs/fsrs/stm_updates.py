"""
Short-Term Memory (STM) Updates

Stability update for a review repeated within a day of the previous one.

Key principle:
A same-day GOOD or EASY never shrinks stability; AGAIN and HARD may.
"""

from __future__ import annotations
import math
from typing import Sequence

from jiten_srs.fsrs.constants import Rating
from jiten_srs.fsrs.ltm_updates import clamp_stability


def short_term_stability(stability: float, rating: Rating, parameters: Sequence[float]) -> float:
    """
    Update stability after a same-day review.

    Formula:
        increase = exp(w[17] * (rating - 3 + w[18])) * S^(-w[19])
        S_new    = S * increase

    For GOOD and EASY the increase is at least 1.

    Args:
        stability: Current stability
        rating: User rating
        parameters: FSRS parameter vector

    Returns:
        New stability, never below STABILITY_MIN
    """
    increase = (
        math.exp(parameters[17] * (int(rating) - 3 + parameters[18]))
        * stability ** (-parameters[19])
    )

    if rating in (Rating.GOOD, Rating.EASY):
        increase = max(increase, 1.0)

    return clamp_stability(stability * increase)
