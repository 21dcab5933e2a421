"""
Long-Term Memory (LTM) Updates

Implements the FSRS difficulty and stability updates for first reviews and
for reviews spaced at least a day apart.

Key principles:
- Difficulty mean-reverts toward the "easy" baseline
- Successful recall at low retrievability produces the largest stability gains
- A lapse never leaves stability higher than the short-term cap
"""

from __future__ import annotations
import math
from typing import Sequence

from jiten_srs.fsrs.constants import (
    DIFFICULTY_MAX,
    DIFFICULTY_MIN,
    STABILITY_MIN,
    Rating,
)


def clamp_difficulty(difficulty: float) -> float:
    return max(DIFFICULTY_MIN, min(DIFFICULTY_MAX, difficulty))


def clamp_stability(stability: float) -> float:
    return max(STABILITY_MIN, stability)


def initial_difficulty(rating: Rating, parameters: Sequence[float]) -> float:
    """
    Difficulty after the first review of a card.

    Formula:
        D_0 = w[4] - exp(w[5] * (rating - 1)) + 1

    Clamped to [1, 10]. Decreases monotonically from AGAIN to EASY.
    """
    d = parameters[4] - math.exp(parameters[5] * (int(rating) - 1)) + 1
    return clamp_difficulty(d)


def next_difficulty(difficulty: float, rating: Rating, parameters: Sequence[float]) -> float:
    """
    Update difficulty based on retrieval outcome.

    Formula:
        delta   = -w[6] * (rating - 3)
        damped  = D + (10 - D) * delta / 9
        D_new   = w[7] * D_0(EASY) + (1 - w[7]) * damped

    The linear damping shrinks increases as D approaches 10; the mean
    reversion pulls every card slowly toward the "easy" baseline.

    Args:
        difficulty: Current difficulty
        rating: User rating
        parameters: FSRS parameter vector

    Returns:
        New difficulty value (clipped to [1, 10])
    """
    delta = -(parameters[6] * (int(rating) - 3))
    damped = difficulty + (10.0 - difficulty) * delta / 9.0
    target = initial_difficulty(Rating.EASY, parameters)

    new_difficulty = parameters[7] * target + (1 - parameters[7]) * damped
    return clamp_difficulty(new_difficulty)


def initial_stability(rating: Rating, parameters: Sequence[float]) -> float:
    """Stability after the first review: S_0 = w[rating - 1]."""
    return clamp_stability(parameters[int(rating) - 1])


def next_forget_stability(
    difficulty: float,
    stability: float,
    retrievability: float,
    parameters: Sequence[float]
) -> float:
    """
    Stability after a lapse (AGAIN).

    Formula:
        S_long  = w[11] * D^(-w[12]) * ((S + 1)^w[13] - 1) * exp((1 - R) * w[14])
        S_short = S / exp(w[17] * w[18])
        S_new   = min(S_long, S_short)
    """
    long_term = (
        parameters[11]
        * difficulty ** (-parameters[12])
        * ((stability + 1) ** parameters[13] - 1)
        * math.exp((1 - retrievability) * parameters[14])
    )
    short_term = stability / math.exp(parameters[17] * parameters[18])

    return min(long_term, short_term)


def next_recall_stability(
    difficulty: float,
    stability: float,
    retrievability: float,
    rating: Rating,
    parameters: Sequence[float]
) -> float:
    """
    Stability after a successful recall (HARD, GOOD or EASY).

    Formula:
        S_new = S * (1 + exp(w[8]) * (11 - D) * S^(-w[9])
                     * (exp((1 - R) * w[10]) - 1) * hard_penalty * easy_bonus)
    """
    hard_penalty = parameters[15] if rating == Rating.HARD else 1.0
    easy_bonus = parameters[16] if rating == Rating.EASY else 1.0

    return stability * (
        1
        + math.exp(parameters[8])
        * (11 - difficulty)
        * stability ** (-parameters[9])
        * (math.exp((1 - retrievability) * parameters[10]) - 1)
        * hard_penalty
        * easy_bonus
    )


def next_stability(
    difficulty: float,
    stability: float,
    retrievability: float,
    rating: Rating,
    parameters: Sequence[float]
) -> float:
    """
    Stability after a long-term review.

    Args:
        difficulty: Difficulty before the review
        stability: Stability before the review
        retrievability: Retrievability at review time
        rating: User rating
        parameters: FSRS parameter vector

    Returns:
        New stability, never below STABILITY_MIN
    """
    if rating == Rating.AGAIN:
        new_stability = next_forget_stability(difficulty, stability, retrievability, parameters)
    else:
        new_stability = next_recall_stability(difficulty, stability, retrievability, rating, parameters)

    return clamp_stability(new_stability)
