"""
Intervals - Next Review Interval and Fuzzing

Turns stability into a whole number of days until the next review and adds
bounded random jitter so cards learned together do not stay clustered.
"""

from __future__ import annotations
import random
from datetime import timedelta
from typing import Optional, Sequence

from jiten_srs.fsrs.constants import FUZZ_MIN_DAYS, FUZZ_RANGES


def next_interval_days(
    stability: float,
    desired_retention: float,
    parameters: Sequence[float],
    maximum_interval: int
) -> int:
    """
    Days until retrievability drops to the desired retention.

    Inverse of the forgetting curve:
        t = S / factor * (R_target^(1/decay) - 1)

    Rounded to the nearest day and clamped to [1, maximum_interval].
    """
    decay = -parameters[20]
    factor = 0.9 ** (1.0 / decay) - 1

    interval = stability / factor * (desired_retention ** (1.0 / decay) - 1)

    return max(1, min(round(interval), maximum_interval))


def fuzz_range(interval_days: int, maximum_interval: int) -> tuple[int, int]:
    """
    Bounds (in days) of the fuzzed interval.

    Each fuzz band contributes its factor for every day of the interval that
    falls inside the band, on top of a base delta of one day.
    """
    delta = 1.0
    for band in FUZZ_RANGES:
        delta += band.factor * max(min(interval_days, band.end) - band.start, 0.0)

    min_ivl = max(2, round(interval_days - delta))
    max_ivl = min(round(interval_days + delta), maximum_interval)
    min_ivl = min(min_ivl, max_ivl)

    return min_ivl, max_ivl


def apply_fuzz(
    interval: timedelta,
    maximum_interval: int,
    rng: Optional[random.Random] = None
) -> timedelta:
    """
    Apply random jitter to a review interval.

    Args:
        interval: Interval to fuzz
        maximum_interval: Maximum allowed interval in days
        rng: Random source (a fresh unseeded generator if omitted)

    Returns:
        The interval unchanged if shorter than 2.5 days, otherwise a whole
        number of days drawn uniformly from the fuzz range
    """
    interval_days = interval.days
    if interval_days < FUZZ_MIN_DAYS:
        return interval

    if rng is None:
        rng = random.Random()

    min_ivl, max_ivl = fuzz_range(interval_days, maximum_interval)
    fuzzed_days = rng.uniform(min_ivl, max_ivl)

    return timedelta(days=min(round(fuzzed_days), maximum_interval))
