"""
FSRS Constants and Parameters

All configurable parameters for the FSRS algorithm in one place.
The default parameter vector is the population-level optimum shipped with
FSRS v5 and is used whenever a scheduler is built without custom weights.
"""

from __future__ import annotations
from datetime import timedelta
from enum import IntEnum
from typing import NamedTuple


# ---- Ratings and States ----

class Rating(IntEnum):
    """User rating of a retrieval attempt."""
    AGAIN = 1   # Retrieval failed
    HARD = 2    # Retrieved with high effort
    GOOD = 3    # Retrieved normally
    EASY = 4    # Retrieved effortlessly


class State(IntEnum):
    """Learning state of a card."""
    LEARNING = 1    # Being learned for the first time
    REVIEW = 2      # Graduated to the regular review schedule
    RELEARNING = 3  # Forgotten during review, stepping back up


# ---- Model Parameters ----
# w[0..3]   initial stability per rating
# w[4..7]   difficulty (intercept, slope, delta, mean reversion)
# w[8..10]  recall stability
# w[11..14] forget stability
# w[15..16] hard penalty / easy bonus
# w[17..19] short-term stability
# w[20]     forgetting curve decay

PARAMETER_COUNT = 21

DEFAULT_PARAMETERS: tuple[float, ...] = (
    0.2172, 1.1771, 3.2602, 16.1507, 7.0114, 0.57,
    2.0966, 0.0069, 1.5261, 0.112, 1.0178,
    1.849, 0.1133, 0.3127, 2.2934, 0.2191,
    3.0004, 0.7536, 0.3332, 0.1437, 0.2,
)


# ---- Global Constants ----

STABILITY_MIN = 0.001  # Minimum stability (days)
DIFFICULTY_MIN = 1.0   # Minimum difficulty
DIFFICULTY_MAX = 10.0  # Maximum difficulty


# ---- Interval Fuzzing ----

class FuzzRange(NamedTuple):
    """Band of interval lengths (days) and the fuzz factor applied inside it."""
    start: float
    end: float
    factor: float


FUZZ_RANGES: tuple[FuzzRange, ...] = (
    FuzzRange(2.5, 7.0, 0.15),
    FuzzRange(7.0, 20.0, 0.1),
    FuzzRange(20.0, float("inf"), 0.05),
)

# Intervals shorter than this are never fuzzed
FUZZ_MIN_DAYS = 2.5


# ---- Scheduler Defaults ----

DEFAULT_DESIRED_RETENTION = 0.9
DEFAULT_LEARNING_STEPS: tuple[timedelta, ...] = (timedelta(minutes=1), timedelta(minutes=10))
DEFAULT_RELEARNING_STEPS: tuple[timedelta, ...] = (timedelta(minutes=10),)
DEFAULT_MAXIMUM_INTERVAL = 36500  # days
DEFAULT_ENABLE_FUZZING = True
