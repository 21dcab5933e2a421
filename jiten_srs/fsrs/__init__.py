"""
FSRS - Free Spaced Repetition Scheduler

Main API for scheduling vocabulary reviews.

This module implements FSRS v5 with:
- Power forgetting curve: R = (1 + factor * t / S) ^ decay
- Learning / Review / Relearning state machine with configurable steps
- Same-day (short-term) stability updates
- Interval fuzzing from an injectable random source

Quick start:
    from jiten_srs import fsrs

    # Process a review (algorithm only, no DB calls)
    scheduler = fsrs.Scheduler(enable_fuzzing=False)
    card, review_log = scheduler.review_card(fsrs.Card(), fsrs.Rating.GOOD)

    # Review and persist a stored card
    fsrs.init_db()
    card, review_log = fsrs.review_word("user-1", 1234, 0, fsrs.Rating.GOOD)

    # Get due cards
    due_cards = fsrs.get_due_cards("user-1")
"""

# Core scheduler API (algorithm logic)
from jiten_srs.fsrs.scheduler import Scheduler

# Review workflow (scheduler + database)
from jiten_srs.fsrs.scheduling import review_word, review_request

# Database API
from jiten_srs.fsrs.database import (
    init_db,
    reset_db,
    is_test_mode,
    load_card,
    save_card,
    log_review,
    get_review_logs,
    get_due_cards
)

# Constants and parameters
from jiten_srs.fsrs.constants import (
    Rating,
    State,
    DEFAULT_PARAMETERS,
    STABILITY_MIN,
    FUZZ_RANGES
)

# Memory state
from jiten_srs.fsrs.memory_state import (
    Card,
    MemoryState,
    ReviewLog,
    calculate_retrievability
)

from jiten_srs.fsrs.config import SchedulerConfig
from jiten_srs.fsrs.errors import (
    FsrsError,
    InvalidParametersError,
    NonUtcDatetimeError,
    UnknownCardStateError
)
from jiten_srs.fsrs.schemas import ReviewRequest


__all__ = [
    # Core algorithm
    "Scheduler",
    "review_word",
    "review_request",

    # Database operations
    "init_db",
    "reset_db",
    "is_test_mode",
    "load_card",
    "save_card",
    "log_review",
    "get_review_logs",
    "get_due_cards",

    # Enums
    "Rating",
    "State",

    # Memory state
    "Card",
    "MemoryState",
    "ReviewLog",
    "calculate_retrievability",

    # Configuration and errors
    "SchedulerConfig",
    "ReviewRequest",
    "FsrsError",
    "InvalidParametersError",
    "NonUtcDatetimeError",
    "UnknownCardStateError",

    # Parameters
    "DEFAULT_PARAMETERS",
    "STABILITY_MIN",
    "FUZZ_RANGES",
]
