"""
Scheduler - FSRS Algorithm Logic

Pure FSRS scheduling and state updates (no database calls).

Main workflow:
1. Load card (caller's responsibility)
2. Validate the review timestamp
3. Update stability and difficulty (first, same-day or long-term review)
4. Walk the learning/review/relearning state machine
5. Fuzz review intervals, compute the due date
6. Return a new card + review log

This module handles ONLY the algorithm logic.
Database I/O is handled by the database module.
"""

from __future__ import annotations
import logging
import random
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Optional, Sequence, Tuple

from jiten_srs.fsrs import ltm_updates, stm_updates
from jiten_srs.fsrs.constants import (
    DEFAULT_DESIRED_RETENTION,
    DEFAULT_ENABLE_FUZZING,
    DEFAULT_LEARNING_STEPS,
    DEFAULT_MAXIMUM_INTERVAL,
    DEFAULT_PARAMETERS,
    DEFAULT_RELEARNING_STEPS,
    PARAMETER_COUNT,
    Rating,
    State,
)
from jiten_srs.fsrs.errors import InvalidParametersError, NonUtcDatetimeError, UnknownCardStateError
from jiten_srs.fsrs.intervals import apply_fuzz, next_interval_days
from jiten_srs.fsrs.memory_state import (
    Card,
    MemoryState,
    ReviewLog,
    calculate_retrievability,
    is_short_term_review,
    is_utc,
    utcnow,
)

if TYPE_CHECKING:
    from jiten_srs.fsrs.config import SchedulerConfig

logger = logging.getLogger(__name__)

Transition = Tuple[State, Optional[int], timedelta]


@dataclass(frozen=True)
class Scheduler:
    """
    FSRS scheduler configuration plus the review operation.

    Immutable after construction. The random source used for fuzzing is
    owned by the scheduler; pass a seeded ``random.Random`` for
    reproducible schedules.
    """
    parameters: Sequence[float] = DEFAULT_PARAMETERS
    desired_retention: float = DEFAULT_DESIRED_RETENTION
    learning_steps: Sequence[timedelta] = DEFAULT_LEARNING_STEPS
    relearning_steps: Sequence[timedelta] = DEFAULT_RELEARNING_STEPS
    maximum_interval: int = DEFAULT_MAXIMUM_INTERVAL
    enable_fuzzing: bool = DEFAULT_ENABLE_FUZZING
    rng: random.Random = field(default_factory=random.Random, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "parameters", tuple(float(w) for w in self.parameters))
        object.__setattr__(self, "learning_steps", tuple(self.learning_steps))
        object.__setattr__(self, "relearning_steps", tuple(self.relearning_steps))

        if len(self.parameters) != PARAMETER_COUNT:
            raise InvalidParametersError(
                f"Expected {PARAMETER_COUNT} parameters, got {len(self.parameters)}"
            )
        # w[20] is the forgetting curve decay; intervals divide by it
        if self.parameters[20] <= 0:
            raise InvalidParametersError(
                f"Decay parameter w[20] must be positive, got {self.parameters[20]}"
            )
        if not 0 < self.desired_retention < 1:
            raise ValueError(f"Desired retention must be in (0, 1), got {self.desired_retention}")
        if self.maximum_interval < 1:
            raise ValueError(f"Maximum interval must be at least 1 day, got {self.maximum_interval}")

    @classmethod
    def from_config(cls, config: SchedulerConfig, rng: Optional[random.Random] = None) -> Scheduler:
        """Build a scheduler from validated configuration."""
        return cls(
            parameters=config.parameters,
            desired_retention=config.desired_retention,
            learning_steps=config.learning_steps,
            relearning_steps=config.relearning_steps,
            maximum_interval=config.maximum_interval,
            enable_fuzzing=config.enable_fuzzing,
            rng=rng if rng is not None else random.Random(),
        )

    def get_card_retrievability(self, card: Card, now: Optional[datetime] = None) -> float:
        return calculate_retrievability(card, now, self.parameters)

    def review_card(
        self,
        card: Card,
        rating: Rating,
        review_datetime: Optional[datetime] = None,
        review_duration: Optional[int] = None
    ) -> Tuple[Card, ReviewLog]:
        """
        Process a review and return the updated card + review log.

        This is the core FSRS algorithm. No database calls, and the input
        card is left untouched.

        Args:
            card: Card being reviewed (new or existing)
            rating: User rating (AGAIN, HARD, GOOD, EASY)
            review_datetime: Review timestamp, must be UTC (defaults to now)
            review_duration: Time taken to answer in milliseconds (optional)

        Returns:
            Tuple of (updated_card, review_log)

        Raises:
            NonUtcDatetimeError: review_datetime is naive or not UTC
            UnknownCardStateError: card.state is not a known State
        """
        if review_datetime is None:
            review_datetime = utcnow()

        if not is_utc(review_datetime):
            raise NonUtcDatetimeError(review_datetime)

        rating = Rating(rating)

        memory = self._next_memory_state(card, rating, review_datetime)
        state, step, interval = self._next_transition(card, rating, memory.stability)

        if self.enable_fuzzing and state == State.REVIEW:
            interval = apply_fuzz(interval, self.maximum_interval, self.rng)

        updated_card = replace(
            card,
            state=state,
            step=step,
            memory=memory,
            due=review_datetime + interval,
            last_review=review_datetime,
        )
        review_log = ReviewLog(card.card_id, rating, review_datetime, review_duration)

        logger.debug(
            "Reviewed card %s as %s: %s -> %s, S=%.4f D=%.4f, next in %s",
            card.card_id, rating.name, card.state.name, state.name,
            memory.stability, memory.difficulty, interval,
        )

        return updated_card, review_log

    def _next_memory_state(self, card: Card, rating: Rating, review_datetime: datetime) -> MemoryState:
        w = self.parameters

        # First review ever
        if card.memory is None:
            return MemoryState(
                stability=ltm_updates.initial_stability(rating, w),
                difficulty=ltm_updates.initial_difficulty(rating, w),
            )

        stability = card.memory.stability
        difficulty = card.memory.difficulty

        if is_short_term_review(card, review_datetime):
            new_stability = stm_updates.short_term_stability(stability, rating, w)
        else:
            retrievability = self.get_card_retrievability(card, review_datetime)
            new_stability = ltm_updates.next_stability(difficulty, stability, retrievability, rating, w)

        return MemoryState(
            stability=new_stability,
            difficulty=ltm_updates.next_difficulty(difficulty, rating, w),
        )

    def _next_transition(self, card: Card, rating: Rating, stability: float) -> Transition:
        """
        Next (state, step, interval) for a card.

        Learning and relearning share one table; they differ only in which
        steps they walk through.
        """
        if card.state == State.LEARNING:
            steps = self.learning_steps
        elif card.state == State.RELEARNING:
            steps = self.relearning_steps
        else:
            steps = ()

        stepped = card.state in (State.LEARNING, State.RELEARNING)
        if stepped and (not steps or (card.step >= len(steps) and rating != Rating.AGAIN)):
            return self._graduate(stability)

        match (card.state, rating):
            case (State.LEARNING | State.RELEARNING, Rating.AGAIN):
                return card.state, 0, steps[0]

            case (State.LEARNING | State.RELEARNING, Rating.HARD):
                return card.state, card.step, self._hard_step_interval(card.step, steps)

            case (State.LEARNING | State.RELEARNING, Rating.GOOD):
                if card.step + 1 == len(steps):
                    return self._graduate(stability)
                return card.state, card.step + 1, steps[card.step + 1]

            case (State.LEARNING | State.RELEARNING, Rating.EASY):
                return self._graduate(stability)

            case (State.REVIEW, Rating.AGAIN):
                if not self.relearning_steps:
                    return State.REVIEW, None, self._review_interval(stability)
                return State.RELEARNING, 0, self.relearning_steps[0]

            case (State.REVIEW, Rating.HARD | Rating.GOOD | Rating.EASY):
                return State.REVIEW, None, self._review_interval(stability)

            case _:
                raise UnknownCardStateError(f"Unknown card state: {card.state!r}")

    @staticmethod
    def _hard_step_interval(step: int, steps: Sequence[timedelta]) -> timedelta:
        if step == 0 and len(steps) == 1:
            return steps[0] * 1.5
        if step == 0 and len(steps) >= 2:
            return (steps[0] + steps[1]) / 2
        return steps[step]

    def _graduate(self, stability: float) -> Transition:
        return State.REVIEW, None, self._review_interval(stability)

    def _review_interval(self, stability: float) -> timedelta:
        days = next_interval_days(stability, self.desired_retention, self.parameters, self.maximum_interval)
        return timedelta(days=days)

    def to_dict(self) -> dict:
        return {
            "parameters": list(self.parameters),
            "desired_retention": self.desired_retention,
            "learning_steps": [s.total_seconds() for s in self.learning_steps],
            "relearning_steps": [s.total_seconds() for s in self.relearning_steps],
            "maximum_interval": self.maximum_interval,
            "enable_fuzzing": self.enable_fuzzing,
        }

    @classmethod
    def from_dict(cls, data: dict, rng: Optional[random.Random] = None) -> Scheduler:
        return cls(
            parameters=data["parameters"],
            desired_retention=data["desired_retention"],
            learning_steps=[timedelta(seconds=s) for s in data["learning_steps"]],
            relearning_steps=[timedelta(seconds=s) for s in data["relearning_steps"]],
            maximum_interval=data["maximum_interval"],
            enable_fuzzing=data["enable_fuzzing"],
            rng=rng if rng is not None else random.Random(),
        )
