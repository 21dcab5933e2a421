"""
Memory State - FSRS Card, Review Log and Retrievability

Defines the core memory state variables and derived quantities for FSRS.

Key concepts:
- Stability (S): Days until recall probability decays to 90%
- Difficulty (D): How hard the card is to learn (1-10 scale)
- Retrievability (R): Probability of successful recall at time t

A card is identified by (user_id, word_id, reading_index). Its memory state
only exists once the card has been reviewed at least once, so stability and
difficulty live together in a single optional MemoryState.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence

from jiten_srs.fsrs.constants import (
    DEFAULT_PARAMETERS,
    DIFFICULTY_MAX,
    DIFFICULTY_MIN,
    STABILITY_MIN,
    Rating,
    State,
)


_STEPPED_STATES = (State.LEARNING, State.RELEARNING)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def is_utc(value: datetime) -> bool:
    """
    True if the datetime is timezone-aware and its zone is UTC itself.

    A named zone that merely sits at offset zero (Europe/London in winter)
    is not UTC: due dates computed from it would follow its DST rules.
    """
    return (
        value.tzinfo is not None
        and value.utcoffset() == timedelta(0)
        and value.tzname() == "UTC"
    )


@dataclass(frozen=True)
class MemoryState:
    """Stability and difficulty established by a card's first review."""
    stability: float  # S, in days
    difficulty: float  # D, range 1-10

    def __post_init__(self):
        if not DIFFICULTY_MIN <= self.difficulty <= DIFFICULTY_MAX:
            raise ValueError(f"Difficulty must be within [1, 10], got {self.difficulty}")
        if self.stability < STABILITY_MIN:
            raise ValueError(f"Stability must be >= {STABILITY_MIN}, got {self.stability}")


@dataclass(frozen=True)
class Card:
    """
    Scheduling state for a single card.

    A card is defined as: (user_id, word_id, reading_index)

    Cards are immutable snapshots. Reviewing a card produces a new Card;
    the caller is responsible for persisting it.
    """
    user_id: Optional[str] = None
    word_id: Optional[int] = None
    reading_index: int = 0

    # Surrogate key, assigned by the persistence layer
    card_id: Optional[int] = None

    state: State = State.LEARNING
    step: Optional[int] = None  # Position in learning/relearning steps, None in review

    # None until the first review
    memory: Optional[MemoryState] = None

    due: datetime = field(default_factory=utcnow)
    last_review: Optional[datetime] = None

    def __post_init__(self):
        if self.state in set(State):
            object.__setattr__(self, "state", State(self.state))

        if self.state in _STEPPED_STATES and self.step is None:
            object.__setattr__(self, "step", 0)
        elif self.state == State.REVIEW and self.step is not None:
            raise ValueError("Cards in review state cannot carry a learning step")

        if self.memory is None and self.state != State.LEARNING:
            raise ValueError(f"Card without memory state must be learning, got {self.state!r}")

    @property
    def stability(self) -> Optional[float]:
        return self.memory.stability if self.memory is not None else None

    @property
    def difficulty(self) -> Optional[float]:
        return self.memory.difficulty if self.memory is not None else None

    @property
    def is_new(self) -> bool:
        """True if the card has never been reviewed."""
        return self.memory is None

    def clone(self) -> Card:
        """Return an equal but distinct copy of this card."""
        return replace(self)

    def to_dict(self) -> dict:
        return {
            "card_id": self.card_id,
            "user_id": self.user_id,
            "word_id": self.word_id,
            "reading_index": self.reading_index,
            "state": int(self.state),
            "step": self.step,
            "stability": self.stability,
            "difficulty": self.difficulty,
            "due": self.due.isoformat(),
            "last_review": self.last_review.isoformat() if self.last_review else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Card:
        stability = data.get("stability")
        difficulty = data.get("difficulty")
        if (stability is None) != (difficulty is None):
            raise ValueError("Stability and difficulty must be both present or both absent")

        memory = MemoryState(stability, difficulty) if stability is not None else None
        last_review = data.get("last_review")

        return cls(
            user_id=data.get("user_id"),
            word_id=data.get("word_id"),
            reading_index=data.get("reading_index", 0),
            card_id=data.get("card_id"),
            state=State(data["state"]),
            step=data.get("step"),
            memory=memory,
            due=datetime.fromisoformat(data["due"]),
            last_review=datetime.fromisoformat(last_review) if last_review else None,
        )


@dataclass(frozen=True)
class ReviewLog:
    """Append-only record of one review event."""
    card_id: Optional[int]
    rating: Rating
    review_datetime: datetime
    review_duration: Optional[int] = None  # milliseconds

    def to_dict(self) -> dict:
        return {
            "card_id": self.card_id,
            "rating": int(self.rating),
            "review_datetime": self.review_datetime.isoformat(),
            "review_duration": self.review_duration,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ReviewLog:
        return cls(
            card_id=data.get("card_id"),
            rating=Rating(data["rating"]),
            review_datetime=datetime.fromisoformat(data["review_datetime"]),
            review_duration=data.get("review_duration"),
        )


def calculate_retrievability(
    card: Card,
    now: Optional[datetime] = None,
    parameters: Sequence[float] = DEFAULT_PARAMETERS
) -> float:
    """
    Calculate retrievability using the FSRS power forgetting curve.

    Formula: R = (1 + factor * t / S) ^ decay

    Where:
    - decay = -w[20]
    - factor = 0.9^(1/decay) - 1, so that R = 0.9 when t = S
    - t = days since the last review (never negative)

    Args:
        card: Card to evaluate
        now: Evaluation time (defaults to now, UTC)
        parameters: FSRS parameter vector

    Returns:
        Retrievability between 0 and 1 (0 for a card never reviewed)
    """
    if card.last_review is None or card.memory is None:
        return 0.0

    if now is None:
        now = utcnow()

    decay = -parameters[20]
    factor = 0.9 ** (1.0 / decay) - 1
    elapsed_days = max(0.0, (now - card.last_review).total_seconds() / 86400.0)

    return (1 + factor * elapsed_days / card.memory.stability) ** decay


def days_since_last_review(card: Card, now: datetime) -> Optional[int]:
    """Whole days between the last review and now, or None for a new card."""
    if card.last_review is None:
        return None
    return (now - card.last_review).days


def is_short_term_review(card: Card, now: datetime) -> bool:
    """
    Determine if this review repeats a review from less than a day ago.

    Short-term reviews update stability with the same-day formula instead of
    the long-term one.
    """
    days = days_since_last_review(card, now)
    return days is not None and days < 1
