"""
Scheduling - Review Workflow for Stored Cards

Ties the scheduler to the card-state provider: load a card, review it,
save it and append the review log, all in one transaction.

Main workflow:
1. User rates a word reading
2. Card is loaded (and locked) or created fresh
3. Scheduler computes the new card + review log
4. Both are written and committed together
"""

from __future__ import annotations
import logging
from dataclasses import replace
from datetime import datetime
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError

from jiten_srs.fsrs import database
from jiten_srs.fsrs.config import SchedulerConfig
from jiten_srs.fsrs.constants import Rating
from jiten_srs.fsrs.memory_state import Card, ReviewLog
from jiten_srs.fsrs.scheduler import Scheduler
from jiten_srs.fsrs.schemas import ReviewRequest

logger = logging.getLogger(__name__)


def default_scheduler() -> Scheduler:
    """Scheduler built from FSRS_* environment settings."""
    return Scheduler.from_config(SchedulerConfig.from_env())


def review_word(
    user_id: str,
    word_id: int,
    reading_index: int,
    rating: Rating,
    review_datetime: Optional[datetime] = None,
    review_duration: Optional[int] = None,
    scheduler: Optional[Scheduler] = None
) -> Tuple[Card, ReviewLog]:
    """
    Review a word reading and persist the result.

    This is the main entry point for request handlers.

    Args:
        user_id: User identifier for scoping review data
        word_id: Word identifier
        reading_index: Reading variant of the word
        rating: User rating (AGAIN, HARD, GOOD, EASY)
        review_datetime: Review timestamp, must be UTC (defaults to now)
        review_duration: Time taken to answer in milliseconds (optional)
        scheduler: Scheduler to use (defaults to one built from the environment)

    Returns:
        Tuple of (saved_card, saved_review_log), both carrying the card_id
    """
    if scheduler is None:
        scheduler = default_scheduler()

    try:
        return _review_in_transaction(
            scheduler, user_id, word_id, reading_index, rating, review_datetime, review_duration
        )
    except IntegrityError:
        # Two first reviews raced and the other one inserted the row first
        logger.info(
            "Card %s/%s/%s was created concurrently, retrying review",
            user_id, word_id, reading_index,
        )
        return _review_in_transaction(
            scheduler, user_id, word_id, reading_index, rating, review_datetime, review_duration
        )


def _review_in_transaction(
    scheduler: Scheduler,
    user_id: str,
    word_id: int,
    reading_index: int,
    rating: Rating,
    review_datetime: Optional[datetime],
    review_duration: Optional[int]
) -> Tuple[Card, ReviewLog]:
    session = database.get_session()
    try:
        row = database.query_card_row(session, user_id, word_id, reading_index, for_update=True)

        if row is None:
            # New card - first review ever
            card = Card(user_id=user_id, word_id=word_id, reading_index=reading_index)
        else:
            card = database.card_from_row(row)

        updated_card, review_log = scheduler.review_card(card, rating, review_datetime, review_duration)

        if row is None:
            row = database.new_card_row(session, updated_card)
        row = database.write_card_row(session, updated_card, row)
        updated_card = replace(updated_card, card_id=row.card_id)
        review_log = replace(review_log, card_id=row.card_id)

        database.add_review_log_row(session, review_log)
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()

    return updated_card, review_log


def review_request(
    user_id: str,
    request: ReviewRequest,
    review_datetime: Optional[datetime] = None,
    scheduler: Optional[Scheduler] = None
) -> Tuple[Card, ReviewLog]:
    """Review a word from a validated request payload."""
    return review_word(
        user_id=user_id,
        word_id=request.word_id,
        reading_index=request.reading_index,
        rating=request.rating,
        review_datetime=review_datetime,
        review_duration=request.review_duration,
        scheduler=scheduler
    )
