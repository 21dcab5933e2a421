"""Tests for cards, review logs and retrievability."""

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from jiten_srs.fsrs.constants import Rating, State
from jiten_srs.fsrs.memory_state import (
    Card,
    MemoryState,
    ReviewLog,
    calculate_retrievability,
    days_since_last_review,
    is_short_term_review,
    is_utc,
)


def _reviewed_card(last_review, stability=10.0, difficulty=5.0):
    return Card(
        user_id="user-1",
        word_id=42,
        reading_index=1,
        card_id=7,
        state=State.REVIEW,
        memory=MemoryState(stability=stability, difficulty=difficulty),
        due=last_review + timedelta(days=10),
        last_review=last_review,
    )


# ---------------------------------------------------------------------------
# Card
# ---------------------------------------------------------------------------

class TestCard:
    def test_new_card_initial_state(self):
        card = Card(user_id="user-1", word_id=42)

        assert card.state == State.LEARNING
        assert card.step == 0
        assert card.memory is None
        assert card.stability is None
        assert card.difficulty is None
        assert card.last_review is None
        assert card.is_new

    def test_new_card_is_due_immediately(self):
        card = Card()
        assert card.due <= datetime.now(timezone.utc)

    def test_clone_is_equal_but_distinct(self, review_time):
        original = _reviewed_card(review_time, stability=10.5, difficulty=5.2)

        clone = original.clone()

        assert clone == original
        assert clone is not original
        assert clone.memory == original.memory
        assert clone.due == original.due
        assert clone.last_review == original.last_review

    def test_cards_are_immutable(self):
        card = Card()
        with pytest.raises(AttributeError):
            card.state = State.REVIEW

    def test_review_card_cannot_carry_step(self, review_time):
        with pytest.raises(ValueError):
            Card(
                state=State.REVIEW,
                step=1,
                memory=MemoryState(stability=3.0, difficulty=5.0),
                last_review=review_time,
            )

    def test_card_without_memory_must_be_learning(self):
        with pytest.raises(ValueError):
            Card(state=State.REVIEW)

    def test_relearning_card_defaults_to_first_step(self, review_time):
        card = Card(
            state=State.RELEARNING,
            memory=MemoryState(stability=3.0, difficulty=5.0),
            last_review=review_time,
        )
        assert card.step == 0

    def test_integer_state_is_coerced(self):
        card = Card(state=1)
        assert card.state is State.LEARNING

    def test_to_dict_from_dict(self, review_time):
        card = _reviewed_card(review_time)

        data = card.to_dict()

        assert data["state"] == 2
        assert data["step"] is None
        assert data["stability"] == 10.0
        assert data["last_review"] == review_time.isoformat()
        assert Card.from_dict(data) == card

    def test_from_dict_rejects_half_memory(self, review_time):
        data = _reviewed_card(review_time).to_dict()
        data["difficulty"] = None

        with pytest.raises(ValueError):
            Card.from_dict(data)


class TestMemoryState:
    @pytest.mark.parametrize("difficulty", [0.5, 10.5])
    def test_difficulty_out_of_range(self, difficulty):
        with pytest.raises(ValueError):
            MemoryState(stability=1.0, difficulty=difficulty)

    def test_stability_below_minimum(self):
        with pytest.raises(ValueError):
            MemoryState(stability=0.0, difficulty=5.0)


# ---------------------------------------------------------------------------
# ReviewLog
# ---------------------------------------------------------------------------

class TestReviewLog:
    def test_fields(self, review_time):
        log = ReviewLog(card_id=123, rating=Rating.GOOD, review_datetime=review_time, review_duration=5000)

        assert log.card_id == 123
        assert log.rating == Rating.GOOD
        assert log.review_datetime == review_time
        assert log.review_duration == 5000

    def test_duration_defaults_to_none(self, review_time):
        log = ReviewLog(card_id=123, rating=Rating.HARD, review_datetime=review_time)
        assert log.review_duration is None

    def test_to_dict_from_dict(self, review_time):
        log = ReviewLog(card_id=5, rating=Rating.AGAIN, review_datetime=review_time, review_duration=800)

        data = log.to_dict()

        assert data["rating"] == 1
        assert ReviewLog.from_dict(data) == log


# ---------------------------------------------------------------------------
# Retrievability
# ---------------------------------------------------------------------------

class TestRetrievability:
    def test_new_card_is_zero(self):
        assert calculate_retrievability(Card()) == 0.0

    def test_just_reviewed_is_one(self, review_time):
        card = _reviewed_card(review_time)
        assert calculate_retrievability(card, review_time) == pytest.approx(1.0)

    def test_ninety_percent_after_stability_days(self, review_time):
        card = _reviewed_card(review_time, stability=10.0)
        r = calculate_retrievability(card, review_time + timedelta(days=10))
        assert r == pytest.approx(0.9)

    def test_decays_with_time(self, review_time):
        card = _reviewed_card(review_time)

        recent = calculate_retrievability(card, review_time + timedelta(days=1))
        old = calculate_retrievability(card, review_time + timedelta(days=30))

        assert 0.0 < old < recent < 1.0

    def test_higher_stability_decays_slower(self, review_time):
        later = review_time + timedelta(days=5)

        low = calculate_retrievability(_reviewed_card(review_time, stability=2.0), later)
        high = calculate_retrievability(_reviewed_card(review_time, stability=20.0), later)

        assert high > low

    def test_negative_elapsed_time_is_clamped(self, review_time):
        card = _reviewed_card(review_time)
        r = calculate_retrievability(card, review_time - timedelta(days=3))
        assert r == pytest.approx(1.0)

    def test_custom_parameters(self, review_time, parameters):
        card = _reviewed_card(review_time)
        later = review_time + timedelta(days=20)
        custom = list(parameters)
        custom[20] = 0.5

        assert calculate_retrievability(card, later, custom) != calculate_retrievability(card, later)


class TestReviewTiming:
    def test_days_since_last_review(self, review_time):
        card = _reviewed_card(review_time)

        assert days_since_last_review(Card(), review_time) is None
        assert days_since_last_review(card, review_time + timedelta(hours=30)) == 1

    def test_short_term_review(self, review_time):
        card = _reviewed_card(review_time)

        assert is_short_term_review(card, review_time + timedelta(hours=23))
        assert not is_short_term_review(card, review_time + timedelta(hours=25))
        assert not is_short_term_review(Card(), review_time)

    def test_is_utc(self):
        assert is_utc(datetime(2024, 1, 1, tzinfo=timezone.utc))
        assert not is_utc(datetime(2024, 1, 1))
        assert not is_utc(datetime(2024, 1, 1, tzinfo=timezone(timedelta(hours=9))))
        assert not is_utc(datetime(2024, 1, 1, tzinfo=ZoneInfo("Europe/London")))
        assert is_utc(datetime(2024, 1, 1, tzinfo=ZoneInfo("UTC")))
