"""
SQLAlchemy ORM Models for FSRS Database

Defines the card and review log tables backing the card-state provider.
"""

from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, Integer, SmallInteger, String, UniqueConstraint
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class FsrsCardModel(Base):
    """
    Persistent scheduling state for a single card (user + word + reading).

    stability and difficulty are NULL until the first review.
    """
    __tablename__ = 'fsrs_cards'
    __table_args__ = (
        UniqueConstraint('user_id', 'word_id', 'reading_index', name='uq_fsrs_cards_user_word_reading'),
        Index('ix_fsrs_cards_user_due', 'user_id', 'due'),
    )

    card_id = Column(Integer, primary_key=True, autoincrement=True)

    user_id = Column(String(255), nullable=False)
    word_id = Column(Integer, nullable=False)
    reading_index = Column(SmallInteger, nullable=False, default=0)

    state = Column(Integer, nullable=False)  # 1=LEARNING, 2=REVIEW, 3=RELEARNING
    step = Column(Integer, nullable=True)

    stability = Column(Float, nullable=True)
    difficulty = Column(Float, nullable=True)

    due = Column(DateTime(timezone=True), nullable=False)
    last_review = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<FsrsCard({self.card_id}, {self.user_id}, {self.word_id}/{self.reading_index})>"


class FsrsReviewLogModel(Base):
    """
    Log entry for a single review of a card. Rows are only ever inserted.
    """
    __tablename__ = 'fsrs_review_logs'

    review_log_id = Column(Integer, primary_key=True, autoincrement=True)
    card_id = Column(Integer, ForeignKey('fsrs_cards.card_id', ondelete='CASCADE'), nullable=False, index=True)

    rating = Column(Integer, nullable=False)  # 1=AGAIN, 2=HARD, 3=GOOD, 4=EASY
    review_datetime = Column(DateTime(timezone=True), nullable=False)
    review_duration = Column(Integer, nullable=True)  # milliseconds

    def __repr__(self):
        return f"<FsrsReviewLog(id={self.review_log_id}, card={self.card_id}, rating={self.rating})>"
