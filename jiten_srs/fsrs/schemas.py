"""
Pydantic models for review requests.

These validate what a request handler receives before it reaches the
scheduler.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from jiten_srs.fsrs.constants import Rating


class ReviewRequest(BaseModel):
    """A user's rating of one word reading."""
    word_id: int
    reading_index: int = Field(default=0, ge=0, le=255)
    rating: Rating
    review_duration: Optional[int] = Field(default=None, ge=0)  # milliseconds
