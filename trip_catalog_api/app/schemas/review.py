"""
Pydantic schemas for trip reviews.

Reviews are embedded in their trip: they have no identifier of their
own and are only ever appended to a trip's review list.
"""

from datetime import datetime, timezone
from typing import List

from pydantic import BaseModel, Field, field_validator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReviewCreate(BaseModel):
    """Schema for submitting a review."""

    author: str = Field(..., min_length=1, max_length=100, examples=["Jane Traveller"])
    rating: int = Field(..., ge=1, le=5, description="Rating from 1 to 5")
    comment: str = Field(..., examples=["Wonderful snow and friendly staff."])

    @field_validator("author")
    @classmethod
    def strip_author(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Review author is required")
        return v

    @field_validator("comment")
    @classmethod
    def sanitize_comment(cls, v: str) -> str:
        """Trim whitespace from the comment and enforce its length."""
        v = v.strip()
        if len(v) < 10:
            raise ValueError("Comment must be at least 10 characters")
        if len(v) > 1000:
            raise ValueError("Comment cannot exceed 1000 characters")
        return v


class Review(BaseModel):
    """A stored review."""

    author: str
    rating: int
    comment: str
    created_at: datetime = Field(default_factory=_utcnow)


class TripReviews(BaseModel):
    """Reviews of one trip together with its rating summary."""

    trip_name: str
    average_rating: float
    total_reviews: int
    reviews: List[Review]
