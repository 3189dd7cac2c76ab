"""
Pydantic models for trip data.

``TripBase`` holds the fields a caller may supply; ``TripCreate`` and
``TripUpdate`` are the request bodies and ``Trip`` is the stored
record including its reviews and the derived rating fields.  Derived
fields (``average_rating``, ``total_reviews``) are never accepted from
a request: they are maintained by ``services.rating``.
"""

import re
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .review import Review


CODE_PATTERN = re.compile(r"^[A-Z0-9]{3,20}$")


def normalize_code(value: str) -> str:
    """Trim and upper‑case a trip code, rejecting anything not alphanumeric."""
    value = value.strip().upper()
    if not CODE_PATTERN.match(value):
        raise ValueError("Trip code must be 3-20 uppercase letters and numbers")
    return value


def _stripped(value: str, field: str, min_length: int, max_length: int) -> str:
    value = value.strip()
    if len(value) < min_length:
        raise ValueError(f"{field} must be at least {min_length} characters")
    if len(value) > max_length:
        raise ValueError(f"{field} cannot exceed {max_length} characters")
    return value


class TripBase(BaseModel):
    code: str = Field(..., examples=["GALR210214"])
    name: str = Field(..., examples=["Gale Reef"])
    length: int = Field(..., ge=1, le=365, examples=[4])
    start: datetime = Field(..., examples=["2025-02-14T08:00:00Z"])
    resort: str = Field(..., examples=["Emerald Bay, 3 stars"])
    per_person: float = Field(..., ge=0, examples=[799.0])
    image: str = Field(..., examples=["reef1.jpg"])
    description: str = Field(..., examples=["Sed et augue lorem. In sit amet placerat arcu."])

    @field_validator("code")
    @classmethod
    def check_code(cls, v: str) -> str:
        return normalize_code(v)

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        return _stripped(v, "Trip name", 3, 100)

    @field_validator("resort")
    @classmethod
    def check_resort(cls, v: str) -> str:
        return _stripped(v, "Resort name", 1, 100)

    @field_validator("image")
    @classmethod
    def check_image(cls, v: str) -> str:
        return _stripped(v, "Image URL", 1, 500)

    @field_validator("description")
    @classmethod
    def check_description(cls, v: str) -> str:
        return _stripped(v, "Description", 10, 2000)


class TripCreate(TripBase):
    """Schema for creating a trip."""
    pass


class TripUpdate(BaseModel):
    """Schema for updating a trip.

    All fields are optional; only provided fields are changed.
    """

    code: Optional[str] = None
    name: Optional[str] = None
    length: Optional[int] = Field(None, ge=1, le=365)
    start: Optional[datetime] = None
    resort: Optional[str] = None
    per_person: Optional[float] = Field(None, ge=0)
    image: Optional[str] = None
    description: Optional[str] = None

    @field_validator("code")
    @classmethod
    def check_code(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else normalize_code(v)

    @field_validator("name")
    @classmethod
    def check_name(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _stripped(v, "Trip name", 3, 100)

    @field_validator("resort")
    @classmethod
    def check_resort(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _stripped(v, "Resort name", 1, 100)

    @field_validator("image")
    @classmethod
    def check_image(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _stripped(v, "Image URL", 1, 500)

    @field_validator("description")
    @classmethod
    def check_description(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _stripped(v, "Description", 10, 2000)


class Trip(TripBase):
    """A stored trip with its embedded reviews."""

    reviews: List[Review] = Field(default_factory=list)
    average_rating: float = 0
    total_reviews: int = 0
    # Optimistic concurrency token, internal to the collection.
    version: int = Field(1, exclude=True)


class TripBrief(BaseModel):
    """The fields of a trip other trips are compared against."""

    code: str
    name: str
    resort: str
    length: int
    per_person: float


class ScoredTrip(BaseModel):
    """A recommended trip and how similar it is to the reference."""

    trip: Trip
    score: int


class SimilarTrips(BaseModel):
    based_on: TripBrief
    recommendations: List[ScoredTrip]


class TopRatedTrip(BaseModel):
    """Reduced projection returned by the top‑rated ranking."""

    code: str
    name: str
    resort: str
    per_person: float
    average_rating: float
    total_reviews: int
    image: str


class ReviewAdded(BaseModel):
    trip: Trip
    new_average_rating: float
    total_reviews: int
