"""
Derived rating fields of a trip.

Write paths call :func:`update_rating_stats` right before handing the
trip to ``TripCollection.save`` so the review list and the derived
fields always reach the database in the same statement.
"""

import math

from ..schemas.trip import Trip


def round_half_up(value: float, digits: int = 1) -> float:
    """Round to ``digits`` decimals with halves going up (4.25 -> 4.3).

    ``round()`` rounds halves to even, which would report 4.2 there.
    """
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def update_rating_stats(trip: Trip) -> Trip:
    """Recompute ``average_rating`` and ``total_reviews`` from ``trip.reviews``."""
    if not trip.reviews:
        trip.average_rating = 0
        trip.total_reviews = 0
    else:
        total = sum(review.rating for review in trip.reviews)
        trip.average_rating = round_half_up(total / len(trip.reviews), 1)
        trip.total_reviews = len(trip.reviews)
    return trip
