"""
Service layer for catalog statistics and rankings.

``catalog_statistics`` asks the trip collection for one grouped
aggregate record and normalises it: missing values (empty catalog)
become 0, averages are rounded for display.  ``top_rated`` ranks
reviewed trips in Python, which keeps the two‑key ordering and the
projection independent of the storage engine.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from ..core.collection import TripCollection
from ..schemas.statistics import CatalogStatistics
from ..schemas.trip import TopRatedTrip, Trip
from .query_builder import FilterSpec
from .rating import round_half_up


DEFAULT_TOP_RATED_LIMIT = 5


def _number(value: Optional[float]) -> float:
    return 0 if value is None else value


def summarize(record: Dict[str, Any]) -> CatalogStatistics:
    """Turn a raw aggregate record into :class:`CatalogStatistics`."""
    if not record or not record.get("total_trips"):
        return CatalogStatistics()
    return CatalogStatistics(
        total_trips=record["total_trips"],
        average_price=round_half_up(_number(record.get("average_price")), 2),
        min_price=_number(record.get("min_price")),
        max_price=_number(record.get("max_price")),
        average_length=round_half_up(_number(record.get("average_length")), 1),
        total_reviews=int(_number(record.get("total_reviews"))),
        average_rating=round_half_up(_number(record.get("average_rating")), 1),
    )


def rank_top_rated(trips: Iterable[Trip], limit: Optional[int] = None) -> List[TopRatedTrip]:
    """Order reviewed trips by rating, then by number of reviews.

    ``limit`` falls back to 5 when missing or not positive.
    """
    if limit is None or limit <= 0:
        limit = DEFAULT_TOP_RATED_LIMIT
    reviewed = [trip for trip in trips if trip.total_reviews > 0]
    reviewed.sort(key=lambda trip: (trip.average_rating, trip.total_reviews), reverse=True)
    return [
        TopRatedTrip(
            code=trip.code,
            name=trip.name,
            resort=trip.resort,
            per_person=trip.per_person,
            average_rating=trip.average_rating,
            total_reviews=trip.total_reviews,
            image=trip.image,
        )
        for trip in reviewed[:limit]
    ]


class StatisticsService:
    """Aggregated metrics over the whole trip catalog."""

    def __init__(self, collection: TripCollection):
        self.collection = collection

    async def catalog_statistics(self) -> CatalogStatistics:
        return summarize(self.collection.aggregate())

    async def top_rated(self, limit: Optional[int] = None) -> List[TopRatedTrip]:
        trips = self.collection.find(FilterSpec(reviewed_only=True))
        return rank_top_rated(trips, limit)
