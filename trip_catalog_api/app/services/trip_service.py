"""
Business logic for trips and their reviews.

``TripService`` is built once at start‑up with the trip collection
and the shared cache, and handed to every request through FastAPI
dependencies.  The full listing is read through the cache under
``ALL_TRIPS_KEY``; search, statistics, rankings and recommendations
always query the collection.

Every write clears ``ALL_TRIPS_KEY`` after the collection call has
succeeded, never before, so a failed write cannot be hidden behind an
emptied cache.  A read that lands between persistence and
invalidation may see the old listing; that window is accepted.
"""

import logging
from typing import List, Optional

from ..core.cache import SimpleCache
from ..core.collection import TripCollection
from ..core.errors import ConcurrencyConflictError
from ..schemas.review import Review, ReviewCreate, TripReviews
from ..schemas.search import SearchParams, SearchResult
from ..schemas.statistics import CatalogStatistics
from ..schemas.trip import (
    ReviewAdded,
    SimilarTrips,
    TopRatedTrip,
    Trip,
    TripBrief,
    TripCreate,
    TripUpdate,
)
from .query_builder import build_query, echo
from .rating import update_rating_stats
from .similarity import rank_similar
from .statistics_service import StatisticsService


logger = logging.getLogger(__name__)

ALL_TRIPS_KEY = "all_trips"

# Attempts for a review append that keeps losing the version check.
REVIEW_WRITE_RETRIES = 3


def _lookup_code(code: str) -> str:
    return code.strip().upper()


class TripService:
    """Request‑facing operations over the trip catalog."""

    def __init__(self, collection: TripCollection, cache: SimpleCache):
        self.collection = collection
        self.cache = cache
        self.statistics = StatisticsService(collection)

    async def get_all_trips(self) -> List[Trip]:
        """Return every trip, ordered by name, from the cache when fresh.

        Callers get copies; the cached list itself is never handed out.
        """
        trips = self.cache.get(ALL_TRIPS_KEY)
        if trips is None:
            trips = self.collection.find()
            self.cache.set(ALL_TRIPS_KEY, trips)
        return [trip.model_copy(deep=True) for trip in trips]

    async def get_trip_by_code(self, code: str) -> List[Trip]:
        """Return the trips matching ``code``; empty when there is none."""
        trip = self.collection.find_one(_lookup_code(code))
        return [trip] if trip else []

    async def add_trip(self, data: TripCreate) -> Trip:
        logger.info("Adding trip %s", data.code)
        trip = self.collection.insert(Trip(**data.model_dump()))
        self.cache.clear(ALL_TRIPS_KEY)
        return trip

    async def update_trip(self, code: str, data: TripUpdate) -> Optional[Trip]:
        """Apply the provided fields to a trip.

        Returns ``None`` when no trip has ``code``.  The cache is only
        invalidated when a trip was actually written.
        """
        updates = data.model_dump(exclude_none=True)
        logger.info("Updating trip %s: %s", code, sorted(updates))
        trip = self.collection.update_one(_lookup_code(code), updates)
        if trip is not None and updates:
            self.cache.clear(ALL_TRIPS_KEY)
        return trip

    async def search_trips(self, params: SearchParams) -> SearchResult:
        query = build_query(params)
        results = self.collection.find(query.filter, query.sort)
        return SearchResult(results=results, count=len(results), query=echo(params))

    async def get_similar_trips(self, code: str) -> Optional[SimilarTrips]:
        reference = self.collection.find_one(_lookup_code(code))
        if reference is None:
            return None
        candidates = self.collection.find()
        return SimilarTrips(
            based_on=TripBrief(
                code=reference.code,
                name=reference.name,
                resort=reference.resort,
                length=reference.length,
                per_person=reference.per_person,
            ),
            recommendations=rank_similar(reference, candidates),
        )

    async def add_review(self, code: str, data: ReviewCreate) -> Optional[ReviewAdded]:
        """Append a review and persist the recomputed rating fields.

        The trip is re‑read and the append retried when another writer
        saved it in between (see ``TripCollection.save``).  Returns
        ``None`` when no trip has ``code``.
        """
        lookup = _lookup_code(code)
        for attempt in range(1, REVIEW_WRITE_RETRIES + 1):
            trip = self.collection.find_one(lookup)
            if trip is None:
                return None
            trip.reviews.append(Review(**data.model_dump()))
            update_rating_stats(trip)
            try:
                saved = self.collection.save(trip)
            except ConcurrencyConflictError:
                logger.warning(
                    "Review for trip %s lost a concurrent write (attempt %d/%d)",
                    lookup,
                    attempt,
                    REVIEW_WRITE_RETRIES,
                )
                continue
            self.cache.clear(ALL_TRIPS_KEY)
            logger.info(
                "Review by %s added to trip %s (rating %d, average now %.1f)",
                data.author,
                lookup,
                data.rating,
                saved.average_rating,
            )
            return ReviewAdded(
                trip=saved,
                new_average_rating=saved.average_rating,
                total_reviews=saved.total_reviews,
            )
        raise ConcurrencyConflictError(
            f"Could not add review to trip {lookup} after {REVIEW_WRITE_RETRIES} attempts"
        )

    async def get_reviews(self, code: str) -> Optional[TripReviews]:
        trip = self.collection.find_one(_lookup_code(code))
        if trip is None:
            return None
        return TripReviews(
            trip_name=trip.name,
            average_rating=trip.average_rating,
            total_reviews=trip.total_reviews,
            reviews=trip.reviews,
        )

    async def get_statistics(self) -> CatalogStatistics:
        return await self.statistics.catalog_statistics()

    async def get_top_rated(self, limit: Optional[int] = None) -> List[TopRatedTrip]:
        return await self.statistics.top_rated(limit)
