"""
Trip endpoints for API v1.

Listing, lookup, search, statistics, rankings and recommendations are
public.  Creating and updating trips requires a bearer token.  The
fixed paths (``/search``, ``/statistics``, ``/top-rated``) are declared
before ``/{code}`` so they are not captured as trip codes.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from trip_catalog_api.app.api.deps import get_trip_service
from trip_catalog_api.app.core.security import get_current_user
from trip_catalog_api.app.schemas.search import SearchParams, SearchResult
from trip_catalog_api.app.schemas.statistics import CatalogStatistics
from trip_catalog_api.app.schemas.trip import SimilarTrips, TopRatedTrip, Trip, TripCreate, TripUpdate
from trip_catalog_api.app.services.query_builder import parse_int
from trip_catalog_api.app.services.trip_service import TripService


router = APIRouter()


@router.get("", response_model=List[Trip])
async def list_trips(service: TripService = Depends(get_trip_service)) -> List[Trip]:
    """List all trips ordered by name.

    Served from the cache when a fresh listing is available.
    """
    trips = await service.get_all_trips()
    if not trips:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No trips exist in our database")
    return trips


@router.post("", response_model=Trip, status_code=status.HTTP_201_CREATED)
async def create_trip(
    trip: TripCreate,
    service: TripService = Depends(get_trip_service),
    current_user: Dict[str, Any] = Depends(get_current_user),
) -> Trip:
    """Add a new trip.  Duplicate codes are rejected with 409."""
    return await service.add_trip(trip)


@router.get("/search", response_model=SearchResult)
async def search_trips(
    q: Optional[str] = Query(None, description="Free text matched against name and description"),
    min_price: Optional[str] = Query(None),
    max_price: Optional[str] = Query(None),
    min_length: Optional[str] = Query(None),
    max_length: Optional[str] = Query(None),
    resort: Optional[str] = Query(None, description="Case-insensitive substring of the resort name"),
    sort_by: Optional[str] = Query(None),
    order: Optional[str] = Query(None, description="'asc' (default) or 'desc'"),
    service: TripService = Depends(get_trip_service),
) -> SearchResult:
    """Search trips.

    - **q**: full-text query; results are ordered by relevance unless
      ``sort_by`` is given.
    - **min_price**, **max_price**, **min_length**, **max_length**:
      inclusive bounds.  Values that are not numbers are ignored.
    - **sort_by**, **order**: explicit ordering.
    """
    params = SearchParams(
        q=q,
        min_price=min_price,
        max_price=max_price,
        min_length=min_length,
        max_length=max_length,
        resort=resort,
        sort_by=sort_by,
        order=order,
    )
    return await service.search_trips(params)


@router.get("/statistics", response_model=CatalogStatistics)
async def get_statistics(service: TripService = Depends(get_trip_service)) -> CatalogStatistics:
    return await service.get_statistics()


@router.get("/top-rated", response_model=List[TopRatedTrip])
async def get_top_rated(
    limit: Optional[str] = Query(None, description="Number of trips to return (default 5)"),
    service: TripService = Depends(get_trip_service),
) -> List[TopRatedTrip]:
    """Best rated trips, ties broken by number of reviews."""
    return await service.get_top_rated(parse_int(limit))


@router.get("/{code}", response_model=List[Trip])
async def get_trip(code: str, service: TripService = Depends(get_trip_service)) -> List[Trip]:
    """Return the trips matching ``code`` as a list."""
    trips = await service.get_trip_by_code(code)
    if not trips:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trip not found")
    return trips


@router.put("/{code}", response_model=Trip)
async def update_trip(
    code: str,
    updates: TripUpdate,
    service: TripService = Depends(get_trip_service),
    current_user: Dict[str, Any] = Depends(get_current_user),
) -> Trip:
    """Update an existing trip.

    Partial updates are supported; unspecified fields remain
    unchanged.  Ratings and reviews cannot be set here.
    """
    trip = await service.update_trip(code, updates)
    if trip is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trip not found")
    return trip


@router.get("/{code}/similar", response_model=SimilarTrips)
async def get_similar_trips(code: str, service: TripService = Depends(get_trip_service)) -> SimilarTrips:
    """Recommend up to three trips close in price, duration and resort."""
    similar = await service.get_similar_trips(code)
    if similar is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trip not found")
    return similar
