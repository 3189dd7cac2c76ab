"""
API endpoints for trip reviews.

Anyone may read or submit reviews.  Submitting a review recomputes
the trip's average rating and review count in the same write.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from trip_catalog_api.app.api.deps import get_trip_service
from trip_catalog_api.app.schemas.review import ReviewCreate, TripReviews
from trip_catalog_api.app.schemas.trip import ReviewAdded
from trip_catalog_api.app.services.trip_service import TripService


router = APIRouter()


@router.get("/{code}/reviews", response_model=TripReviews, summary="List reviews of a trip")
async def list_reviews(code: str, service: TripService = Depends(get_trip_service)) -> TripReviews:
    reviews = await service.get_reviews(code)
    if reviews is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trip not found")
    return reviews


@router.post(
    "/{code}/reviews",
    response_model=ReviewAdded,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a review",
)
async def create_review(
    code: str,
    data: ReviewCreate,
    service: TripService = Depends(get_trip_service),
) -> ReviewAdded:
    """Append a review to a trip.

    Returns the updated trip together with its new average rating and
    review count.  Responds 409 if the trip kept changing underneath
    the write.
    """
    added = await service.add_review(code, data)
    if added is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trip not found")
    return added
