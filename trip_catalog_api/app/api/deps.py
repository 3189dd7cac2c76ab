"""
FastAPI dependencies resolving the components built in ``create_app``.

The cache, the trip service and the user service are created once per
application and stored on ``app.state``; handlers receive them through
``Depends`` rather than importing module‑level instances.
"""

from fastapi import Request

from ..core.cache import SimpleCache
from ..services.trip_service import TripService
from ..services.user_service import UserService


def get_cache(request: Request) -> SimpleCache:
    return request.app.state.cache


def get_trip_service(request: Request) -> TripService:
    return request.app.state.trips


def get_user_service(request: Request) -> UserService:
    return request.app.state.users
