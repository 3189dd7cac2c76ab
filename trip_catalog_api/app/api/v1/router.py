"""
Top‑level router for version 1 of the API.

This router aggregates domain‑specific routers under a unified prefix.
When new domains are introduced, update this file to include their
routers.
"""

from fastapi import APIRouter

from .endpoints import auth, cache, reviews, trips

router = APIRouter()

router.include_router(auth.router, tags=["auth"])
router.include_router(cache.router, prefix="/cache", tags=["cache"])
router.include_router(trips.router, prefix="/trips", tags=["trips"])
router.include_router(reviews.router, prefix="/trips", tags=["reviews"])
