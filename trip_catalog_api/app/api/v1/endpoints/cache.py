"""
Cache introspection for administrators.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from trip_catalog_api.app.api.deps import get_cache
from trip_catalog_api.app.core.cache import SimpleCache
from trip_catalog_api.app.core.security import get_current_user


router = APIRouter()


@router.get("/stats", response_model=Dict[str, Any])
async def cache_stats(
    cache: SimpleCache = Depends(get_cache),
    current_user: Dict[str, Any] = Depends(get_current_user),
) -> Dict[str, Any]:
    """Number of cached entries and their keys."""
    return cache.stats()
