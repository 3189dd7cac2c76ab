"""
Pydantic models for trip search.

``SearchParams`` mirrors the query string as received: every field is
an optional raw string so a malformed number never fails the request.
Parsing into typed bounds happens in ``services.query_builder``.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel

from .trip import Trip


class SearchParams(BaseModel):
    q: Optional[str] = None
    min_price: Optional[str] = None
    max_price: Optional[str] = None
    min_length: Optional[str] = None
    max_length: Optional[str] = None
    resort: Optional[str] = None
    sort_by: Optional[str] = None
    order: Optional[str] = None


class SearchResult(BaseModel):
    results: List[Trip]
    count: int
    query: Dict[str, str]
