"""
Translate raw search parameters into a typed trip query.

``build_query`` turns a :class:`SearchParams` (strings straight from
the query string) into a :class:`TripQuery` holding a
:class:`FilterSpec` and a :class:`SortSpec`.  Both are frozen values
built in one step; ``TripCollection.find`` compiles them to SQL.

Rules are combined with AND:

- ``q``: full‑text match over name and description;
- ``min_price``/``max_price``: inclusive bounds on ``per_person``;
- ``min_length``/``max_length``: inclusive bounds on ``length``;
- ``resort``: case‑insensitive substring.

Exactly one sort key is active: an explicit recognised ``sort_by``
(ascending unless ``order`` is ``desc``), otherwise text relevance
when ``q`` was given, otherwise ``name`` ascending.  Malformed or
unknown values are treated as absent, never as errors.
"""

import math
from dataclasses import dataclass
from typing import Dict, Optional

from ..schemas.search import SearchParams


RELEVANCE = "relevance"

SORT_FIELDS = {
    "code": "code",
    "name": "name",
    "length": "length",
    "start": "start",
    "resort": "resort",
    "per_person": "per_person",
    "perPerson": "per_person",
    "price": "per_person",
    "average_rating": "average_rating",
    "averageRating": "average_rating",
    "rating": "average_rating",
    "total_reviews": "total_reviews",
    "totalReviews": "total_reviews",
}


@dataclass(frozen=True)
class FilterSpec:
    text: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    resort: Optional[str] = None
    reviewed_only: bool = False

    @property
    def is_empty(self) -> bool:
        return self == FilterSpec()


@dataclass(frozen=True)
class SortSpec:
    field: str = "name"
    descending: bool = False


@dataclass(frozen=True)
class TripQuery:
    filter: FilterSpec
    sort: SortSpec


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def parse_float(value: Optional[str]) -> Optional[float]:
    """Parse a finite float, returning ``None`` for anything else."""
    value = _clean(value)
    if value is None:
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def parse_int(value: Optional[str]) -> Optional[int]:
    """Parse an integer bound; ``"7.0"`` is accepted, ``"7.5"`` is not."""
    number = parse_float(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


def resolve_sort(sort_by: Optional[str], order: Optional[str], has_text: bool) -> SortSpec:
    field = SORT_FIELDS.get(_clean(sort_by) or "")
    if field is not None:
        descending = (_clean(order) or "").lower() == "desc"
        return SortSpec(field=field, descending=descending)
    if has_text:
        return SortSpec(field=RELEVANCE, descending=True)
    return SortSpec(field="name", descending=False)


def build_query(params: SearchParams) -> TripQuery:
    text = _clean(params.q)
    trip_filter = FilterSpec(
        text=text,
        min_price=parse_float(params.min_price),
        max_price=parse_float(params.max_price),
        min_length=parse_int(params.min_length),
        max_length=parse_int(params.max_length),
        resort=_clean(params.resort),
    )
    return TripQuery(
        filter=trip_filter,
        sort=resolve_sort(params.sort_by, params.order, has_text=text is not None),
    )


def echo(params: SearchParams) -> Dict[str, str]:
    """Return the parameters the caller actually supplied."""
    return {key: value for key, value in params.model_dump().items() if _clean(value) is not None}
