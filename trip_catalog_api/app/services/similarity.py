"""
Heuristic trip similarity.

A candidate earns points for being close in price, close in duration
and for sharing the reference trip's resort:

=========================  =====  =====  =====
                            +3     +2     +1
=========================  =====  =====  =====
price difference            <500   <1000  <2000
length difference (days)    <=2    <=5    <=7
=========================  =====  =====  =====

plus 5 for an exactly equal resort name, so the best score is 11.
Ranking is a stable sort on descending score, so ties keep the order
the candidates were supplied in.
"""

from typing import Iterable, List

from ..schemas.trip import ScoredTrip, Trip


MAX_SCORE = 11
DEFAULT_LIMIT = 3

PRICE_BANDS = ((500, 3), (1000, 2), (2000, 1))
LENGTH_BANDS = ((2, 3), (5, 2), (7, 1))
RESORT_MATCH = 5


def price_score(reference: Trip, candidate: Trip) -> int:
    diff = abs(candidate.per_person - reference.per_person)
    for bound, points in PRICE_BANDS:
        if diff < bound:
            return points
    return 0


def length_score(reference: Trip, candidate: Trip) -> int:
    diff = abs(candidate.length - reference.length)
    for bound, points in LENGTH_BANDS:
        if diff <= bound:
            return points
    return 0


def score_similarity(reference: Trip, candidate: Trip) -> int:
    score = price_score(reference, candidate) + length_score(reference, candidate)
    if candidate.resort == reference.resort:
        score += RESORT_MATCH
    return score


def rank_similar(reference: Trip, candidates: Iterable[Trip], limit: int = DEFAULT_LIMIT) -> List[ScoredTrip]:
    """Return the ``limit`` candidates most similar to ``reference``.

    The reference itself (same code) is skipped.  Zero scores are kept
    so a small catalog still yields recommendations.
    """
    scored = [
        ScoredTrip(trip=candidate, score=score_similarity(reference, candidate))
        for candidate in candidates
        if candidate.code != reference.code
    ]
    scored.sort(key=lambda item: item.score, reverse=True)
    return scored[:limit]
