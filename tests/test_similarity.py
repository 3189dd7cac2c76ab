"""Unit tests for the similarity heuristic."""

import pytest

from trip_catalog_api.app.schemas.trip import Trip
from trip_catalog_api.app.services.similarity import (
    MAX_SCORE,
    length_score,
    price_score,
    rank_similar,
    score_similarity,
)


@pytest.fixture
def reference(make_trip):
    return Trip(**make_trip("REF1", per_person=1000, length=7, resort="Aspen"))


def test_identical_trip_scores_maximum(reference, make_trip):
    twin = Trip(**make_trip("TWIN1", per_person=1000, length=7, resort="Aspen"))
    assert score_similarity(reference, twin) == MAX_SCORE == 11


@pytest.mark.parametrize(
    "price, expected",
    [(1499.99, 3), (1500, 2), (1999.99, 2), (2000, 1), (2999.99, 1), (3000, 0), (500.01, 3), (0, 1)],
)
def test_price_bands(reference, make_trip, price, expected):
    assert price_score(reference, Trip(**make_trip("CAND1", per_person=price))) == expected


@pytest.mark.parametrize(
    "length, expected",
    [(9, 3), (5, 3), (10, 2), (12, 2), (13, 1), (14, 1), (15, 0), (1, 1)],
)
def test_length_bands(reference, make_trip, length, expected):
    assert length_score(reference, Trip(**make_trip("CAND1", length=length))) == expected


def test_resort_match_is_exact(reference, make_trip):
    far = {"per_person": 9000, "length": 60}
    assert score_similarity(reference, Trip(**make_trip("CAND1", resort="Aspen", **far))) == 5
    assert score_similarity(reference, Trip(**make_trip("CAND2", resort="aspen", **far))) == 0


def test_reference_is_excluded_and_top_three_returned(reference, make_trip):
    candidates = [
        reference,
        Trip(**make_trip("LOW1", per_person=9000, length=60, resort="Vail")),
        Trip(**make_trip("MID1", per_person=1200, length=10, resort="Vail")),
        Trip(**make_trip("TOP1", per_person=1000, length=7, resort="Aspen")),
        Trip(**make_trip("MID2", per_person=1600, length=7, resort="Vail")),
    ]
    ranked = rank_similar(reference, candidates)
    assert [item.trip.code for item in ranked] == ["TOP1", "MID1", "MID2"]
    assert [item.score for item in ranked] == [11, 5, 5]
    assert all(0 <= item.score <= MAX_SCORE for item in ranked)


def test_ties_keep_supplied_order(reference, make_trip):
    candidates = [Trip(**make_trip(f"T{i}00", per_person=5000, length=40, resort="Vail")) for i in range(5)]
    ranked = rank_similar(reference, candidates)
    assert [item.trip.code for item in ranked] == ["T000", "T100", "T200"]
    assert {item.score for item in ranked} == {0}


def test_fewer_candidates_than_limit(reference, make_trip):
    candidates = [reference, Trip(**make_trip("ONLY1"))]
    ranked = rank_similar(reference, candidates)
    assert len(ranked) == 1
    assert rank_similar(reference, [reference]) == []
