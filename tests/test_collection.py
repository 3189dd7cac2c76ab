"""Integration tests for the SQLite trip collection."""

import pytest

from trip_catalog_api.app.core.collection import TripCollection, fts_query
from trip_catalog_api.app.core.db import Database
from trip_catalog_api.app.core.errors import ConcurrencyConflictError, DuplicateTripError, PersistenceError
from trip_catalog_api.app.schemas.review import Review
from trip_catalog_api.app.schemas.trip import Trip
from trip_catalog_api.app.services.query_builder import RELEVANCE, FilterSpec, SortSpec


@pytest.fixture
def insert(collection, make_trip):
    def _insert(code, **overrides):
        return collection.insert(Trip(**make_trip(code, **overrides)))

    return _insert


def codes(trips):
    return [trip.code for trip in trips]


def test_insert_and_find_one(collection, insert):
    stored = insert("ABC123")
    assert stored.version == 1
    found = collection.find_one("ABC123")
    assert found.code == "ABC123"
    assert found.reviews == []
    assert collection.find_one("NOPE1") is None


def test_duplicate_code_raises(insert):
    insert("ABC123")
    with pytest.raises(DuplicateTripError):
        insert("ABC123")


def test_price_bounds_are_inclusive(collection, insert):
    insert("EXACT1", per_person=500)
    insert("BELOW1", per_person=499.99)
    insert("ABOVE1", per_person=500.01)
    found = collection.find(FilterSpec(min_price=500, max_price=500))
    assert codes(found) == ["EXACT1"]


def test_length_bounds_are_inclusive(collection, insert):
    insert("SHORT1", length=3)
    insert("MID1", length=5)
    insert("LONG1", length=8)
    assert codes(collection.find(FilterSpec(min_length=3, max_length=5), SortSpec("length"))) == [
        "SHORT1",
        "MID1",
    ]


def test_resort_substring_is_case_insensitive(collection, insert):
    insert("ASP1", resort="Aspen Highlands")
    insert("VAIL1", resort="Vail")
    assert codes(collection.find(FilterSpec(resort="HIGHland"))) == ["ASP1"]
    assert collection.find(FilterSpec(resort="100%")) == []
    assert collection.find(FilterSpec(resort="Va_l")) == []


def test_resort_match_folds_non_ascii_case(collection, insert):
    insert("ZUR1", resort="Zürich Lodge")
    insert("SOLD1", resort="Sölden")
    insert("VAIL1", resort="Vail")
    assert codes(collection.find(FilterSpec(resort="ZÜRICH"))) == ["ZUR1"]
    assert codes(collection.find(FilterSpec(resort="SÖL"))) == ["SOLD1"]
    assert codes(collection.find(FilterSpec(resort="zürich lodge"))) == ["ZUR1"]


def test_text_search_matches_name_and_description(collection, insert):
    insert("REEF1", name="Gale Reef", description="Diving trip over the coral reef.")
    insert("SKI1", name="Powder Week", description="Skiing on fresh snow every day.")
    insert("BEACH1", name="Beach Escape", description="Relax by the reef on a sunny beach.")
    assert sorted(codes(collection.find(FilterSpec(text="reef")))) == ["BEACH1", "REEF1"]
    assert codes(collection.find(FilterSpec(text="snow"))) == ["SKI1"]
    assert collection.find(FilterSpec(text="volcano")) == []


def test_text_search_orders_by_relevance(collection, insert):
    insert("ONCE1", name="Island Hopper", description="One mention of coral somewhere here.")
    insert("TWICE1", name="Coral Coast", description="Coral gardens and coral reefs all week.")
    found = collection.find(FilterSpec(text="coral"), SortSpec(RELEVANCE, descending=True))
    assert codes(found) == ["TWICE1", "ONCE1"]


def test_text_search_tolerates_query_syntax(collection, insert):
    insert("REEF1", name="Gale Reef", description="Diving trip over the coral reef.")
    assert codes(collection.find(FilterSpec(text='reef" OR NEAR(*'))) == ["REEF1"]


def test_text_search_follows_updates(collection, insert):
    insert("REEF1", name="Gale Reef", description="Diving trip over the coral reef.")
    collection.update_one("REEF1", {"name": "Glacier Walk", "description": "Ice climbing for beginners."})
    assert collection.find(FilterSpec(text="reef")) == []
    assert codes(collection.find(FilterSpec(text="glacier"))) == ["REEF1"]


def test_default_sort_is_name_ascending(collection, insert):
    insert("CCC1", name="Charlie")
    insert("AAA1", name="Alpha")
    insert("BBB1", name="Bravo")
    assert codes(collection.find()) == ["AAA1", "BBB1", "CCC1"]
    assert codes(collection.find(sort=SortSpec("name", descending=True))) == ["CCC1", "BBB1", "AAA1"]


def test_filters_combine_with_and(collection, insert):
    insert("MATCH1", per_person=800, length=5, resort="Aspen")
    insert("PRICE1", per_person=3000, length=5, resort="Aspen")
    insert("RESORT1", per_person=800, length=5, resort="Vail")
    found = collection.find(FilterSpec(max_price=1000, min_length=5, resort="asp"))
    assert codes(found) == ["MATCH1"]


def test_save_persists_reviews_and_bumps_version(collection, insert):
    trip = insert("ABC123")
    trip.reviews.append(Review(author="Ann", rating=4, comment="Lovely place to stay"))
    trip.average_rating = 4.0
    trip.total_reviews = 1
    saved = collection.save(trip)
    assert saved.version == 2
    stored = collection.find_one("ABC123")
    assert stored.version == 2
    assert stored.total_reviews == 1
    assert stored.reviews[0].author == "Ann"
    assert stored.reviews[0].created_at is not None


def test_save_with_stale_version_conflicts(collection, insert):
    insert("ABC123")
    first = collection.find_one("ABC123")
    second = collection.find_one("ABC123")
    collection.save(first)
    with pytest.raises(ConcurrencyConflictError):
        collection.save(second)


def test_update_one(collection, insert):
    insert("ABC123", per_person=1000)
    updated = collection.update_one("ABC123", {"per_person": 1200, "reviews": "ignored"})
    assert updated.per_person == 1200
    assert updated.version == 2
    assert collection.update_one("NOPE1", {"per_person": 1}) is None


def test_update_one_can_rename_code(collection, insert):
    insert("OLD1")
    updated = collection.update_one("OLD1", {"code": "NEW1"})
    assert updated.code == "NEW1"
    assert collection.find_one("OLD1") is None


def test_aggregate_on_empty_table(collection):
    record = collection.aggregate()
    assert record["total_trips"] == 0
    assert record["average_price"] is None
    assert record["total_reviews"] == 0


def test_storage_failure_is_wrapped(tmp_path):
    broken = TripCollection(Database(str(tmp_path / "never-migrated.db")))
    with pytest.raises(PersistenceError) as excinfo:
        broken.find()
    assert "no such table" in excinfo.value.message


def test_fts_query_quotes_terms():
    assert fts_query('coral "reef') == '"coral" OR """reef"'
