"""Unit tests for search parameter translation."""

from trip_catalog_api.app.schemas.search import SearchParams
from trip_catalog_api.app.services.query_builder import (
    RELEVANCE,
    FilterSpec,
    SortSpec,
    build_query,
    echo,
    parse_float,
    parse_int,
)


def test_no_parameters_sorts_by_name():
    query = build_query(SearchParams())
    assert query.filter == FilterSpec()
    assert query.filter.is_empty
    assert query.sort == SortSpec(field="name", descending=False)


def test_bounds_are_parsed():
    query = build_query(
        SearchParams(min_price="500", max_price="1500.50", min_length="3", max_length="10")
    )
    assert query.filter.min_price == 500.0
    assert query.filter.max_price == 1500.5
    assert query.filter.min_length == 3
    assert query.filter.max_length == 10


def test_malformed_bounds_are_ignored():
    query = build_query(
        SearchParams(min_price="cheap", max_price="nan", min_length="7.5", max_length="")
    )
    assert query.filter.min_price is None
    assert query.filter.max_price is None
    assert query.filter.min_length is None
    assert query.filter.max_length is None


def test_blank_text_is_not_a_text_query():
    query = build_query(SearchParams(q="   "))
    assert query.filter.text is None
    assert query.sort.field == "name"


def test_text_query_sorts_by_relevance():
    query = build_query(SearchParams(q="  beach  "))
    assert query.filter.text == "beach"
    assert query.sort == SortSpec(field=RELEVANCE, descending=True)


def test_explicit_sort_wins_over_relevance():
    query = build_query(SearchParams(q="beach", sort_by="perPerson", order="desc"))
    assert query.sort == SortSpec(field="per_person", descending=True)


def test_sort_direction_defaults_to_ascending():
    assert build_query(SearchParams(sort_by="length")).sort.descending is False
    assert build_query(SearchParams(sort_by="length", order="sideways")).sort.descending is False
    assert build_query(SearchParams(sort_by="length", order="DESC")).sort.descending is True


def test_unknown_sort_field_is_ignored():
    query = build_query(SearchParams(sort_by="id; DROP TABLE trips"))
    assert query.sort == SortSpec(field="name", descending=False)


def test_resort_is_trimmed():
    assert build_query(SearchParams(resort="  aspen ")).filter.resort == "aspen"


def test_parse_helpers():
    assert parse_float("1e3") == 1000.0
    assert parse_float("inf") is None
    assert parse_float(None) is None
    assert parse_int("7.0") == 7
    assert parse_int("-2") == -2
    assert parse_int("abc") is None


def test_echo_keeps_only_supplied_parameters():
    params = SearchParams(q="ski", min_price="abc", resort=" ", sort_by=None)
    assert echo(params) == {"q": "ski", "min_price": "abc"}
