import pytest

from airport_lookup.services.candidates import (
    CandidateFetcher,
    Clause,
    build_candidate_filter,
)
from airport_lookup.services.query import normalize_query


def test_code_like_query_adds_exact_and_prefix_on_every_code_field():
    f = build_candidate_filter(normalize_query("teb"))
    ops = {(c.column, c.op) for c in f.clauses}
    for col in ("iata_code", "gps_code", "local_code", "airport_code", "airport_code_adjusted"):
        assert (col, "eq") in ops
        assert (col, "prefix") in ops
    assert ("search_terms", "tag") in ops
    assert Clause("airport", "contains", "teb") in f.clauses


def test_text_query_skips_code_clauses():
    f = build_candidate_filter(normalize_query("new york city"))
    assert {c.op for c in f.clauses} == {"contains", "tag"}
    assert [c.column for c in f.clauses if c.op == "contains"] == ["airport", "municipality", "country_name"]


def test_postgrest_rendering():
    f = build_candidate_filter(normalize_query("TEB"))
    rendered = f.to_postgrest()
    assert rendered.startswith("(") and rendered.endswith(")")
    assert "iata_code.eq.TEB" in rendered
    assert "gps_code.ilike.TEB*" in rendered
    assert "airport.ilike.*teb*" in rendered
    assert "search_terms.cs.{TEB}" in rendered


def test_postgrest_quotes_reserved_characters():
    f = build_candidate_filter(normalize_query("St. Louis"))
    rendered = f.to_postgrest()
    assert 'municipality.ilike."*st louis*"' in rendered
    assert 'search_terms.cs.{"ST. LOUIS"}' in rendered


def test_in_process_matching(make_airport):
    rec = make_airport(
        "jfk", "John F Kennedy International Airport", iata_code="JFK",
        municipality="New York", search_terms=("NYC",),
    )
    assert Clause("iata_code", "eq", "JFK").matches(rec)
    assert not Clause("iata_code", "eq", "jfk").matches(rec)
    assert Clause("iata_code", "prefix", "jf").matches(rec)
    assert Clause("airport", "contains", "kennedy").matches(rec)
    assert Clause("municipality", "contains", "york").matches(rec)
    assert Clause("search_terms", "tag", "NYC").matches(rec)
    assert not Clause("gps_code", "prefix", "K").matches(rec)
    assert build_candidate_filter(normalize_query("nyc")).matches(rec)


@pytest.mark.asyncio
async def test_fetcher_overfetches_and_dedupes(make_airport, make_store):
    dup = make_airport("1", "Alpha Field")
    store = make_store([dup, dup, make_airport("2", "Alpha Strip")])
    fetcher = CandidateFetcher(store, overfetch=100)

    result = await fetcher.fetch(normalize_query("alpha", "2"))

    assert result.error is None
    assert [r.airport_id for r in result.records] == ["1", "2"]
    assert store.calls[0][1] == 100


@pytest.mark.asyncio
async def test_fetcher_turns_store_errors_into_soft_failure(make_store):
    fetcher = CandidateFetcher(make_store([], error="connection reset"))
    result = await fetcher.fetch(normalize_query("alpha"))
    assert result.records == []
    assert result.error == "connection reset"


@pytest.mark.asyncio
async def test_fetcher_never_requests_more_than_overfetch_cap(make_store):
    store = make_store([])
    await CandidateFetcher(store, overfetch=500).fetch(normalize_query("field"))
    assert store.calls[0][1] == 100
