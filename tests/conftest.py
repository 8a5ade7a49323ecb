"""Shared fixtures: record factory, in-memory store and cache fakes."""
from __future__ import annotations

from typing import Any, Callable, List, Optional

import pytest

from airport_lookup.data.airports_repo import AirportRecord
from airport_lookup.core.errors import SearchStoreError


def _make_airport(airport_id: str = "1", name: str = "Test Field", country_code: str = "US", **kw: Any) -> AirportRecord:
    return AirportRecord(airport_id=airport_id, name=name, country_code=country_code, **kw)


class FakeStore:
    """Evaluates the candidate filter over a fixed list and counts calls."""

    def __init__(self, records: List[AirportRecord], error: Optional[str] = None) -> None:
        self.records = records
        self.error = error
        self.calls: List[tuple] = []

    async def fetch(self, candidate_filter, limit: int) -> List[AirportRecord]:
        self.calls.append((candidate_filter, limit))
        if self.error:
            raise SearchStoreError(self.error)
        return [r for r in self.records if candidate_filter.matches(r)][:limit]


class FakeBackend:
    def __init__(self, can_write: bool = True, fail: bool = False) -> None:
        self.can_write = can_write
        self.fail = fail
        self.data: dict[str, str] = {}
        self.gets: List[str] = []
        self.sets: List[tuple] = []

    async def get(self, key: str) -> Optional[str]:
        self.gets.append(key)
        if self.fail:
            raise TimeoutError("cache timed out")
        return self.data.get(key)

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self.sets.append((key, value, ttl_seconds))
        if self.fail:
            raise TimeoutError("cache timed out")
        self.data[key] = value


@pytest.fixture
def make_airport() -> Callable[..., AirportRecord]:
    return _make_airport


@pytest.fixture
def airports() -> List[AirportRecord]:
    return [
        _make_airport(
            "teb", "Teterboro Airport", "US",
            iata_code="TEB", gps_code="KTEB", local_code="TEB",
            airport_code="KTEB", airport_code_adjusted="KTEB",
            municipality="Teterboro", country_name="United States",
            airport_type="medium_airport", latitude=40.85, longitude=-74.06,
            search_terms=("TEB", "KTEB", "NEW YORK"),
        ),
        _make_airport(
            "tebessa", "Cheikh Larbi Tebessi Airport", "DZ",
            iata_code="TEE", gps_code="DABS", airport_code="DABS",
            municipality="Tebessa", country_name="Algeria",
            airport_type="medium_airport",
        ),
        _make_airport(
            "jfk", "John F Kennedy International Airport", "US",
            iata_code="JFK", gps_code="KJFK", local_code="JFK",
            airport_code="KJFK", airport_code_adjusted="KJFK",
            municipality="New York", country_name="United States",
            airport_type="large_airport", latitude=40.64, longitude=-73.78,
            dropdown="John F Kennedy International Airport (JFK), New York, US",
            search_terms=("JFK", "KJFK", "NYC"),
        ),
        _make_airport(
            "lga", "LaGuardia Airport", "US",
            iata_code="LGA", gps_code="KLGA", airport_code="KLGA",
            municipality="New York", country_name="United States",
            airport_type="large_airport",
        ),
    ]


@pytest.fixture
def fake_store(airports) -> FakeStore:
    return FakeStore(airports)


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def make_store() -> Callable[..., FakeStore]:
    return FakeStore


@pytest.fixture
def make_backend() -> Callable[..., FakeBackend]:
    return FakeBackend
