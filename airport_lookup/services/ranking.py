from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Tuple

from airport_lookup.data.airports_repo import AirportRecord
from airport_lookup.services.query import NormalizedQuery

DEFAULT_FACILITY_WEIGHTS: Mapping[str, int] = {
    "large_airport": 3,
    "medium_airport": 2,
    "small_airport": 1,
}


@dataclass(frozen=True)
class RankingPolicy:
    facility_weights: Mapping[str, int] = field(default_factory=lambda: dict(DEFAULT_FACILITY_WEIGHTS))
    home_country: str = "US"
    exact_code_weight: int = 100
    prefix_code_weight: int = 50
    text_weight: int = 10
    facility_multiplier: int = 2

    def facility_weight(self, airport_type: str | None) -> int:
        if not airport_type:
            return 0
        return self.facility_weights.get(airport_type, 0)

    def is_home(self, rec: AirportRecord) -> bool:
        return rec.country_code.upper() == self.home_country.upper()


@dataclass(frozen=True)
class ScoredCandidate:
    record: AirportRecord
    score: int


def primary_code(rec: AirportRecord) -> str:
    return rec.iata_code or rec.airport_code_adjusted or rec.airport_code or "-"


def display_label(rec: AirportRecord) -> str:
    if rec.dropdown:
        return rec.dropdown
    muni = f", {rec.municipality}" if rec.municipality else ""
    return f"{rec.name} ({primary_code(rec)}){muni}, {rec.country_code}"


def is_exact_code(rec: AirportRecord, code: str) -> bool:
    return bool(code) and code in rec.codes()


def is_prefix_code(rec: AirportRecord, code: str) -> bool:
    return bool(code) and any(c.startswith(code) for c in rec.codes())


def text_match(rec: AirportRecord, display: str) -> bool:
    if not display:
        return False
    for v in (rec.name, rec.municipality, rec.country_name):
        if v and display in v.lower():
            return True
    return False


def score(rec: AirportRecord, query: NormalizedQuery, policy: RankingPolicy) -> int:
    """Sum of independent signals; none suppresses another."""
    s = 0
    if is_exact_code(rec, query.code):
        s += policy.exact_code_weight
    if is_prefix_code(rec, query.code):
        s += policy.prefix_code_weight
    if text_match(rec, query.display):
        s += policy.text_weight
    s += policy.facility_weight(rec.airport_type) * policy.facility_multiplier
    return s


def score_all(
    records: Iterable[AirportRecord], query: NormalizedQuery, policy: RankingPolicy
) -> List[ScoredCandidate]:
    return [ScoredCandidate(record=r, score=score(r, query, policy)) for r in records]


def _sort_key(c: ScoredCandidate, query: NormalizedQuery, policy: RankingPolicy) -> Tuple:
    rec = c.record
    label = display_label(rec)
    return (
        0 if is_exact_code(rec, query.code) else 1,
        0 if policy.is_home(rec) else 1,
        -policy.facility_weight(rec.airport_type),
        -c.score,
        label.casefold(),
        label,
        rec.airport_id,
    )


def rank(
    candidates: Iterable[ScoredCandidate], query: NormalizedQuery, policy: RankingPolicy
) -> List[ScoredCandidate]:
    """
    Most significant first: exact code match, home market, facility size,
    score, then label. The trailing label/id keys make the order total.
    """
    return sorted(candidates, key=lambda c: _sort_key(c, query, policy))
