"""
Candidate retrieval for airport search.

The fetcher asks the reference store for an unranked, overfetched candidate set.
Ordering is left to services.ranking: the relevance policy (exact code first,
home market, facility size, text score) is not expressible as a single store
ORDER BY, so ranking runs after retrieval and truncation happens last.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Tuple

from airport_lookup.data.airports_repo import CODE_FIELDS, AirportRecord
from airport_lookup.services.query import NormalizedQuery

logger = logging.getLogger(__name__)

DEFAULT_OVERFETCH = 100

TEXT_FIELDS = ("airport", "municipality", "country_name")
TAG_FIELD = "search_terms"

# Store column -> AirportRecord attribute, where they differ
_ATTRS = {"airport": "name"}

# Characters PostgREST treats as syntax inside an or=(...) expression
_RESERVED = re.compile(r'[,.:()"\\{}\s]')


def _quote(value: str) -> str:
    if not _RESERVED.search(value):
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


@dataclass(frozen=True)
class Clause:
    column: str
    op: str  # eq | prefix | contains | tag
    value: str

    def to_postgrest(self) -> str:
        if self.op == "eq":
            return f"{self.column}.eq.{_quote(self.value)}"
        if self.op == "prefix":
            return f"{self.column}.ilike.{_quote(self.value + '*')}"
        if self.op == "contains":
            return f"{self.column}.ilike.{_quote('*' + self.value + '*')}"
        if self.op == "tag":
            return f"{self.column}.cs.{{{_quote(self.value)}}}"
        raise ValueError(f"Unknown clause op '{self.op}'")

    def matches(self, rec: AirportRecord) -> bool:
        actual = getattr(rec, _ATTRS.get(self.column, self.column))
        if not actual:
            return False
        if self.op == "eq":
            return actual == self.value
        if self.op == "prefix":
            return actual.lower().startswith(self.value.lower())
        if self.op == "contains":
            return self.value.lower() in actual.lower()
        if self.op == "tag":
            return self.value in actual
        raise ValueError(f"Unknown clause op '{self.op}'")


@dataclass(frozen=True)
class CandidateFilter:
    """A disjunction: a record matches when any clause does."""

    clauses: Tuple[Clause, ...]

    def to_postgrest(self) -> str:
        return "(" + ",".join(c.to_postgrest() for c in self.clauses) + ")"

    def matches(self, rec: AirportRecord) -> bool:
        return any(c.matches(rec) for c in self.clauses)


def build_candidate_filter(query: NormalizedQuery) -> CandidateFilter:
    clauses: List[Clause] = []

    if query.is_code_like:
        clauses.extend(Clause(f, "eq", query.code) for f in CODE_FIELDS)
        clauses.extend(Clause(f, "prefix", query.code) for f in CODE_FIELDS)

    clauses.extend(Clause(f, "contains", query.display) for f in TEXT_FIELDS)
    clauses.append(Clause(TAG_FIELD, "tag", query.code))

    return CandidateFilter(clauses=tuple(clauses))


class AirportStore(Protocol):
    async def fetch(self, candidate_filter: CandidateFilter, limit: int) -> List[AirportRecord]:
        ...


@dataclass
class FetchResult:
    records: List[AirportRecord] = field(default_factory=list)
    error: Optional[str] = None


def dedupe(records: List[AirportRecord]) -> List[AirportRecord]:
    """Keep the first row per airport_id."""
    seen = set()
    out: List[AirportRecord] = []
    for rec in records:
        if rec.airport_id in seen:
            continue
        seen.add(rec.airport_id)
        out.append(rec)
    return out


class CandidateFetcher:
    def __init__(self, store: AirportStore, overfetch: int = DEFAULT_OVERFETCH):
        self.store = store
        self.overfetch = max(1, min(overfetch, DEFAULT_OVERFETCH))

    async def fetch(self, query: NormalizedQuery) -> FetchResult:
        candidate_filter = build_candidate_filter(query)
        try:
            rows = await self.store.fetch(candidate_filter, self.overfetch)
        except Exception as e:
            # Soft failure: the caller turns this into {items: [], error}
            msg = str(e) or e.__class__.__name__
            logger.error("Airport search error for %r: %s", query.raw, msg)
            return FetchResult(records=[], error=msg)

        return FetchResult(records=dedupe(rows))
