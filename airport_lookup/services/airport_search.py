from __future__ import annotations

import logging
from typing import Any, List, Optional

from pydantic import ValidationError

from airport_lookup.data.airports_repo import AirportRecord
from airport_lookup.models.airports import AirportItem, AirportSearchResponse
from airport_lookup.services.candidates import CandidateFetcher
from airport_lookup.services.query import DEFAULT_LIMIT, MAX_LIMIT, normalize_query
from airport_lookup.services.ranking import (
    RankingPolicy,
    ScoredCandidate,
    display_label,
    rank,
    score_all,
)
from airport_lookup.utils.cache import ResponseCache

logger = logging.getLogger(__name__)

CACHE_TTL_SECONDS = 60 * 60 * 24 * 7


def best_code(rec: AirportRecord) -> Optional[str]:
    return (
        rec.airport_code_adjusted
        or rec.airport_code
        or rec.iata_code
        or rec.gps_code
        or rec.local_code
        or None
    )


def to_item(rec: AirportRecord) -> AirportItem:
    return AirportItem(
        id=rec.airport_id,
        label=display_label(rec),
        code=best_code(rec),
        iata=rec.iata_code,
        icao=rec.gps_code,
        name=rec.name,
        municipality=rec.municipality,
        country_code=rec.country_code,
        country_name=rec.country_name,
        lat=rec.latitude,
        lon=rec.longitude,
        airport_type=rec.airport_type,
    )


def shape_items(ranked: List[ScoredCandidate], limit: int) -> List[AirportItem]:
    return [to_item(c.record) for c in ranked[:limit]]


class AirportSearchService:
    def __init__(
        self,
        fetcher: CandidateFetcher,
        cache: ResponseCache,
        policy: RankingPolicy | None = None,
        cache_ttl_seconds: int = CACHE_TTL_SECONDS,
        default_limit: int = DEFAULT_LIMIT,
        max_limit: int = MAX_LIMIT,
    ):
        self.fetcher = fetcher
        self.cache = cache
        self.policy = policy or RankingPolicy()
        self.cache_ttl_seconds = cache_ttl_seconds
        self.max_limit = max(1, min(max_limit, MAX_LIMIT))
        self.default_limit = max(1, min(default_limit, self.max_limit))

    async def _cached(self, key: str) -> Optional[AirportSearchResponse]:
        raw = await self.cache.try_get(key)
        if raw is None:
            return None
        try:
            return AirportSearchResponse.model_validate_json(raw)
        except ValidationError:
            logger.warning("Ignoring malformed cache entry %s", key)
            return None

    async def search(self, q: str | None, limit: Any = None) -> AirportSearchResponse:
        query = normalize_query(q, limit, default_limit=self.default_limit, max_limit=self.max_limit)
        if query.too_short:
            return AirportSearchResponse()

        key = query.cache_key
        cached = await self._cached(key)
        if cached is not None:
            return cached

        result = await self.fetcher.fetch(query)
        if result.error is not None:
            return AirportSearchResponse(items=[], error=result.error)

        ranked = rank(score_all(result.records, query, self.policy), query, self.policy)
        response = AirportSearchResponse(items=shape_items(ranked, query.limit))

        await self.cache.try_set(key, response.to_json(), self.cache_ttl_seconds)
        return response
