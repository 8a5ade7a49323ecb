import logging
from pathlib import Path
from typing import Optional

from fastapi import Depends

from airport_lookup.core.config import settings
from airport_lookup.clients.kv import KvRestClient
from airport_lookup.clients.supabase import SupabaseAirportStore
from airport_lookup.data.airports_repo import DATA_PATH, CsvAirportStore
from airport_lookup.services.airport_search import AirportSearchService
from airport_lookup.services.candidates import AirportStore, CandidateFetcher
from airport_lookup.services.ranking import RankingPolicy
from airport_lookup.utils.cache import KeyValueBackend, MemoryCache, ResponseCache

logger = logging.getLogger(__name__)

# process-wide; the CSV store loads its file once
_memory_cache = MemoryCache(maxsize=settings.memory_cache_maxsize)
_csv_store: Optional[CsvAirportStore] = None


def get_airport_store() -> AirportStore:
    global _csv_store
    if settings.airport_store == "csv":
        if _csv_store is None:
            path = Path(settings.airports_csv_path) if settings.airports_csv_path else DATA_PATH
            logger.info("Serving airport lookups from %s", path)
            _csv_store = CsvAirportStore(csv_path=path)
        return _csv_store
    return SupabaseAirportStore(
        url=settings.supabase_url,
        api_key=settings.supabase_anon_key,
        table=settings.airports_table,
        timeout_seconds=settings.http_timeout_seconds,
    )


def get_cache_backend() -> KeyValueBackend:
    if settings.kv_rest_api_url:
        return KvRestClient(
            url=settings.kv_rest_api_url,
            token=settings.kv_rest_api_token,
            read_only_token=settings.kv_rest_api_read_only_token,
            timeout_seconds=settings.http_timeout_seconds,
        )
    return _memory_cache


def get_ranking_policy() -> RankingPolicy:
    return RankingPolicy(
        facility_weights=dict(settings.facility_weights),
        home_country=settings.home_country_code,
    )


def get_airport_search_service(
    store: AirportStore = Depends(get_airport_store),
    backend: KeyValueBackend = Depends(get_cache_backend),
    policy: RankingPolicy = Depends(get_ranking_policy),
) -> AirportSearchService:
    return AirportSearchService(
        fetcher=CandidateFetcher(store, overfetch=settings.search_overfetch),
        cache=ResponseCache(backend),
        policy=policy,
        cache_ttl_seconds=settings.airport_cache_ttl_seconds,
        default_limit=settings.search_default_limit,
        max_limit=settings.search_max_limit,
    )
