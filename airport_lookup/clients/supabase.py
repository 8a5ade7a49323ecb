from __future__ import annotations

from typing import Dict, List, Optional
import httpx

from airport_lookup.core.config import settings
from airport_lookup.core.errors import SearchStoreError
from airport_lookup.data.airports_repo import FIELDS, AirportRecord
from airport_lookup.services.candidates import CandidateFilter

SELECT = ",".join(FIELDS)


def _error_message(r: httpx.Response) -> str:
    """PostgREST errors carry {"message": ...}; fall back to the status line."""
    try:
        data = r.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return f"HTTP {r.status_code} from search store"


class SupabaseAirportStore:
    def __init__(
        self,
        url: Optional[str],
        api_key: Optional[str],
        table: str = "airports_search",
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.endpoint = f"{url.rstrip('/')}/rest/v1/{table}" if url else None
        self.api_key = api_key or ""
        self.timeout = timeout_seconds or settings.http_timeout_seconds
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }

    async def fetch(self, candidate_filter: CandidateFilter, limit: int) -> List[AirportRecord]:
        if not self.endpoint or not self.api_key:
            raise SearchStoreError("Search store is not configured (SUPABASE_URL / SUPABASE_ANON_KEY)")

        params = {
            "select": SELECT,
            "or": candidate_filter.to_postgrest(),
            "limit": str(limit),
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                r = await client.get(self.endpoint, params=params, headers=self._headers())
        except httpx.HTTPError as e:
            raise SearchStoreError(f"Search store unreachable: {e}") from e

        if r.status_code >= 400:
            raise SearchStoreError(_error_message(r))

        try:
            data = r.json()
        except ValueError as e:
            raise SearchStoreError("Search store returned invalid JSON") from e

        rows: Optional[list] = data if isinstance(data, list) else None
        if rows is None:
            raise SearchStoreError("Search store returned an unexpected payload")

        return [AirportRecord.from_row(row) for row in rows if isinstance(row, dict)]
