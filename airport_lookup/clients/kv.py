from __future__ import annotations

from typing import Any, List, Optional
import httpx

from airport_lookup.core.config import settings
from airport_lookup.core.errors import CacheBackendError


class KvRestClient:
    """
    Upstash-compatible Redis REST client. Commands go out as a JSON array
    POSTed to the base URL; replies look like {"result": ...} or {"error": ...}.
    Lookups may run on a read-only token, writes need the full token.
    """

    def __init__(
        self,
        url: str,
        token: Optional[str] = None,
        read_only_token: Optional[str] = None,
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url.rstrip("/")
        self.token = token
        self.read_token = read_only_token or token
        self.timeout = timeout_seconds or settings.http_timeout_seconds
        self._transport = transport

    @property
    def can_write(self) -> bool:
        return bool(self.token)

    async def _command(self, token: Optional[str], command: List[Any]) -> Any:
        if not token:
            raise CacheBackendError("KV REST token is not configured")

        headers = {"Authorization": f"Bearer {token}"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                r = await client.post(self.url, json=command, headers=headers)
        except httpx.HTTPError as e:
            raise CacheBackendError(f"KV {command[0]} failed: {e}") from e

        try:
            data = r.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if r.status_code >= 400 or data.get("error"):
            detail = data.get("error") or f"HTTP {r.status_code}"
            raise CacheBackendError(f"KV {command[0]} failed: {detail}")

        return data.get("result")

    async def get(self, key: str) -> Optional[str]:
        result = await self._command(self.read_token, ["GET", key])
        if result is None:
            return None
        return str(result)

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        await self._command(self.token, ["SET", key, value, "EX", ttl_seconds])
