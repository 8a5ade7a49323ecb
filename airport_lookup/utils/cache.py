from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Protocol, Tuple

from cachetools import TLRUCache

logger = logging.getLogger(__name__)


class KeyValueBackend(Protocol):
    @property
    def can_write(self) -> bool:
        ...

    async def get(self, key: str) -> Optional[str]:
        ...

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        ...


def _expires_at(key: str, item: Tuple[int, str], now: float) -> float:
    return now + item[0]


class MemoryCache:
    """
    In-process key-value backend. Bounded LRU; each entry keeps the TTL it was
    set with, and expired entries are purged on every write.
    """

    can_write = True

    def __init__(self, maxsize: int = 10_000, timer: Callable[[], float] = time.monotonic):
        self._store: TLRUCache = TLRUCache(maxsize=maxsize, ttu=_expires_at, timer=timer)

    def __len__(self) -> int:
        return len(self._store)

    async def get(self, key: str) -> Optional[str]:
        item = self._store.get(key)
        if item is None:
            return None
        return item[1]

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._store[key] = (ttl_seconds, value)


class ResponseCache:
    """
    Best-effort wrapper around a key-value backend. Neither method raises:
    a failing or missing backend only costs latency, never correctness.
    """

    def __init__(self, backend: Optional[KeyValueBackend]):
        self.backend = backend

    async def try_get(self, key: str) -> Optional[str]:
        if self.backend is None:
            return None
        try:
            return await self.backend.get(key)
        except Exception as e:
            logger.warning("Cache read failed for %s: %s", key, e)
            return None

    async def try_set(self, key: str, payload: str, ttl_seconds: int) -> None:
        if self.backend is None:
            return
        if not self.backend.can_write:
            logger.debug("Cache write skipped for %s: no write credential", key)
            return
        try:
            await self.backend.set(key, payload, ttl_seconds)
        except Exception as e:
            logger.warning("Cache write failed for %s: %s", key, e)
