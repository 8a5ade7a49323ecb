from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

DEFAULT_LIMIT = 15
MIN_LIMIT = 1
MAX_LIMIT = 30
MIN_QUERY_CHARS = 2

_NON_ALNUM = re.compile(r"[^a-z0-9 ]+")
_WS = re.compile(r"\s+")
_CODE_LIKE = re.compile(r"^[A-Za-z0-9]{2,5}$")


def normalize_display(raw: str | None) -> str:
    """Lowercase, punctuation to spaces, whitespace collapsed: 'St.Louis  ' -> 'st louis'."""
    s = _NON_ALNUM.sub(" ", (raw or "").lower())
    return _WS.sub(" ", s).strip()


def code_token(raw: str | None) -> str:
    return (raw or "").strip().upper()


def looks_like_code(raw: str | None) -> bool:
    return bool(_CODE_LIKE.match((raw or "").strip()))


def clamp_limit(
    raw_limit: Any,
    default: int = DEFAULT_LIMIT,
    minimum: int = MIN_LIMIT,
    maximum: int = MAX_LIMIT,
) -> int:
    """
    Absent, non-numeric, zero or negative limits fall back to the default;
    anything above the maximum is capped.
    """
    if raw_limit is None:
        return default
    try:
        n = int(str(raw_limit).strip())
    except (TypeError, ValueError):
        return default
    if n < minimum:
        return default
    return min(n, maximum)


def cache_key(display: str, limit: int) -> str:
    return f"airports:q:{display}:l:{limit}"


@dataclass(frozen=True)
class NormalizedQuery:
    raw: str
    display: str
    code: str
    limit: int

    @property
    def is_code_like(self) -> bool:
        return looks_like_code(self.raw)

    @property
    def too_short(self) -> bool:
        return len(self.display) < MIN_QUERY_CHARS

    @property
    def cache_key(self) -> str:
        return cache_key(self.display, self.limit)


def normalize_query(
    raw_q: str | None,
    raw_limit: Any = None,
    default_limit: int = DEFAULT_LIMIT,
    max_limit: int = MAX_LIMIT,
) -> NormalizedQuery:
    raw = raw_q or ""
    return NormalizedQuery(
        raw=raw,
        display=normalize_display(raw),
        code=code_token(raw),
        limit=clamp_limit(raw_limit, default=default_limit, maximum=max_limit),
    )
