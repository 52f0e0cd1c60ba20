"""Parsing of the rate-limit headers Discogs returns with every response."""

from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict

RATE_LIMIT_HEADER = "X-Discogs-Ratelimit"
RATE_LIMIT_USED_HEADER = "X-Discogs-Ratelimit-Used"
RATE_LIMIT_REMAINING_HEADER = "X-Discogs-Ratelimit-Remaining"


class RateLimit(BaseModel):
    """Rate-limit snapshot reported by the server for a single response."""

    model_config = ConfigDict(frozen=True)

    limit: int
    used: int
    remaining: int


def _header(headers: Mapping[str, str], name: str) -> Optional[str]:
    value = headers.get(name)
    if value is None:
        # Plain dicts are case sensitive, httpx.Headers is not
        lowered = name.lower()
        for key, candidate in headers.items():
            if key.lower() == lowered:
                return candidate
    return value


def parse_rate_limit(headers: Mapping[str, str]) -> Optional[RateLimit]:
    """
    Build a RateLimit from response headers.

    All three headers must be present and integral, otherwise no snapshot
    is returned (e.g. for the unauthenticated root endpoint).

    Example:
        >>> parse_rate_limit({
        ...     "X-Discogs-Ratelimit": "60",
        ...     "X-Discogs-Ratelimit-Used": "23",
        ...     "X-Discogs-Ratelimit-Remaining": "37",
        ... })
        RateLimit(limit=60, used=23, remaining=37)
    """
    raw = [
        _header(headers, RATE_LIMIT_HEADER),
        _header(headers, RATE_LIMIT_USED_HEADER),
        _header(headers, RATE_LIMIT_REMAINING_HEADER),
    ]
    if any(value is None for value in raw):
        return None

    try:
        limit, used, remaining = (int(value.strip()) for value in raw)
    except ValueError:
        return None

    return RateLimit(limit=limit, used=used, remaining=remaining)
