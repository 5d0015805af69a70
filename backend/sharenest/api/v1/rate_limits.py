"""Rate limit dependencies backed by fastapi-limiter when Redis is available."""

from __future__ import annotations

from fastapi import Depends, Request, Response
from fastapi_limiter import FastAPILimiter
from fastapi_limiter.depends import RateLimiter

from sharenest.core.config import get_settings

_settings = get_settings()

_SECONDS = {
    "second": 1,
    "seconds": 1,
    "minute": 60,
    "minutes": 60,
    "hour": 3600,
    "hours": 3600,
    "day": 86400,
    "days": 86400,
}


def parse_rate(value: str, *, fallback: tuple[int, int]) -> tuple[int, int]:
    """Parse ``"10/minute"`` into ``(10, 60)``; malformed values use ``fallback``."""
    try:
        count_str, window_str = value.split("/", 1)
        count = int(count_str.strip())
    except ValueError:
        return fallback
    seconds = _SECONDS.get(window_str.strip().lower(), fallback[1])
    return count, seconds


def rate_dependency(limit: tuple[int, int]):
    async def _dependency(request: Request, response: Response) -> None:
        if FastAPILimiter.redis is None:
            return None
        limiter = RateLimiter(times=limit[0], seconds=limit[1])
        await limiter(request, response)

    return Depends(_dependency)


LOGIN_RATE_DEP = rate_dependency(parse_rate(_settings.rate_limit_login, fallback=(10, 60)))
DEFAULT_RATE_DEP = rate_dependency(
    parse_rate(_settings.rate_limit_default, fallback=(100, 60))
)
