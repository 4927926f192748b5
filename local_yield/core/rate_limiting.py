"""
Rate limiting

Fixed-window request budgets keyed by client IP, with an in-process
backend for single-worker deployments and tests and a Redis backend for
shared limits across workers.
"""

import asyncio
import time
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Protocol, Tuple

import redis.asyncio as redis
from fastapi import Request

from local_yield.config.settings import Settings, settings
from local_yield.core.exceptions import RateLimitExceededError
from local_yield.core.logging import get_logger

logger = get_logger(__name__)


class RateLimitPreset(str, Enum):
    """Named request budgets"""
    AUTH = "auth"
    DEFAULT = "default"
    MESSAGES = "messages"


def preset_limit(preset: RateLimitPreset, config: Settings = settings) -> int:
    return {
        RateLimitPreset.AUTH: config.RATE_LIMIT_AUTH,
        RateLimitPreset.DEFAULT: config.RATE_LIMIT_DEFAULT,
        RateLimitPreset.MESSAGES: config.RATE_LIMIT_MESSAGES,
    }[preset]


@dataclass
class RateLimitResult:
    """Rate limit check result"""
    allowed: bool
    limit: int
    remaining: int
    reset_time: datetime
    retry_after: int
    total_hits: int
    key: str


def _window(now: float, period: int) -> Tuple[int, float]:
    window = int(now // period)
    return window, (window + 1) * period


def _result(key: str, hits: int, limit: int, now: float, next_window_start: float) -> RateLimitResult:
    allowed = hits <= limit
    return RateLimitResult(
        allowed=allowed,
        limit=limit,
        remaining=max(0, limit - hits),
        reset_time=datetime.fromtimestamp(next_window_start),
        retry_after=0 if allowed else max(1, int(next_window_start - now)),
        total_hits=hits,
        key=key,
    )


class RateLimitBackend(Protocol):
    async def check_limit(self, key: str, limit: int, period: int) -> RateLimitResult:
        ...


class MemoryRateLimitBackend:
    """Fixed window counters held in process memory"""

    def __init__(self, clock=time.time):
        self._clock = clock
        self._counters: Dict[str, Tuple[int, int]] = {}
        self._lock = asyncio.Lock()

    async def check_limit(self, key: str, limit: int, period: int) -> RateLimitResult:
        now = self._clock()
        window, next_window_start = _window(now, period)
        async with self._lock:
            current_window, hits = self._counters.get(key, (window, 0))
            if current_window != window:
                hits = 0
            hits += 1
            self._counters[key] = (window, hits)
        return _result(key, hits, limit, now, next_window_start)

    def reset(self) -> None:
        self._counters.clear()


class RedisRateLimitBackend:
    """Fixed window counters in Redis (INCR + EXPIRE)"""

    def __init__(self, redis_client: redis.Redis, clock=time.time):
        self.redis = redis_client
        self._clock = clock

    @classmethod
    def from_url(cls, url: str) -> "RedisRateLimitBackend":
        return cls(redis.Redis.from_url(url, decode_responses=True))

    async def check_limit(self, key: str, limit: int, period: int) -> RateLimitResult:
        now = self._clock()
        window, next_window_start = _window(now, period)
        window_key = f"rate_limit:fixed:{key}:{window}"

        try:
            hits = await self.redis.incr(window_key)
            if hits == 1:
                # First request in window, set expiration
                await self.redis.expire(window_key, period)
        except redis.RedisError as e:
            logger.error(f"Fixed window rate limit check failed: {str(e)}")
            # Fail open on errors
            return _result(key, 0, limit, now, next_window_start)

        return _result(key, int(hits), limit, now, next_window_start)

    async def close(self):
        """Close Redis connection"""
        await self.redis.close()


class RateLimiter:
    """Applies preset budgets to client identifiers"""

    def __init__(self, backend: RateLimitBackend, config: Settings = settings):
        self.backend = backend
        self.config = config

    @classmethod
    def from_settings(cls, config: Settings = settings) -> "RateLimiter":
        if config.RATE_LIMIT_BACKEND == "redis":
            backend = RedisRateLimitBackend.from_url(config.REDIS_URL)
        else:
            backend = MemoryRateLimitBackend()
        return cls(backend, config)

    async def check(self, preset: RateLimitPreset, identifier: str) -> RateLimitResult:
        limit = preset_limit(preset, self.config)
        key = f"{preset.value}:{identifier}"
        result = await self.backend.check_limit(key, limit, self.config.RATE_LIMIT_WINDOW_SECONDS)
        if not result.allowed:
            logger.warning(f"Rate limit exceeded for {preset.value}: {identifier}")
        return result

    async def enforce(self, preset: RateLimitPreset, identifier: str) -> RateLimitResult:
        result = await self.check(preset, identifier)
        if not result.allowed:
            raise RateLimitExceededError(retry_after=result.retry_after)
        return result


def client_identifier(request: Request) -> str:
    """Client IP, preferring the first X-Forwarded-For hop"""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


__all__ = [
    "RateLimitPreset",
    "RateLimitResult",
    "MemoryRateLimitBackend",
    "RedisRateLimitBackend",
    "RateLimiter",
    "client_identifier",
    "preset_limit",
]
