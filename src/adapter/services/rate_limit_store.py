"""
Rate limit counter stores.

RedisRateLimitStore is used in production so counters are shared by all
workers; InMemoryRateLimitStore serves tests and single-process development.
"""

import asyncio
import time
from typing import Callable, Dict, Tuple

import redis.asyncio as redis

from src.app.services.rate_limit_store import IRateLimitStore


class RedisRateLimitStore(IRateLimitStore):
    def __init__(self, client: "redis.Redis"):
        self.client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisRateLimitStore":
        return cls(redis.Redis.from_url(url, decode_responses=True))

    async def increment(self, key: str, ttl_seconds: int) -> int:
        # MULTI/EXEC: INCR and EXPIRE apply together
        async with self.client.pipeline(transaction=True) as pipe:
            pipe.incr(key)
            pipe.expire(key, ttl_seconds)
            count, _ = await pipe.execute()
        return int(count)

    async def close(self) -> None:
        await self.client.aclose()


class InMemoryRateLimitStore(IRateLimitStore):
    def __init__(self, clock: Callable[[], float] = time.time):
        self.clock = clock
        self._counters: Dict[str, Tuple[int, float]] = {}
        self._lock = asyncio.Lock()

    async def increment(self, key: str, ttl_seconds: int) -> int:
        async with self._lock:
            now = self.clock()
            count, expires_at = self._counters.get(key, (0, 0.0))
            if expires_at <= now:
                count, expires_at = 0, now + ttl_seconds
            count += 1
            self._counters[key] = (count, expires_at)
            self._evict(now)
            return count

    def _evict(self, now: float) -> None:
        expired = [k for k, (_, expires_at) in self._counters.items() if expires_at <= now]
        for k in expired:
            del self._counters[k]
