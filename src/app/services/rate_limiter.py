"""
Fixed-window rate limiter.

Windows are aligned to wall-clock multiples of the window length, so a
client can burst up to twice the limit across a boundary. Rejected requests
still consume budget.
"""

import logging
import time
from typing import Callable
from uuid import UUID

from src.app.services.rate_limit_store import IRateLimitStore
from src.domain.rate_limit import RateLimitDecision, RateLimitRule

logger = logging.getLogger(__name__)


class FixedWindowRateLimiter:
    def __init__(self, store: IRateLimitStore, clock: Callable[[], float] = time.time):
        self.store = store
        self.clock = clock

    async def hit(self, key_id: UUID, rule: RateLimitRule) -> RateLimitDecision:
        """Count one request for `key_id` against `rule`"""
        window = rule.window_seconds
        now = int(self.clock())
        window_start = now - (now % window)
        reset_at = window_start + window

        counter_key = f"ratelimit:{key_id}:{window}:{window_start}"
        count = await self.store.increment(counter_key, window)

        allowed = count <= rule.requests
        if not allowed:
            logger.info(
                f"Rate limit exceeded for api key {key_id} ({count}/{rule.requests} in {rule.window})"
            )

        return RateLimitDecision(
            allowed=allowed,
            limit=rule.requests,
            remaining=max(rule.requests - count, 0),
            reset_at=reset_at,
            window=rule.window,
        )
