import asyncio
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from src.adapter.services.rate_limit_store import InMemoryRateLimitStore
from src.app.services.rate_limiter import FixedWindowRateLimiter
from src.domain.rate_limit import RateLimitRule, parse_window


class Clock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


@pytest.mark.parametrize(
    "window, seconds", [("60s", 60), ("15m", 900), ("1h", 3600), ("1d", 86400)]
)
def test_parse_window(window, seconds):
    assert parse_window(window) == seconds


@pytest.mark.parametrize("window", ["", "5", "m5", "1w", "0s", "1.5h", "-1m"])
def test_invalid_window_rejected_at_declaration(window):
    with pytest.raises(ValueError):
        RateLimitRule(requests=10, window=window)


def test_non_positive_budget_rejected():
    with pytest.raises(ValueError):
        RateLimitRule(requests=0, window="1m")


@pytest.mark.asyncio
async def test_window_is_wall_clock_aligned():
    clock = Clock(1_000_130)
    limiter = FixedWindowRateLimiter(InMemoryRateLimitStore(clock), clock)

    decision = await limiter.hit(uuid4(), RateLimitRule(requests=5, window="1m"))

    # 1_000_130 is 50s into the window starting at 1_000_080
    assert decision.reset_at == 1_000_140
    assert decision.allowed
    assert decision.remaining == 4
    assert decision.headers() == {
        "X-RateLimit-Limit": "5",
        "X-RateLimit-Remaining": "4",
        "X-RateLimit-Reset": "1000140",
    }


@pytest.mark.asyncio
async def test_limit_exceeded_then_next_window():
    clock = Clock(1_000_080)
    limiter = FixedWindowRateLimiter(InMemoryRateLimitStore(clock), clock)
    rule = RateLimitRule(requests=3, window="1m")
    key_id = uuid4()

    decisions = [await limiter.hit(key_id, rule) for _ in range(6)]

    assert [d.allowed for d in decisions] == [True, True, True, False, False, False]
    assert decisions[-1].remaining == 0

    clock.now += 60
    assert (await limiter.hit(key_id, rule)).allowed


@pytest.mark.asyncio
async def test_keys_are_counted_separately():
    clock = Clock(1_000_080)
    limiter = FixedWindowRateLimiter(InMemoryRateLimitStore(clock), clock)
    rule = RateLimitRule(requests=1, window="1m")

    assert (await limiter.hit(uuid4(), rule)).allowed
    assert (await limiter.hit(uuid4(), rule)).allowed


@pytest.mark.asyncio
async def test_same_key_different_windows_do_not_share_budget():
    clock = Clock(1_000_080)
    limiter = FixedWindowRateLimiter(InMemoryRateLimitStore(clock), clock)
    key_id = uuid4()

    assert (await limiter.hit(key_id, RateLimitRule(requests=1, window="1m"))).allowed
    assert (await limiter.hit(key_id, RateLimitRule(requests=1, window="5m"))).allowed


def test_describe():
    assert RateLimitRule(requests=10, window="5m").describe() == "Maximum 10 requests per 5m."


@pytest.mark.asyncio
async def test_concurrent_increments_never_share_a_count():
    store = InMemoryRateLimitStore(Clock(1_000_000))

    counts = await asyncio.gather(*(store.increment("k", 60) for _ in range(50)))

    assert sorted(counts) == list(range(1, 51))


@pytest.mark.asyncio
async def test_shutdown_closes_created_redis_store(monkeypatch):
    from config import ApplicationConfig
    from src import depends
    from src.adapter.services.rate_limit_store import RedisRateLimitStore

    monkeypatch.setattr(ApplicationConfig, "CACHE_BACKEND", "redis")
    monkeypatch.setattr(depends, "engine", MagicMock(dispose=AsyncMock()))
    depends.get_rate_limit_store.cache_clear()

    store = depends.get_rate_limit_store()
    assert isinstance(store, RedisRateLimitStore)
    store.client = AsyncMock()

    await depends.close_resources()

    store.client.aclose.assert_awaited_once()
    assert depends.get_rate_limit_store.cache_info().currsize == 0


@pytest.mark.asyncio
async def test_shutdown_without_store_creates_none(monkeypatch):
    from src import depends

    monkeypatch.setattr(depends, "engine", MagicMock(dispose=AsyncMock()))
    depends.get_rate_limit_store.cache_clear()

    await depends.close_resources()

    assert depends.get_rate_limit_store.cache_info().currsize == 0
