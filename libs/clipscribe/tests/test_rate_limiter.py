from __future__ import annotations

import pytest

from clipscribe.services.rate_limit import RateLimiter


class FakeRedis:
    def __init__(self) -> None:
        self.counters: dict[str, int] = {}
        self.ttls: dict[str, int] = {}

    async def incr(self, key: str) -> int:
        self.counters[key] = self.counters.get(key, 0) + 1
        return self.counters[key]

    async def expire(self, key: str, seconds: int) -> bool:
        self.ttls[key] = int(seconds)
        return True


@pytest.mark.asyncio
async def test_in_process_limit_blocks_after_max_requests() -> None:
    limiter = RateLimiter(redis=None, max_requests=3, window_s=900)

    decisions = [await limiter.hit("10.0.0.1", at_ts=1000.0) for _ in range(4)]

    assert [d.allowed for d in decisions] == [True, True, True, False]
    assert decisions[-1].count == 4
    assert decisions[-1].limit == 3


@pytest.mark.asyncio
async def test_window_rollover_resets_counter() -> None:
    limiter = RateLimiter(redis=None, max_requests=1, window_s=60)

    assert (await limiter.hit("c", at_ts=0.0)).allowed
    assert not (await limiter.hit("c", at_ts=59.0)).allowed
    assert (await limiter.hit("c", at_ts=60.0)).allowed


@pytest.mark.asyncio
async def test_clients_are_counted_separately() -> None:
    limiter = RateLimiter(redis=None, max_requests=1, window_s=60)

    assert (await limiter.hit("a", at_ts=5.0)).allowed
    assert (await limiter.hit("b", at_ts=5.0)).allowed
    assert not (await limiter.hit("a", at_ts=6.0)).allowed


@pytest.mark.asyncio
async def test_retry_after_counts_down_to_window_end() -> None:
    limiter = RateLimiter(redis=None, max_requests=1, window_s=900)
    decision = await limiter.hit("c", at_ts=900.0 + 100.0)
    assert decision.retry_after_s == 800


@pytest.mark.asyncio
async def test_redis_counters_set_expiry_once_per_window() -> None:
    redis = FakeRedis()
    limiter = RateLimiter(redis=redis, max_requests=2, window_s=900)  # type: ignore[arg-type]

    results = [await limiter.hit("10.0.0.1", at_ts=1800.0 + i) for i in range(3)]

    assert [r.allowed for r in results] == [True, True, False]
    assert list(redis.counters) == ["clipscribe:ratelimit:10.0.0.1:2"]
    assert redis.ttls == {"clipscribe:ratelimit:10.0.0.1:2": 900}


@pytest.mark.asyncio
async def test_in_process_counters_from_past_windows_are_evicted() -> None:
    limiter = RateLimiter(redis=None, max_requests=5, window_s=60)

    for i in range(50):
        await limiter.hit(f"10.0.0.{i}", at_ts=10.0)
    assert len(limiter._local) == 50

    decision = await limiter.hit("10.0.1.1", at_ts=70.0)

    assert decision.count == 1
    assert limiter._local == {"10.0.1.1": 1}
