"""Fixed-window request limiting per client key.

Counters live in Redis when a client is given (shared across API workers);
otherwise they are kept in-process.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass

from redis.asyncio import Redis


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    count: int
    limit: int
    retry_after_s: int


class RateLimiter:
    def __init__(
        self,
        *,
        redis: Redis | None,
        max_requests: int,
        window_s: int,
        prefix: str = "clipscribe:ratelimit",
    ) -> None:
        self._redis = redis
        self.max_requests = max(1, int(max_requests))
        self.window_s = max(1, int(window_s))
        self._prefix = prefix
        self._lock = asyncio.Lock()
        # In-process counters for the current window only.
        self._local_window: int | None = None
        self._local: dict[str, int] = {}

    def _window(self, now_ts: float) -> int:
        return int(now_ts // self.window_s)

    def _key(self, client_key: str, window: int) -> str:
        return f"{self._prefix}:{client_key}:{window}"

    async def hit(self, client_key: str, *, at_ts: float | None = None) -> RateLimitDecision:
        now_ts = time.time() if at_ts is None else float(at_ts)
        window = self._window(now_ts)
        retry_after = max(1, int((window + 1) * self.window_s - now_ts))

        if self._redis is not None:
            key = self._key(client_key, window)
            count = int(await self._redis.incr(key))
            if count == 1:
                await self._redis.expire(key, self.window_s)
        else:
            async with self._lock:
                if window != self._local_window:
                    self._local.clear()
                    self._local_window = window
                count = self._local.get(client_key, 0) + 1
                self._local[client_key] = count

        return RateLimitDecision(
            allowed=count <= self.max_requests,
            count=count,
            limit=self.max_requests,
            retry_after_s=retry_after,
        )
