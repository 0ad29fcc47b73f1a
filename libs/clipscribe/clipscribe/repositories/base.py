from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import psycopg
from psycopg_pool import AsyncConnectionPool

from clipscribe.config import Settings

logger = logging.getLogger(__name__)


class DatabasePool:
    """Process-wide connection pool shared by the API's repositories.

    Opened once in the API lifespan; `open(wait=True)` makes startup fail fast
    when PostgreSQL is unreachable instead of failing the first upload.
    """

    _pool: AsyncConnectionPool | None = None
    _lock: asyncio.Lock | None = None

    @classmethod
    async def get_pool(cls, settings: Settings) -> AsyncConnectionPool:
        if cls._pool is not None:
            return cls._pool
        if cls._lock is None:
            cls._lock = asyncio.Lock()
        async with cls._lock:
            if cls._pool is None:
                pool = AsyncConnectionPool(
                    conninfo=settings.database_url,
                    min_size=int(settings.postgres_pool_min_size),
                    max_size=int(settings.postgres_pool_max_size),
                    name="clipscribe",
                    open=False,
                )
                await pool.open(wait=True, timeout=float(settings.postgres_connect_timeout_s))
                logger.info(
                    "database pool opened (host=%s, db=%s, max_size=%d)",
                    settings.postgres_host,
                    settings.postgres_db,
                    int(settings.postgres_pool_max_size),
                )
                cls._pool = pool
        return cls._pool

    @classmethod
    async def close(cls) -> None:
        if cls._pool is not None:
            await cls._pool.close()
            cls._pool = None
        cls._lock = None


class BaseRepository:
    def __init__(self, pool: AsyncConnectionPool) -> None:
        self.pool = pool

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[psycopg.AsyncConnection]:
        async with self.pool.connection() as conn:
            yield conn
