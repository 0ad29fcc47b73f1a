"""ClipScribe API"""

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from redis.asyncio import Redis

from clipscribe.config import Settings
from clipscribe.providers import get_media_provider, get_transcription_provider
from clipscribe.repositories import DatabasePool
from clipscribe.services.rate_limit import RateLimiter
from clipscribe.services.upload_sweeper import run_upload_sweeper
from clipscribe.utils.logging_setup import setup_logging
from errors import register_error_handlers
from middleware import install_http_policies
from routes.recordings import router as recordings_router
from routes.uploads import router as uploads_router

settings = Settings()
setup_logging(settings)
logger = logging.getLogger("clipscribe.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.settings = settings
    app.state.redis = (
        Redis.from_url(settings.redis_url, decode_responses=True) if settings.redis_url else None
    )
    app.state.db_pool = await DatabasePool.get_pool(settings)
    app.state.media_provider = get_media_provider(settings.media.model_dump())
    app.state.transcription_provider = get_transcription_provider(
        settings.transcription.model_dump()
    )
    app.state.rate_limiter = (
        RateLimiter(
            redis=app.state.redis,
            max_requests=settings.rate_limit.max_requests,
            window_s=settings.rate_limit.window_s,
        )
        if settings.rate_limit.enabled
        else None
    )

    sweeper_stop = asyncio.Event()
    sweeper_task: asyncio.Task | None = None
    if settings.sweeper.enabled:
        sweeper_task = asyncio.create_task(run_upload_sweeper(settings, sweeper_stop))

    logger.info(
        "API starting (redis=%s, uploads_dir=%s)",
        settings.redis_url or "disabled",
        settings.uploads_dir,
    )
    try:
        yield
    finally:
        sweeper_stop.set()
        if sweeper_task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await sweeper_task
        await app.state.transcription_provider.close()
        await app.state.media_provider.close()
        redis: Redis | None = getattr(app.state, "redis", None)
        if redis is not None:
            await redis.aclose()
        await DatabasePool.close()


app = FastAPI(
    title="ClipScribe API",
    description="Recorded clip transcription API",
    version="0.1.0",
    lifespan=lifespan,
)

install_http_policies(app, settings)
register_error_handlers(app)

app.include_router(uploads_router)
app.include_router(recordings_router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}
