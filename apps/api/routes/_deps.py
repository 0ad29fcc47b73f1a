from __future__ import annotations

from fastapi import Request

from clipscribe.config import Settings
from clipscribe.models.recording import Recording
from clipscribe.pipeline.orchestrator import UploadPipelineOrchestrator
from clipscribe.repositories import RecordingRepository
from clipscribe.services.rate_limit import RateLimiter
from clipscribe.services.recordings import RecordingQueryService

from errors import RateLimitExceeded

from .schemas import RecordingMetadataResponse, RecordingResponse


def settings(request: Request) -> Settings:
    value: Settings | None = getattr(request.app.state, "settings", None)
    if value is None:
        raise RuntimeError("settings not initialized")
    return value


def pool(request: Request):
    pool_obj = getattr(request.app.state, "db_pool", None)
    if pool_obj is None:
        raise RuntimeError("db pool not initialized")
    return pool_obj


def orchestrator(request: Request) -> UploadPipelineOrchestrator:
    state = request.app.state
    return UploadPipelineOrchestrator(
        settings(request),
        media_provider=state.media_provider,
        transcription_provider=state.transcription_provider,
        recording_repo=RecordingRepository(pool(request)),
    )


def query_service(request: Request) -> RecordingQueryService:
    return RecordingQueryService(RecordingRepository(pool(request)))


def client_key(request: Request) -> str:
    client = request.client
    return str(client.host) if client is not None and client.host else "unknown"


async def enforce_rate_limit(request: Request) -> None:
    limiter: RateLimiter | None = getattr(request.app.state, "rate_limiter", None)
    if limiter is None:
        return None
    decision = await limiter.hit(client_key(request))
    if not decision.allowed:
        raise RateLimitExceeded(retry_after_s=decision.retry_after_s)
    return None


def to_response(recording: Recording) -> RecordingResponse:
    meta = recording.metadata
    return RecordingResponse(
        id=recording.id,
        transcript=recording.transcript,
        thumbnail=recording.thumbnail,
        timestamp=recording.created_at,
        metadata=RecordingMetadataResponse(
            original_filename=meta.original_filename,
            media_type=meta.media_type,
            size_bytes=int(meta.size_bytes),
            duration_s=meta.duration_s,
        ),
    )
