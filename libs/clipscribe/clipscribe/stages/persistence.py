"""Persistence stage: store the finished recording."""

from __future__ import annotations

import logging
from typing import Protocol, cast

from clipscribe.exceptions import PersistenceError
from clipscribe.models.recording import Recording, RecordingMetadata, encode_thumbnail
from clipscribe.pipeline.context import PipelineContext
from clipscribe.stages.base import Stage

logger = logging.getLogger(__name__)


class RecordingWriter(Protocol):
    async def create(
        self,
        *,
        transcript: str,
        thumbnail: str,
        metadata: RecordingMetadata,
    ) -> Recording: ...


class PersistenceStage(Stage):
    name = "persistence"
    required_keys = ("transcript_text", "thumbnail")

    def __init__(self, recording_repo: RecordingWriter) -> None:
        self.recording_repo = recording_repo

    async def save(
        self,
        *,
        transcript: str,
        thumbnail: bytes,
        metadata: RecordingMetadata,
        run_id: str | None = None,
    ) -> str:
        try:
            recording = await self.recording_repo.create(
                transcript=transcript,
                thumbnail=encode_thumbnail(thumbnail),
                metadata=metadata,
            )
        except Exception as exc:
            logger.exception("recording insert failed (run_id=%s)", run_id)
            raise PersistenceError(self.name, "the recording could not be saved", run_id=run_id) from exc
        return recording.id

    async def execute(self, context: PipelineContext) -> PipelineContext:
        self.ensure_input(context)

        run_id = context.get("run_id")
        metadata = RecordingMetadata(
            original_filename=str(context.get("original_filename") or ""),
            media_type=str(context.get("media_type") or "application/octet-stream"),
            size_bytes=int(context.get("size_bytes") or 0),
            duration_s=context.get("duration_s"),
        )
        recording_id = await self.save(
            transcript=str(context["transcript_text"]),
            thumbnail=bytes(context["thumbnail"]),
            metadata=metadata,
            run_id=run_id,
        )

        context = cast(PipelineContext, dict(context))
        context["recording_id"] = recording_id
        logger.info("persistence done (run_id=%s, recording_id=%s)", run_id, recording_id)
        return context
