"""Transcription stage."""

from __future__ import annotations

import logging
from typing import cast

from clipscribe.config import Settings
from clipscribe.exceptions import TranscriptionError
from clipscribe.models.upload import TranscriptResult
from clipscribe.pipeline.context import PipelineContext
from clipscribe.providers.transcription.base import TranscriptionProvider
from clipscribe.stages.base import Stage

logger = logging.getLogger(__name__)


class TranscriptionStage(Stage):
    name = "transcription"
    required_keys = ("audio_path",)

    def __init__(self, settings: Settings, provider: TranscriptionProvider) -> None:
        self.settings = settings
        self.provider = provider

    async def transcribe(self, audio_path: str, *, run_id: str | None = None) -> TranscriptResult:
        """One call, whole file; no retry, no partial results."""
        try:
            text = await self.provider.transcribe(
                str(audio_path), language=self.settings.transcription.language
            )
        except Exception as exc:
            logger.exception("transcription failed (run_id=%s)", run_id)
            raise TranscriptionError(
                self.name, "the transcription service failed", run_id=run_id
            ) from exc
        return TranscriptResult(text=str(text or ""), audio_path=str(audio_path))

    async def execute(self, context: PipelineContext) -> PipelineContext:
        self.ensure_input(context)

        run_id = context.get("run_id")
        logger.info("transcription start (run_id=%s)", run_id)
        result = await self.transcribe(str(context["audio_path"]), run_id=run_id)

        context = cast(PipelineContext, dict(context))
        context["transcript_text"] = result.text
        logger.info("transcription done (run_id=%s, chars=%d)", run_id, len(result.text))
        return context
