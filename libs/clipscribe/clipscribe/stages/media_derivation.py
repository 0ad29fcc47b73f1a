"""Media derivation stage (thumbnail, audio track, duration)."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import cast

from clipscribe.config import Settings
from clipscribe.exceptions import DerivationError
from clipscribe.models.upload import DerivedArtifacts
from clipscribe.pipeline.context import PipelineContext
from clipscribe.pipeline.tracker import TransientFileTracker
from clipscribe.providers.media.base import MediaProvider
from clipscribe.stages.base import Stage
from clipscribe.utils.filenames import audio_path_for, thumbnail_path_for

logger = logging.getLogger(__name__)


class MediaDerivationStage(Stage):
    name = "media_derivation"
    required_keys = ("video_path",)

    def __init__(
        self,
        settings: Settings,
        provider: MediaProvider,
        tracker: TransientFileTracker,
    ) -> None:
        self.settings = settings
        self.provider = provider
        self.tracker = tracker

    async def derive_thumbnail(self, video_path: str) -> str:
        output = thumbnail_path_for(video_path)
        # Registered before the tool runs so a partial write is cleaned up too.
        self.tracker.register(output)
        media = self.settings.media
        try:
            await self.provider.extract_thumbnail(
                str(video_path),
                str(output),
                offset_s=float(media.thumbnail_offset_s),
                max_width=int(media.thumbnail_max_width),
                max_height=int(media.thumbnail_max_height),
            )
        except Exception as exc:
            logger.exception("thumbnail extraction failed (run_id=%s)", self.tracker.run_id)
            raise DerivationError(
                self.name,
                "could not extract a thumbnail from the video",
                run_id=self.tracker.run_id,
            ) from exc
        return str(output)

    async def derive_audio(self, video_path: str) -> str:
        output = audio_path_for(video_path)
        self.tracker.register(output)
        try:
            await self.provider.extract_audio(str(video_path), str(output))
        except Exception as exc:
            logger.exception("audio extraction failed (run_id=%s)", self.tracker.run_id)
            raise DerivationError(
                self.name,
                "could not extract an audio track from the video",
                run_id=self.tracker.run_id,
            ) from exc
        return str(output)

    async def probe_duration(self, video_path: str) -> float | None:
        """Duration is optional metadata: any probe failure yields None."""
        try:
            return await self.provider.probe_duration(str(video_path))
        except Exception as exc:
            logger.warning(
                "duration probe failed (run_id=%s): %s; continuing without duration",
                self.tracker.run_id,
                exc,
            )
            return None

    async def derive(self, video_path: str) -> DerivedArtifacts:
        # The tool may leave either output behind when the other step fails.
        self.tracker.register(thumbnail_path_for(video_path))
        self.tracker.register(audio_path_for(video_path))

        thumbnail_path = await self.derive_thumbnail(video_path)
        audio_path = await self.derive_audio(video_path)
        duration_s = await self.probe_duration(video_path)

        try:
            thumbnail = await asyncio.to_thread(Path(thumbnail_path).read_bytes)
        except OSError as exc:
            logger.exception("thumbnail unreadable (run_id=%s)", self.tracker.run_id)
            raise DerivationError(
                self.name, "derived thumbnail could not be read", run_id=self.tracker.run_id
            ) from exc

        return DerivedArtifacts(
            thumbnail_path=thumbnail_path,
            thumbnail=thumbnail,
            audio_path=audio_path,
            duration_s=duration_s,
        )

    async def execute(self, context: PipelineContext) -> PipelineContext:
        self.ensure_input(context)

        run_id = context.get("run_id")
        logger.info("media_derivation start (run_id=%s)", run_id)
        artifacts = await self.derive(str(context["video_path"]))

        context = cast(PipelineContext, dict(context))
        context["thumbnail_path"] = artifacts.thumbnail_path
        context["thumbnail"] = artifacts.thumbnail
        context["audio_path"] = artifacts.audio_path
        context["duration_s"] = artifacts.duration_s
        logger.info(
            "media_derivation done (run_id=%s, thumbnail_bytes=%d, duration_s=%s)",
            run_id,
            len(artifacts.thumbnail),
            artifacts.duration_s,
        )
        return context
