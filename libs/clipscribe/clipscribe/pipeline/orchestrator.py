"""Upload pipeline orchestrator (one run per uploaded video)."""

from __future__ import annotations

import asyncio
import logging
import shutil
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import BinaryIO
from uuid import uuid4

from clipscribe.config import Settings
from clipscribe.exceptions import (
    DerivationError,
    PersistenceError,
    PipelineError,
    ReceiveError,
    TranscriptionError,
    ValidationError,
)
from clipscribe.models.upload import PipelineResult, PipelineRun, RunState, UploadedVideo
from clipscribe.pipeline.context import PipelineContext
from clipscribe.pipeline.tracker import TransientFileTracker, tracked_files
from clipscribe.providers.media.base import MediaProvider
from clipscribe.providers.transcription.base import TranscriptionProvider
from clipscribe.stages import MediaDerivationStage, PersistenceStage, TranscriptionStage
from clipscribe.stages.persistence import RecordingWriter
from clipscribe.utils.filenames import is_accepted_media_type, run_video_path

logger = logging.getLogger(__name__)

RunUpdateHook = Callable[[PipelineRun], Awaitable[None]]

_SPOOL_CHUNK_SIZE = 1024 * 1024

# Which error an unexpected exception is reported as, by the state it escaped from.
_ERROR_FOR_STATE: dict[RunState, type[PipelineError]] = {
    RunState.DERIVING: DerivationError,
    RunState.TRANSCRIBING: TranscriptionError,
    RunState.PERSISTING: PersistenceError,
}

_STAGE_FOR_STATE: dict[RunState, str] = {
    RunState.DERIVING: MediaDerivationStage.name,
    RunState.TRANSCRIBING: TranscriptionStage.name,
    RunState.PERSISTING: PersistenceStage.name,
}


def _spool(stream: BinaryIO, target: Path, *, max_bytes: int) -> int:
    written = 0
    with target.open("wb") as f:
        while True:
            chunk = stream.read(_SPOOL_CHUNK_SIZE)
            if not chunk:
                break
            written += len(chunk)
            if written > max_bytes:
                raise ValidationError("file too large", too_large=True)
            f.write(chunk)
    return written


class UploadPipelineOrchestrator:
    """Runs Received → Deriving → Transcribing → Persisting → Done for one upload.

    Any stage failure moves the run to Failed and propagates as a PipelineError
    subclass. Every file written during the run is deleted before `process`
    returns or raises.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        media_provider: MediaProvider,
        transcription_provider: TranscriptionProvider,
        recording_repo: RecordingWriter,
        on_state_change: RunUpdateHook | None = None,
    ) -> None:
        self.settings = settings
        self.media_provider = media_provider
        self.transcription_provider = transcription_provider
        self.recording_repo = recording_repo
        self._on_state_change = on_state_change

    async def _notify(self, run: PipelineRun) -> None:
        if self._on_state_change is None:
            return
        # Observers never change the outcome of a run.
        try:
            await self._on_state_change(run)
        except Exception:
            logger.exception(
                "state change hook failed (run_id=%s, state=%s)", run.run_id, run.state.value
            )

    async def _advance(self, run: PipelineRun, state: RunState) -> None:
        if run.finished:
            raise RuntimeError(f"run {run.run_id} already finished ({run.state.value})")
        run.state = state
        run.transitions.append(state)
        logger.debug("run %s -> %s", run.run_id, state.value)
        await self._notify(run)

    async def _fail(self, run: PipelineRun, exc: PipelineError) -> None:
        run.error_code = exc.error_code.value
        run.error_message = exc.message
        failed_in = run.state
        await self._advance(run, RunState.FAILED)
        logger.warning(
            "run failed (run_id=%s, state=%s, error_code=%s): %s",
            run.run_id,
            failed_in.value,
            run.error_code,
            exc.message,
        )

    def validate_upload(self, upload: UploadedVideo) -> None:
        """Reject bad uploads before any file is touched."""
        if upload.path is None and upload.stream is None:
            raise ValidationError("no video payload")
        size = int(upload.size_bytes or 0)
        if size <= 0:
            raise ValidationError("empty file")
        if size > int(self.settings.upload_max_bytes):
            raise ValidationError("file too large", too_large=True)
        if not is_accepted_media_type(upload.media_type):
            raise ValidationError("invalid file type; only video files are allowed")

    async def _receive(
        self,
        run: PipelineRun,
        upload: UploadedVideo,
        tracker: TransientFileTracker,
    ) -> PipelineContext:
        uploads_dir = Path(self.settings.uploads_dir)
        uploads_dir.mkdir(parents=True, exist_ok=True)
        target = run_video_path(str(uploads_dir), run.run_id, upload.original_filename)

        tracker.register(target)
        if upload.stream is not None:
            size = await asyncio.to_thread(
                _spool, upload.stream, target, max_bytes=int(self.settings.upload_max_bytes)
            )
            if size <= 0:
                raise ValidationError("empty file")
        else:
            source = Path(str(upload.path))
            tracker.register(source)
            await asyncio.to_thread(shutil.move, str(source), str(target))
            size = int(upload.size_bytes)

        return {
            "run_id": run.run_id,
            "video_path": str(target),
            "original_filename": upload.original_filename,
            "media_type": upload.media_type,
            "size_bytes": size,
        }

    def _wrap_unexpected(self, run: PipelineRun, exc: Exception) -> PipelineError:
        error_cls = _ERROR_FOR_STATE.get(run.state)
        if error_cls is None:
            return ReceiveError("the upload could not be stored", run_id=run.run_id)
        return error_cls(
            _STAGE_FOR_STATE[run.state], "unexpected internal error", run_id=run.run_id
        )

    async def process(self, upload: UploadedVideo) -> PipelineResult:
        self.validate_upload(upload)

        run = PipelineRun(run_id=uuid4().hex)
        logger.info(
            "run start (run_id=%s, filename=%s, media_type=%s, size_bytes=%d)",
            run.run_id,
            upload.original_filename,
            upload.media_type,
            int(upload.size_bytes),
        )
        await self._notify(run)

        with tracked_files(run.run_id) as tracker:
            try:
                ctx = await self._receive(run, upload, tracker)

                await self._advance(run, RunState.DERIVING)
                ctx = await MediaDerivationStage(
                    self.settings, self.media_provider, tracker
                ).execute(ctx)

                await self._advance(run, RunState.TRANSCRIBING)
                ctx = await TranscriptionStage(
                    self.settings, self.transcription_provider
                ).execute(ctx)

                await self._advance(run, RunState.PERSISTING)
                ctx = await PersistenceStage(self.recording_repo).execute(ctx)

                await self._advance(run, RunState.DONE)
            except PipelineError as exc:
                if exc.run_id is None:
                    exc.run_id = run.run_id
                await self._fail(run, exc)
                raise
            except Exception as exc:
                logger.exception("unexpected error (run_id=%s, state=%s)", run.run_id, run.state.value)
                wrapped = self._wrap_unexpected(run, exc)
                await self._fail(run, wrapped)
                raise wrapped from exc

        logger.info("run done (run_id=%s, recording_id=%s)", run.run_id, ctx["recording_id"])
        return PipelineResult(
            transcript_text=str(ctx.get("transcript_text") or ""),
            recording_id=str(ctx["recording_id"]),
            run_id=run.run_id,
        )
