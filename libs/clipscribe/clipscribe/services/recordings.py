"""Read/delete access to persisted recordings."""

from __future__ import annotations

import logging
from typing import Protocol

from clipscribe.exceptions import NotFoundError
from clipscribe.models.recording import Recording

logger = logging.getLogger(__name__)


class RecordingReader(Protocol):
    async def list_all(self) -> list[Recording]: ...

    async def get(self, recording_id: str) -> Recording | None: ...

    async def delete(self, recording_id: str) -> int: ...


class RecordingQueryService:
    def __init__(self, recording_repo: RecordingReader) -> None:
        self.recording_repo = recording_repo

    async def list_recordings(self) -> list[Recording]:
        """Newest first. No pagination yet: every row is returned."""
        return list(await self.recording_repo.list_all())

    async def get_recording(self, recording_id: str) -> Recording:
        recording = await self.recording_repo.get(str(recording_id))
        if recording is None:
            raise NotFoundError("recordings", "recording not found")
        return recording

    async def delete_recording(self, recording_id: str) -> None:
        deleted = await self.recording_repo.delete(str(recording_id))
        if deleted <= 0:
            raise NotFoundError("recordings", "recording not found")
        if deleted > 1:
            logger.error("delete removed %d rows for recording_id=%s", deleted, recording_id)
