from __future__ import annotations

import base64

import pytest

from clipscribe.exceptions import PersistenceError
from clipscribe.models.recording import Recording, RecordingMetadata
from clipscribe.stages.persistence import PersistenceStage


class _InMemoryRecordingRepo:
    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.created: list[Recording] = []

    async def create(self, *, transcript: str, thumbnail: str, metadata: RecordingMetadata) -> Recording:
        if self.fail:
            raise RuntimeError("duplicate key value violates unique constraint")
        rec = Recording(
            id=f"rec-{len(self.created) + 1}",
            transcript=transcript,
            thumbnail=thumbnail,
            metadata=metadata,
        )
        self.created.append(rec)
        return rec


@pytest.mark.asyncio
async def test_execute_saves_recording_and_sets_id() -> None:
    repo = _InMemoryRecordingRepo()
    thumbnail = b"\xff\xd8\x00\x01binary\xff\xd9"

    ctx = await PersistenceStage(repo).execute(
        {
            "run_id": "run1",
            "transcript_text": "hello",
            "thumbnail": thumbnail,
            "original_filename": "clip.webm",
            "media_type": "video/webm",
            "size_bytes": 2048,
            "duration_s": 4.2,
        }
    )

    assert ctx["recording_id"] == "rec-1"
    saved = repo.created[0]
    assert saved.transcript == "hello"
    assert base64.b64decode(saved.thumbnail) == thumbnail
    assert saved.metadata == RecordingMetadata(
        original_filename="clip.webm", media_type="video/webm", size_bytes=2048, duration_s=4.2
    )


@pytest.mark.asyncio
async def test_repository_failure_becomes_persistence_error() -> None:
    stage = PersistenceStage(_InMemoryRecordingRepo(fail=True))

    with pytest.raises(PersistenceError) as excinfo:
        await stage.save(
            transcript="t",
            thumbnail=b"x",
            metadata=RecordingMetadata("clip.mp4", "video/mp4", 1),
            run_id="run1",
        )

    assert excinfo.value.run_id == "run1"
    assert "duplicate key" not in excinfo.value.message
