from __future__ import annotations

import sys
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from uuid import uuid4

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from clipscribe.config import Settings
from clipscribe.models.recording import Recording, RecordingMetadata
from clipscribe.providers.media.base import MediaProvider
from clipscribe.providers.transcription.base import TranscriptionProvider

_API_ROOT = Path(__file__).resolve().parents[1]
if str(_API_ROOT) not in sys.path:
    sys.path.insert(0, str(_API_ROOT))

JPEG_BYTES = b"\xff\xd8\xff\xe0fake-jpeg\xff\xd9"


class FakeRedis:
    def __init__(self) -> None:
        self._kv: dict[str, int] = {}
        self.expirations: dict[str, int] = {}

    async def incr(self, key: str) -> int:
        self._kv[str(key)] = int(self._kv.get(str(key), 0)) + 1
        return self._kv[str(key)]

    async def expire(self, key: str, seconds: int) -> bool:
        self.expirations[str(key)] = int(seconds)
        return True

    async def aclose(self) -> None:
        return None


@dataclass
class InMemoryPool:
    recordings: dict[str, Recording] = field(default_factory=dict)
    fail_list: bool = False


class FakeRecordingRepository:
    def __init__(self, pool: InMemoryPool) -> None:
        self.pool = pool

    async def create(
        self,
        *,
        transcript: str,
        thumbnail: str,
        metadata: RecordingMetadata,
    ) -> Recording:
        # Strictly increasing timestamps keep newest-first ordering deterministic.
        created_at = datetime(2026, 1, 1, tzinfo=timezone.utc) + timedelta(
            seconds=len(self.pool.recordings)
        )
        recording = Recording(
            id=uuid4().hex,
            transcript=transcript,
            thumbnail=thumbnail,
            metadata=metadata,
            created_at=created_at,
        )
        self.pool.recordings[recording.id] = recording
        return recording

    async def list_all(self) -> list[Recording]:
        if self.pool.fail_list:
            raise RuntimeError("connection refused at /var/run/postgresql/.s.PGSQL.5432")
        return sorted(
            self.pool.recordings.values(),
            key=lambda r: (r.created_at, r.id),
            reverse=True,
        )

    async def get(self, recording_id: str) -> Recording | None:
        return self.pool.recordings.get(str(recording_id))

    async def delete(self, recording_id: str) -> int:
        return 1 if self.pool.recordings.pop(str(recording_id), None) is not None else 0


class FakeMediaProvider(MediaProvider):
    thumbnail_bytes = JPEG_BYTES

    def __init__(self) -> None:
        self.calls: list[str] = []

    async def extract_thumbnail(
        self,
        video_path: str,
        output_path: str,
        *,
        offset_s: float,
        max_width: int,
        max_height: int,
    ) -> str:
        self.calls.append("thumbnail")
        Path(output_path).write_bytes(JPEG_BYTES)
        return output_path

    async def extract_audio(self, video_path: str, output_path: str) -> str:
        self.calls.append("audio")
        Path(output_path).write_bytes(b"ID3fake-mp3")
        return output_path

    async def probe_duration(self, video_path: str) -> float | None:
        self.calls.append("probe")
        return 2.5

    async def close(self) -> None:
        return None


class FakeTranscriptionProvider(TranscriptionProvider):
    def __init__(self, text: str = "hello from the clip") -> None:
        self.text = text
        self.calls: list[str] = []

    async def transcribe(self, audio_path: str, language: str | None = None) -> str:
        self.calls.append(audio_path)
        return self.text

    async def close(self) -> None:
        return None


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        data_dir=str(tmp_path / "data"),
        log_dir=str(tmp_path / "logs"),
        redis_url="",
        upload_max_bytes=1024,
    )


@pytest.fixture()
def redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture()
def db_pool() -> InMemoryPool:
    return InMemoryPool()


@pytest.fixture()
def media_provider() -> FakeMediaProvider:
    return FakeMediaProvider()


@pytest.fixture()
def transcription_provider() -> FakeTranscriptionProvider:
    return FakeTranscriptionProvider()


@pytest.fixture(autouse=True)
def patch_repos(monkeypatch) -> None:
    monkeypatch.setattr("routes._deps.RecordingRepository", FakeRecordingRepository)


@pytest.fixture()
def app(
    settings: Settings,
    db_pool: InMemoryPool,
    media_provider: FakeMediaProvider,
    transcription_provider: FakeTranscriptionProvider,
) -> FastAPI:
    from errors import register_error_handlers
    from middleware import install_http_policies
    from routes.recordings import router as recordings_router
    from routes.uploads import router as uploads_router

    test_app = FastAPI()
    test_app.state.settings = settings
    test_app.state.redis = None
    test_app.state.db_pool = db_pool
    test_app.state.media_provider = media_provider
    test_app.state.transcription_provider = transcription_provider
    test_app.state.rate_limiter = None
    install_http_policies(test_app, settings)
    register_error_handlers(test_app)
    test_app.include_router(uploads_router)
    test_app.include_router(recordings_router)
    return test_app


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    return TestClient(app)
