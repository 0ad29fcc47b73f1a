from __future__ import annotations

from pathlib import Path

import pytest

from clipscribe.exceptions import ConfigurationError, DerivationError, ProviderError
from clipscribe.pipeline.tracker import TransientFileTracker
from clipscribe.providers.media.base import MediaProvider
from clipscribe.stages.media_derivation import MediaDerivationStage


class _FakeMediaProvider(MediaProvider):
    def __init__(
        self,
        *,
        fail_thumbnail: bool = False,
        fail_audio: bool = False,
        fail_probe: bool = False,
        write_thumbnail: bool = True,
    ) -> None:
        self.fail_thumbnail = fail_thumbnail
        self.fail_audio = fail_audio
        self.fail_probe = fail_probe
        self.write_thumbnail = write_thumbnail
        self.calls: list[str] = []
        self.thumbnail_kwargs: dict = {}

    async def extract_thumbnail(self, video_path, output_path, *, offset_s, max_width, max_height):
        self.calls.append("thumbnail")
        self.thumbnail_kwargs = {
            "offset_s": offset_s,
            "max_width": max_width,
            "max_height": max_height,
        }
        if self.fail_thumbnail:
            Path(output_path).write_bytes(b"partial")
            raise ProviderError("ffmpeg", f"failed on {video_path}")
        if self.write_thumbnail:
            Path(output_path).write_bytes(b"\xff\xd8jpeg")
        return output_path

    async def extract_audio(self, video_path, output_path):
        self.calls.append("audio")
        if self.fail_audio:
            raise ProviderError("ffmpeg", "no audio stream")
        Path(output_path).write_bytes(b"mp3")
        return output_path

    async def probe_duration(self, video_path):
        self.calls.append("probe")
        if self.fail_probe:
            raise ProviderError("ffprobe", "not installed")
        return 3.0


def _video(settings) -> Path:
    uploads = Path(settings.uploads_dir)
    uploads.mkdir(parents=True, exist_ok=True)
    video = uploads / "run1.webm"
    video.write_bytes(b"webm")
    return video


@pytest.mark.asyncio
async def test_execute_sets_thumbnail_audio_and_duration(settings) -> None:
    video = _video(settings)
    provider = _FakeMediaProvider()
    tracker = TransientFileTracker("run1")
    stage = MediaDerivationStage(settings, provider, tracker)

    ctx = await stage.execute({"run_id": "run1", "video_path": str(video)})

    assert ctx["thumbnail"] == b"\xff\xd8jpeg"
    assert ctx["thumbnail_path"] == str(video.with_name("run1-thumb.jpg"))
    assert ctx["audio_path"] == str(video.with_name("run1.mp3"))
    assert ctx["duration_s"] == 3.0
    assert provider.calls == ["thumbnail", "audio", "probe"]
    assert provider.thumbnail_kwargs == {"offset_s": 1.0, "max_width": 320, "max_height": 240}
    assert set(tracker.paths) == {ctx["thumbnail_path"], ctx["audio_path"]}


@pytest.mark.asyncio
async def test_thumbnail_failure_is_derivation_error_and_partial_file_is_tracked(settings) -> None:
    video = _video(settings)
    provider = _FakeMediaProvider(fail_thumbnail=True)
    tracker = TransientFileTracker("run1")
    stage = MediaDerivationStage(settings, provider, tracker)

    with pytest.raises(DerivationError) as excinfo:
        await stage.execute({"run_id": "run1", "video_path": str(video)})

    assert excinfo.value.run_id == "run1"
    assert str(video) not in excinfo.value.message
    assert isinstance(excinfo.value.__cause__, ProviderError)
    assert provider.calls == ["thumbnail"]
    assert tracker.drain_and_delete() == 1


@pytest.mark.asyncio
async def test_audio_failure_is_derivation_error(settings) -> None:
    video = _video(settings)
    provider = _FakeMediaProvider(fail_audio=True)
    tracker = TransientFileTracker("run1")

    with pytest.raises(DerivationError):
        await MediaDerivationStage(settings, provider, tracker).execute(
            {"run_id": "run1", "video_path": str(video)}
        )
    assert provider.calls == ["thumbnail", "audio"]
    assert len(tracker.paths) == 2


@pytest.mark.asyncio
async def test_probe_failure_yields_no_duration(settings) -> None:
    video = _video(settings)
    stage = MediaDerivationStage(
        settings, _FakeMediaProvider(fail_probe=True), TransientFileTracker()
    )

    ctx = await stage.execute({"video_path": str(video)})
    assert ctx["duration_s"] is None
    assert ctx["thumbnail"]


@pytest.mark.asyncio
async def test_missing_thumbnail_output_is_derivation_error(settings) -> None:
    video = _video(settings)
    stage = MediaDerivationStage(
        settings, _FakeMediaProvider(write_thumbnail=False), TransientFileTracker()
    )

    with pytest.raises(DerivationError):
        await stage.execute({"video_path": str(video)})


@pytest.mark.asyncio
async def test_execute_requires_video_path(settings) -> None:
    stage = MediaDerivationStage(settings, _FakeMediaProvider(), TransientFileTracker())
    with pytest.raises(ConfigurationError):
        await stage.execute({"run_id": "run1"})
