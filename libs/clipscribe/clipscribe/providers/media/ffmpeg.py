"""FFmpeg-based media provider."""

from __future__ import annotations

import logging
import math
import subprocess
from pathlib import Path

from clipscribe.exceptions import ProviderError
from clipscribe.providers.media.base import MediaProvider
from clipscribe.utils.ffmpeg import resolve_ffmpeg_bin, resolve_ffprobe_bin
from clipscribe.utils.subprocess import RunResult, run_subprocess

logger = logging.getLogger(__name__)


class FFmpegMediaProvider(MediaProvider):
    def __init__(
        self,
        ffmpeg_bin: str = "ffmpeg",
        ffprobe_bin: str = "ffprobe",
        *,
        audio_bitrate: str = "64k",
        timeout_s: float | None = None,
    ) -> None:
        self.ffmpeg_bin = resolve_ffmpeg_bin(ffmpeg_bin)
        self.ffprobe_bin = resolve_ffprobe_bin(ffprobe_bin, ffmpeg_bin=self.ffmpeg_bin)
        self.audio_bitrate = str(audio_bitrate or "64k")
        self.timeout_s = timeout_s

    async def _run(self, tool: str, args: list[str]) -> RunResult:
        try:
            result = await run_subprocess(args, timeout_s=self.timeout_s)
        except FileNotFoundError as exc:
            raise ProviderError(
                tool,
                f"binary not found: {args[0]}. Install ffmpeg and ensure it is in PATH "
                "(or install `imageio-ffmpeg` in the env, or set MEDIA_FFMPEG_BIN).",
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise ProviderError(tool, f"timed out after {self.timeout_s}s") from exc
        if not result.ok:
            raise ProviderError(
                tool,
                f"failed (code={result.returncode}).\n"
                f"cmd: {' '.join(args)}\n"
                f"stderr: {result.stderr_tail()}",
            )
        return result

    async def extract_thumbnail(
        self,
        video_path: str,
        output_path: str,
        *,
        offset_s: float = 1.0,
        max_width: int = 320,
        max_height: int = 240,
    ) -> str:
        """截取单帧缩略图（JPEG，按比例缩放到 max_width x max_height 以内）"""
        video_path = str(video_path)
        output_path = str(output_path)
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)

        scale = (
            f"scale={int(max_width)}:{int(max_height)}:force_original_aspect_ratio=decrease"
        )
        await self._run(
            "ffmpeg",
            [
                self.ffmpeg_bin,
                "-y",
                "-ss",
                str(float(offset_s)),
                "-i",
                video_path,
                "-frames:v",
                "1",
                "-vf",
                scale,
                "-q:v",
                "3",
                output_path,
            ],
        )
        if not Path(output_path).exists():
            raise ProviderError("ffmpeg", f"no frame produced at offset {offset_s}s")
        return output_path

    async def extract_audio(self, video_path: str, output_path: str) -> str:
        """从视频提取音轨，输出 MP3"""
        video_path = str(video_path)
        output_path = str(output_path)
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)

        await self._run(
            "ffmpeg",
            [
                self.ffmpeg_bin,
                "-y",
                "-i",
                video_path,
                "-vn",
                "-acodec",
                "libmp3lame",
                "-b:a",
                self.audio_bitrate,
                "-f",
                "mp3",
                output_path,
            ],
        )
        if not Path(output_path).exists():
            raise ProviderError("ffmpeg", "no audio track produced")
        return output_path

    async def probe_duration(self, video_path: str) -> float | None:
        result = await self._run(
            "ffprobe",
            [
                self.ffprobe_bin,
                "-v",
                "error",
                "-show_entries",
                "format=duration",
                "-of",
                "default=noprint_wrappers=1:nokey=1",
                str(video_path),
            ],
        )
        return parse_duration(result.stdout_text())


def parse_duration(raw: str) -> float | None:
    """Parse ffprobe's duration output; MediaRecorder WebM often reports N/A."""
    value = str(raw or "").strip().splitlines()
    if not value:
        return None
    try:
        seconds = float(value[0].strip())
    except ValueError:
        logger.debug("unparsable ffprobe duration: %r", raw)
        return None
    if math.isnan(seconds) or math.isinf(seconds) or seconds < 0:
        return None
    return seconds
