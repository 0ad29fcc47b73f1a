"""FFmpeg/ffprobe binary resolution helpers.

Prefer the system binaries; fall back to the `imageio-ffmpeg` bundled ffmpeg.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def _bundled_ffmpeg() -> str | None:
    try:
        import imageio_ffmpeg

        return str(imageio_ffmpeg.get_ffmpeg_exe())
    except Exception as exc:
        logger.warning("failed to resolve bundled ffmpeg (%s)", exc)
        return None


def resolve_ffmpeg_bin(ffmpeg_bin: str = "ffmpeg") -> str:
    ffmpeg_bin = (ffmpeg_bin or "ffmpeg").strip()

    if Path(ffmpeg_bin).exists():
        return ffmpeg_bin

    found = shutil.which(ffmpeg_bin)
    if found:
        return found

    return _bundled_ffmpeg() or ffmpeg_bin


def resolve_ffprobe_bin(ffprobe_bin: str = "ffprobe", *, ffmpeg_bin: str | None = None) -> str:
    """Resolve ffprobe; also look next to the resolved ffmpeg binary."""
    ffprobe_bin = (ffprobe_bin or "ffprobe").strip()

    if Path(ffprobe_bin).exists():
        return ffprobe_bin

    found = shutil.which(ffprobe_bin)
    if found:
        return found

    if ffmpeg_bin:
        sibling = Path(ffmpeg_bin).with_name(Path(ffmpeg_bin).name.replace("ffmpeg", "ffprobe"))
        if sibling != Path(ffmpeg_bin) and sibling.exists():
            return str(sibling)

    logger.warning("ffprobe not found; duration probing will be unavailable (bin=%r)", ffprobe_bin)
    return ffprobe_bin
