"""Utility helpers."""

from clipscribe.utils.filenames import (
    audio_path_for,
    detect_media_type,
    is_accepted_media_type,
    run_video_path,
    sanitize_filename,
    thumbnail_path_for,
)
from clipscribe.utils.subprocess import RunResult, run_subprocess

__all__ = [
    "RunResult",
    "audio_path_for",
    "detect_media_type",
    "is_accepted_media_type",
    "run_subprocess",
    "run_video_path",
    "sanitize_filename",
    "thumbnail_path_for",
]
