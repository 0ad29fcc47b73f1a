"""Upload filename sanitizing and per-run path derivation."""

from __future__ import annotations

import mimetypes
from pathlib import Path

VIDEO_EXTENSIONS: tuple[str, ...] = (".mp4", ".webm", ".mov")
DEFAULT_VIDEO_EXTENSION = ".mp4"

THUMBNAIL_SUFFIX = "-thumb.jpg"
AUDIO_SUFFIX = ".mp3"


def sanitize_filename(filename: str | None) -> str:
    raw = str(filename or "").strip()
    base = Path(raw).name
    base = base.replace("\x00", "")
    if not base:
        return "upload.bin"
    return base[:255]


def detect_media_type(filename: str, provided: str | None) -> str:
    candidate = str(provided or "").strip().lower()
    if candidate:
        return candidate
    guessed, _ = mimetypes.guess_type(filename)
    return str(guessed or "application/octet-stream")


def is_accepted_media_type(media_type: str) -> bool:
    value = str(media_type or "").strip().lower()
    return value.startswith("video/") or value == "application/octet-stream"


def video_extension(filename: str) -> str:
    ext = Path(sanitize_filename(filename)).suffix.lower()
    return ext if ext in VIDEO_EXTENSIONS else DEFAULT_VIDEO_EXTENSION


def run_video_path(uploads_dir: str, run_id: str, original_filename: str) -> Path:
    return Path(uploads_dir) / f"{run_id}{video_extension(original_filename)}"


def thumbnail_path_for(video_path: str | Path) -> Path:
    p = Path(video_path)
    return p.with_name(f"{p.stem}{THUMBNAIL_SUFFIX}")


def audio_path_for(video_path: str | Path) -> Path:
    p = Path(video_path)
    return p.with_name(f"{p.stem}{AUDIO_SUFFIX}")
