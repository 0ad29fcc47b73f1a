"""Pipeline context typing.

Stages pass a context dict along the run. This module defines the stable,
known keys.
"""

from __future__ import annotations

from typing import TypedDict


class PipelineContext(TypedDict, total=False):
    run_id: str

    # Received
    video_path: str
    original_filename: str
    media_type: str
    size_bytes: int

    # Derived
    thumbnail_path: str
    thumbnail: bytes
    audio_path: str
    duration_s: float | None

    # Transcribed
    transcript_text: str

    # Persisted
    recording_id: str
