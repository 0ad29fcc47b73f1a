"""Per-run (ephemeral) models of the upload pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import BinaryIO


class RunState(str, Enum):
    RECEIVED = "received"
    DERIVING = "deriving"
    TRANSCRIBING = "transcribing"
    PERSISTING = "persisting"
    DONE = "done"
    FAILED = "failed"


TERMINAL_STATES = frozenset({RunState.DONE, RunState.FAILED})


@dataclass
class UploadedVideo:
    """A received upload, either already on disk (`path`) or still a stream."""

    original_filename: str
    media_type: str
    size_bytes: int
    path: str | None = None
    stream: BinaryIO | None = None


@dataclass(frozen=True)
class DerivedArtifacts:
    thumbnail_path: str
    thumbnail: bytes
    audio_path: str
    duration_s: float | None = None


@dataclass(frozen=True)
class TranscriptResult:
    text: str
    audio_path: str


@dataclass(frozen=True)
class PipelineResult:
    transcript_text: str
    recording_id: str
    run_id: str


@dataclass
class PipelineRun:
    run_id: str
    state: RunState = RunState.RECEIVED
    error_code: str | None = None
    error_message: str | None = None
    transitions: list[RunState] = field(default_factory=lambda: [RunState.RECEIVED])

    @property
    def finished(self) -> bool:
        return self.state in TERMINAL_STATES
