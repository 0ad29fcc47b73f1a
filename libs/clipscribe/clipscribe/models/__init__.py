"""Domain models."""

from clipscribe.models.recording import (
    Recording,
    RecordingMetadata,
    decode_thumbnail,
    encode_thumbnail,
)
from clipscribe.models.upload import (
    DerivedArtifacts,
    PipelineResult,
    PipelineRun,
    RunState,
    TranscriptResult,
    UploadedVideo,
)

__all__ = [
    "DerivedArtifacts",
    "PipelineResult",
    "PipelineRun",
    "Recording",
    "RecordingMetadata",
    "RunState",
    "TranscriptResult",
    "UploadedVideo",
    "decode_thumbnail",
    "encode_thumbnail",
]
