from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UploadResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    transcription_text: str = Field(alias="transcriptionText")
    recording_id: str = Field(alias="recordingId")


class RecordingMetadataResponse(BaseModel):
    original_filename: str
    media_type: str
    size_bytes: int
    duration_s: float | None = None


class RecordingResponse(BaseModel):
    id: str
    transcript: str
    thumbnail: str  # base64 JPEG
    timestamp: datetime
    metadata: RecordingMetadataResponse


class DeleteRecordingResponse(BaseModel):
    deleted: bool
    id: str


class ErrorResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    error_kind: str = Field(alias="errorKind")
    message: str
