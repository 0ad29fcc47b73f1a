"""Upload API route: runs the processing pipeline for one recorded clip."""

from __future__ import annotations

import os

from fastapi import APIRouter, Depends, File, Request, UploadFile

from clipscribe.exceptions import ValidationError
from clipscribe.models.upload import UploadedVideo
from clipscribe.utils.filenames import detect_media_type, sanitize_filename

from ._deps import enforce_rate_limit, orchestrator
from .schemas import UploadResponse

router = APIRouter(prefix="/api", tags=["uploads"], dependencies=[Depends(enforce_rate_limit)])


def _file_size(upload: UploadFile) -> int:
    f = upload.file
    try:
        current = f.tell()
        f.seek(0, os.SEEK_END)
        size = int(f.tell())
        f.seek(current, os.SEEK_SET)
        return max(0, size)
    except (OSError, ValueError):
        return int(getattr(upload, "size", 0) or 0)


@router.post("/upload", response_model=UploadResponse)
async def upload_video(
    request: Request,
    video: UploadFile | None = File(None),
) -> UploadResponse:
    if video is None:
        raise ValidationError("no video file uploaded")

    safe_name = sanitize_filename(video.filename)
    upload = UploadedVideo(
        original_filename=safe_name,
        media_type=detect_media_type(safe_name, video.content_type),
        size_bytes=_file_size(video),
        stream=video.file,
    )
    try:
        result = await orchestrator(request).process(upload)
    finally:
        await video.close()

    return UploadResponse(
        transcription_text=result.transcript_text,
        recording_id=result.recording_id,
    )
