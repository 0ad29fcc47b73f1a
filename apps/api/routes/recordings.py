"""Recordings API routes (list newest-first, fetch and delete by id)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from ._deps import enforce_rate_limit, query_service, to_response
from .schemas import DeleteRecordingResponse, ErrorResponse, RecordingResponse

router = APIRouter(
    prefix="/api/recordings",
    tags=["recordings"],
    dependencies=[Depends(enforce_rate_limit)],
)


@router.get("", response_model=list[RecordingResponse])
async def list_recordings(request: Request) -> list[RecordingResponse]:
    recordings = await query_service(request).list_recordings()
    return [to_response(r) for r in recordings]


@router.get(
    "/{recording_id}",
    response_model=RecordingResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_recording(request: Request, recording_id: str) -> RecordingResponse:
    return to_response(await query_service(request).get_recording(recording_id))


@router.delete(
    "/{recording_id}",
    response_model=DeleteRecordingResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_recording(request: Request, recording_id: str) -> DeleteRecordingResponse:
    await query_service(request).delete_recording(recording_id)
    return DeleteRecordingResponse(deleted=True, id=recording_id)
