"""Deduplication process endpoints.

Process IDs are accepted with or without their ``processes/`` prefix.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from facededup.application.schemas.process import (
    ProcessCleanupRequest,
    ProcessCreate,
    ProcessFixResponse,
    ProcessResponse,
    ProcessSynchronizeResponse,
)
from facededup.application.services import DeduplicationService
from facededup.domain.exceptions import (
    EntityNotFoundError,
    FaceApiError,
    InvalidInputError,
    InvalidStatusTransitionError,
)
from facededup.infrastructure.dependencies import get_deduplication_service

router = APIRouter(prefix="/processes", tags=["Processes"])

_HANDLED = (EntityNotFoundError, InvalidInputError, InvalidStatusTransitionError, FaceApiError)


def _http_error(e: Exception) -> HTTPException:
    if isinstance(e, EntityNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    if isinstance(e, InvalidStatusTransitionError):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": str(e), "current_status": e.current_status},
        )
    if isinstance(e, FaceApiError):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("", response_model=ProcessResponse, status_code=status.HTTP_201_CREATED)
async def create_process(
    data: ProcessCreate,
    service: DeduplicationService = Depends(get_deduplication_service),
) -> ProcessResponse:
    """Create a process over a set of uploaded files."""
    try:
        process = await service.create_process(data.file_ids, username=data.username, name=data.name)
    except InvalidInputError as e:
        raise _http_error(e)
    return ProcessResponse.model_validate(process, from_attributes=True)


@router.get("", response_model=list[ProcessResponse])
async def list_processes(
    limit: int = Query(1000, ge=1, le=5000),
    service: DeduplicationService = Depends(get_deduplication_service),
) -> list[ProcessResponse]:
    processes = await service.list_processes(limit=limit)
    return [ProcessResponse.model_validate(p, from_attributes=True) for p in processes]


@router.post("/{process_id:path}/start", response_model=ProcessResponse)
async def start_process(
    process_id: str,
    service: DeduplicationService = Depends(get_deduplication_service),
) -> ProcessResponse:
    """Run the insertion and identification pipeline for a process."""
    try:
        process = await service.start_process(process_id)
    except _HANDLED as e:
        raise _http_error(e)
    return ProcessResponse.model_validate(process, from_attributes=True)


@router.post("/{process_id:path}/pause", response_model=ProcessResponse)
async def pause_process(
    process_id: str,
    service: DeduplicationService = Depends(get_deduplication_service),
) -> ProcessResponse:
    try:
        process = await service.pause_process(process_id)
    except _HANDLED as e:
        raise _http_error(e)
    return ProcessResponse.model_validate(process, from_attributes=True)


@router.post("/{process_id:path}/resume", response_model=ProcessResponse)
async def resume_process(
    process_id: str,
    service: DeduplicationService = Depends(get_deduplication_service),
) -> ProcessResponse:
    try:
        process = await service.resume_process(process_id)
    except _HANDLED as e:
        raise _http_error(e)
    return ProcessResponse.model_validate(process, from_attributes=True)


@router.post("/{process_id:path}/cleanup", response_model=ProcessResponse)
async def cleanup_process(
    process_id: str,
    data: ProcessCleanupRequest | None = None,
    service: DeduplicationService = Depends(get_deduplication_service),
) -> ProcessResponse:
    """Mark the files of a completed process as deleted."""
    try:
        process = await service.cleanup_process(process_id, username=data.username if data else None)
    except _HANDLED as e:
        raise _http_error(e)
    return ProcessResponse.model_validate(process, from_attributes=True)


@router.post("/{process_id:path}/fix", response_model=ProcessFixResponse)
async def fix_process(
    process_id: str,
    service: DeduplicationService = Depends(get_deduplication_service),
) -> ProcessFixResponse:
    """Repair inconsistent process and file data. Never fails; reports whether it succeeded."""
    fixed = await service.fix_process_data(process_id)
    return ProcessFixResponse(process_id=process_id, fixed=fixed)


@router.post("/{process_id:path}/synchronize", response_model=ProcessSynchronizeResponse)
async def synchronize_process(
    process_id: str,
    service: DeduplicationService = Depends(get_deduplication_service),
) -> ProcessSynchronizeResponse:
    try:
        updated = await service.synchronize_process(process_id)
    except _HANDLED as e:
        raise _http_error(e)
    return ProcessSynchronizeResponse(process_id=process_id, updated_files=updated)


@router.get("/{process_id:path}", response_model=ProcessResponse)
async def get_process(
    process_id: str,
    service: DeduplicationService = Depends(get_deduplication_service),
) -> ProcessResponse:
    try:
        process = await service.get_process(process_id)
    except _HANDLED as e:
        raise _http_error(e)
    return ProcessResponse.model_validate(process, from_attributes=True)
