"""Duplicate record endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from facededup.application.schemas.duplicate_record import (
    DuplicatedRecordResponse,
    ReviewDuplicateRequest,
)
from facededup.application.services import DuplicateRecordService
from facededup.domain.exceptions import EntityNotFoundError, InvalidInputError
from facededup.infrastructure.dependencies import get_duplicate_record_service

router = APIRouter(prefix="/duplicate-records", tags=["Duplicate Records"])


@router.get("", response_model=list[DuplicatedRecordResponse])
async def list_duplicate_records(
    status_filter: str | None = Query(None, alias="status", description="Filter by status"),
    service: DuplicateRecordService = Depends(get_duplicate_record_service),
) -> list[DuplicatedRecordResponse]:
    if status_filter:
        records = await service.list_by_status(status_filter)
    else:
        records = await service.list_all()
    return [DuplicatedRecordResponse.model_validate(r, from_attributes=True) for r in records]


@router.get("/process/{process_id:path}", response_model=list[DuplicatedRecordResponse])
async def list_process_duplicate_records(
    process_id: str,
    service: DuplicateRecordService = Depends(get_duplicate_record_service),
) -> list[DuplicatedRecordResponse]:
    try:
        records = await service.list_by_process(process_id)
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return [DuplicatedRecordResponse.model_validate(r, from_attributes=True) for r in records]


@router.post("/{record_id:path}/confirm", response_model=DuplicatedRecordResponse)
async def confirm_duplicate_record(
    record_id: str,
    data: ReviewDuplicateRequest,
    service: DuplicateRecordService = Depends(get_duplicate_record_service),
) -> DuplicatedRecordResponse:
    try:
        record = await service.confirm(record_id, data.username, data.notes)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return DuplicatedRecordResponse.model_validate(record, from_attributes=True)


@router.post("/{record_id:path}/reject", response_model=DuplicatedRecordResponse)
async def reject_duplicate_record(
    record_id: str,
    data: ReviewDuplicateRequest,
    service: DuplicateRecordService = Depends(get_duplicate_record_service),
) -> DuplicatedRecordResponse:
    try:
        record = await service.reject(record_id, data.username, data.notes)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return DuplicatedRecordResponse.model_validate(record, from_attributes=True)


@router.get("/{record_id:path}", response_model=DuplicatedRecordResponse)
async def get_duplicate_record(
    record_id: str,
    service: DuplicateRecordService = Depends(get_duplicate_record_service),
) -> DuplicatedRecordResponse:
    try:
        record = await service.get_record(record_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return DuplicatedRecordResponse.model_validate(record, from_attributes=True)
