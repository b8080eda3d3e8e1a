"""Exception record endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from facededup.application.schemas.exception_record import (
    ExceptionRecordResponse,
    ExceptionStatisticsResponse,
    UpdateExceptionStatusRequest,
)
from facededup.application.services import ExceptionService
from facededup.domain.exceptions import EntityNotFoundError, InvalidInputError
from facededup.infrastructure.dependencies import get_exception_service

router = APIRouter(prefix="/exceptions", tags=["Exceptions"])


@router.get("", response_model=list[ExceptionRecordResponse])
async def list_exceptions(
    service: ExceptionService = Depends(get_exception_service),
) -> list[ExceptionRecordResponse]:
    records = await service.list_all()
    return [ExceptionRecordResponse.model_validate(r, from_attributes=True) for r in records]


@router.get("/statistics", response_model=ExceptionStatisticsResponse)
async def exception_statistics(
    service: ExceptionService = Depends(get_exception_service),
) -> ExceptionStatisticsResponse:
    """Counts by status and by confidence band."""
    return ExceptionStatisticsResponse(**await service.statistics())


@router.get("/threshold", response_model=list[ExceptionRecordResponse])
async def exceptions_above_threshold(
    min_score: float = Query(..., ge=0.0),
    service: ExceptionService = Depends(get_exception_service),
) -> list[ExceptionRecordResponse]:
    records = await service.by_score_threshold(min_score)
    return [ExceptionRecordResponse.model_validate(r, from_attributes=True) for r in records]


@router.get("/process/{process_id:path}", response_model=list[ExceptionRecordResponse])
async def list_process_exceptions(
    process_id: str,
    service: ExceptionService = Depends(get_exception_service),
) -> list[ExceptionRecordResponse]:
    try:
        records = await service.list_by_process(process_id)
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return [ExceptionRecordResponse.model_validate(r, from_attributes=True) for r in records]


@router.put("/{exception_id:path}/status", response_model=ExceptionRecordResponse)
async def update_exception_status(
    exception_id: str,
    data: UpdateExceptionStatusRequest,
    service: ExceptionService = Depends(get_exception_service),
) -> ExceptionRecordResponse:
    """Change a record's review status, merging any extra metadata."""
    try:
        record = await service.update_status(exception_id, data.status, data.metadata)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return ExceptionRecordResponse.model_validate(record, from_attributes=True)
