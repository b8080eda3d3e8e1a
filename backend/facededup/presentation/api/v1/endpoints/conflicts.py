"""Conflict endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from facededup.application.schemas.conflict import (
    AutoResolveResponse,
    ConflictResponse,
    ResolveConflictRequest,
)
from facededup.application.services import (
    ConflictService,
    DocumentType,
    IdNormalizationService,
)
from facededup.config import get_settings
from facededup.domain.exceptions import EntityNotFoundError, InvalidInputError
from facededup.infrastructure.dependencies import get_conflict_service, get_id_normalizer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/conflicts", tags=["Conflicts"])


@router.get("/process/{process_id:path}", response_model=list[ConflictResponse])
async def list_process_conflicts(
    process_id: str,
    service: ConflictService = Depends(get_conflict_service),
) -> list[ConflictResponse]:
    """Retrieve the conflicts of a process, by either ID form."""
    try:
        conflicts = await service.list_by_process(process_id)
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return [ConflictResponse.model_validate(c, from_attributes=True) for c in conflicts]


@router.post("/resolve/{conflict_id:path}", response_model=ConflictResponse)
async def resolve_conflict(
    conflict_id: str,
    data: ResolveConflictRequest,
    service: ConflictService = Depends(get_conflict_service),
    id_normalizer: IdNormalizationService = Depends(get_id_normalizer),
) -> ConflictResponse:
    """Resolve a conflict, trying each ID form until one is found."""
    for candidate in id_normalizer.variations(conflict_id, DocumentType.CONFLICT):
        try:
            conflict = await service.resolve_conflict(candidate, data.resolution, data.resolved_by)
        except EntityNotFoundError:
            logger.debug("Conflict not found under %s, trying next ID form", candidate)
            continue
        except InvalidInputError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        return ConflictResponse.model_validate(conflict, from_attributes=True)

    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=str(EntityNotFoundError("Conflict", conflict_id)),
    )


@router.post("/auto-resolve/{process_id:path}", response_model=AutoResolveResponse)
async def auto_resolve_conflicts(
    process_id: str,
    threshold: float | None = Query(None, ge=0.0, le=1.0),
    service: ConflictService = Depends(get_conflict_service),
) -> AutoResolveResponse:
    """Resolve every unresolved conflict of a process at or above ``threshold``.

    Without a threshold the configured ``auto_resolve_threshold`` applies.
    """
    if threshold is None:
        threshold = get_settings().auto_resolve_threshold
    try:
        summary = await service.auto_resolve(process_id, threshold)
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return AutoResolveResponse(
        total_conflicts=summary.total,
        auto_resolved_count=summary.auto_resolved,
        remaining_conflicts=summary.remaining,
    )
