"""Pydantic DTOs for exception records."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from facededup.domain.entities import ExceptionStatus


class ExceptionRecordResponse(BaseModel):
    id: str
    process_id: str
    file_name: str
    candidate_file_names: list[str]
    comparison_score: float
    status: ExceptionStatus
    created_at: datetime
    updated_at: datetime | None
    metadata: dict[str, Any]

    model_config = {"from_attributes": True}


class UpdateExceptionStatusRequest(BaseModel):
    """Status is matched case-insensitively; unknown values fall back to Pending."""

    status: str = Field(..., min_length=1, examples=["Reviewed"])
    metadata: dict[str, Any] | None = None


class ExceptionStatisticsResponse(BaseModel):
    total: int
    pending: int
    reviewed: int
    confirmed: int
    rejected: int
    resolved: int
    ignored: int
    high_confidence: int
    medium_confidence: int
    low_confidence: int
