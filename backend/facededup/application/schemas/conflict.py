"""Pydantic DTOs for conflicts."""

from datetime import datetime

from pydantic import BaseModel, Field

from facededup.domain.entities import ConflictStatus


class ConflictResponse(BaseModel):
    id: str
    process_id: str
    file_name: str
    matched_file_name: str
    confidence: float
    status: ConflictStatus
    created_at: datetime
    resolved_by: str | None
    resolved_at: datetime | None
    resolution: str | None

    model_config = {"from_attributes": True}


class ResolveConflictRequest(BaseModel):
    """Schema for resolving a conflict by hand."""

    resolution: str = Field(..., min_length=1, examples=["Kept both files: different people"])
    resolved_by: str = Field("system", min_length=1, max_length=255)


class AutoResolveResponse(BaseModel):
    total_conflicts: int
    auto_resolved_count: int
    remaining_conflicts: int
