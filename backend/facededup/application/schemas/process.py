"""Pydantic DTOs for deduplication processes."""

from datetime import datetime

from pydantic import BaseModel, Field

from facededup.domain.entities import ProcessStatus


class ProcessCreate(BaseModel):
    """Schema for creating a deduplication process over uploaded files."""

    file_ids: list[str] = Field(..., min_length=1, examples=[["Files/3f1c9e0a"]])
    username: str | None = Field(None, max_length=255)
    name: str | None = Field(None, max_length=255)


class ProcessCleanupRequest(BaseModel):
    username: str | None = Field(None, max_length=255)


class ProcessStepResponse(BaseModel):
    name: str
    status: str
    started_at: datetime
    ended_at: datetime | None
    processed_file_ids: list[str]

    model_config = {"from_attributes": True}


class ProcessResponse(BaseModel):
    """Schema returned to the client."""

    id: str
    name: str
    username: str | None
    created_by: str | None
    status: ProcessStatus
    created_at: datetime
    completed_at: datetime | None
    process_start_date: datetime | None
    process_end_date: datetime | None
    cleanup_username: str | None
    cleanup_date: datetime | None
    file_ids: list[str]
    file_count: int
    processed_files: int
    current_stage: str | None
    completion_notes: str | None
    steps: list[ProcessStepResponse]

    model_config = {"from_attributes": True}


class ProcessFixResponse(BaseModel):
    process_id: str
    fixed: bool


class ProcessSynchronizeResponse(BaseModel):
    process_id: str
    updated_files: int
