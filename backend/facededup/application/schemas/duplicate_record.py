"""Pydantic DTOs for duplicate records."""

from datetime import datetime

from pydantic import BaseModel, Field

from facededup.domain.entities import DuplicateRecordStatus


class DuplicateMatchSchema(BaseModel):
    file_id: str
    file_name: str
    confidence: float
    person_id: str

    model_config = {"from_attributes": True}


class DuplicatedRecordResponse(BaseModel):
    id: str
    process_id: str
    original_file_id: str
    original_file_name: str
    duplicates: list[DuplicateMatchSchema]
    status: DuplicateRecordStatus
    detected_date: datetime
    confirmation_user: str | None
    confirmation_date: datetime | None
    notes: str | None

    model_config = {"from_attributes": True}


class ReviewDuplicateRequest(BaseModel):
    """Schema for confirming or rejecting a duplicate record."""

    username: str = Field(..., min_length=1, max_length=255)
    notes: str | None = None
