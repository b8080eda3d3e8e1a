from .process import (
    ProcessCreate,
    ProcessCleanupRequest,
    ProcessStepResponse,
    ProcessResponse,
    ProcessFixResponse,
    ProcessSynchronizeResponse,
)
from .conflict import ConflictResponse, ResolveConflictRequest, AutoResolveResponse
from .exception_record import (
    ExceptionRecordResponse,
    UpdateExceptionStatusRequest,
    ExceptionStatisticsResponse,
)
from .duplicate_record import (
    DuplicateMatchSchema,
    DuplicatedRecordResponse,
    ReviewDuplicateRequest,
)

__all__ = [
    "ProcessCreate",
    "ProcessCleanupRequest",
    "ProcessStepResponse",
    "ProcessResponse",
    "ProcessFixResponse",
    "ProcessSynchronizeResponse",
    "ConflictResponse",
    "ResolveConflictRequest",
    "AutoResolveResponse",
    "ExceptionRecordResponse",
    "UpdateExceptionStatusRequest",
    "ExceptionStatisticsResponse",
    "DuplicateMatchSchema",
    "DuplicatedRecordResponse",
    "ReviewDuplicateRequest",
]
