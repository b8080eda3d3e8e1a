from .id_normalization_service import DocumentType, IdNormalizationService
from .status_synchronization_service import StatusSynchronizationService
from .conflict_service import AutoResolveSummary, ConflictService
from .exception_service import ExceptionService
from .duplicate_record_service import DuplicateRecordService
from .deduplication_service import DeduplicationService

__all__ = [
    "DocumentType",
    "IdNormalizationService",
    "StatusSynchronizationService",
    "AutoResolveSummary",
    "ConflictService",
    "ExceptionService",
    "DuplicateRecordService",
    "DeduplicationService",
]
