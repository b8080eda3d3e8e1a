from .statuses import (
    ConflictStatus,
    DuplicateRecordStatus,
    ExceptionStatus,
    FileProcessStatus,
    FileStatus,
    ProcessStatus,
)
from .process import DeduplicationProcess, ProcessStep
from .file_record import FileRecord
from .conflict import Conflict
from .exception_record import ExceptionRecord
from .duplicate_record import DuplicatedRecord, DuplicateMatch
from .face_match import (
    IdentificationMatch,
    IdentificationResult,
    RegisterFaceResult,
    VerificationResult,
)

__all__ = [
    "ConflictStatus",
    "DuplicateRecordStatus",
    "ExceptionStatus",
    "FileProcessStatus",
    "FileStatus",
    "ProcessStatus",
    "DeduplicationProcess",
    "ProcessStep",
    "FileRecord",
    "Conflict",
    "ExceptionRecord",
    "DuplicatedRecord",
    "DuplicateMatch",
    "IdentificationMatch",
    "IdentificationResult",
    "RegisterFaceResult",
    "VerificationResult",
]
