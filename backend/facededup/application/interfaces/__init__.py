from .process_repository import ProcessRepository
from .file_repository import FileRepository
from .conflict_repository import ConflictRepository
from .exception_record_repository import ExceptionRecordRepository
from .duplicate_record_repository import DuplicateRecordRepository
from .face_match_client import FaceMatchClient

__all__ = [
    "ProcessRepository",
    "FileRepository",
    "ConflictRepository",
    "ExceptionRecordRepository",
    "DuplicateRecordRepository",
    "FaceMatchClient",
]
