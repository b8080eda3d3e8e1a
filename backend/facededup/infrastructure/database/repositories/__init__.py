from .process_repository import SQLAlchemyProcessRepository
from .file_repository import SQLAlchemyFileRepository
from .conflict_repository import SQLAlchemyConflictRepository
from .exception_record_repository import SQLAlchemyExceptionRecordRepository
from .duplicate_record_repository import SQLAlchemyDuplicateRecordRepository

__all__ = [
    "SQLAlchemyProcessRepository",
    "SQLAlchemyFileRepository",
    "SQLAlchemyConflictRepository",
    "SQLAlchemyExceptionRecordRepository",
    "SQLAlchemyDuplicateRecordRepository",
]
