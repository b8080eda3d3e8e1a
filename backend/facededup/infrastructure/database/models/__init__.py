from .process import ProcessModel
from .file import FileModel
from .conflict import ConflictModel
from .exception_record import ExceptionRecordModel
from .duplicate_record import DuplicatedRecordModel

__all__ = [
    "ProcessModel",
    "FileModel",
    "ConflictModel",
    "ExceptionRecordModel",
    "DuplicatedRecordModel",
]
