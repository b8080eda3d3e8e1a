"""Status enumerations shared by processes, files, and review records.

Each member's value is its canonical display string, which is what gets
persisted and returned by the API. ``parse`` is the lenient storage-boundary
conversion: matching is case-insensitive and unknown strings fall back to the
category's default member instead of raising.
"""

from enum import Enum


class _StatusEnum(str, Enum):
    """Base for display-string status enums."""

    @classmethod
    def default(cls) -> "_StatusEnum":
        raise NotImplementedError

    @classmethod
    def parse(cls, value: "str | _StatusEnum | None"):
        if isinstance(value, cls):
            return value
        if value is not None:
            wanted = str(value).strip().casefold()
            for member in cls:
                # Also accept enum-style names such as "InProcessing"
                if wanted in (member.value.casefold(), member.name.replace("_", "").casefold()):
                    return member
        return cls.default()

    def __str__(self) -> str:
        return self.value


class ProcessStatus(_StatusEnum):
    """Lifecycle states of a deduplication process."""

    READY_TO_START = "Ready to Start"
    IN_PROCESSING = "In Processing"
    COMPLETED = "Completed"
    PAUSED = "Paused"
    ERROR = "Error"
    CONFLICT_DETECTED = "Conflict Detected"
    CLEANING = "Cleaning"
    CLEANED = "Cleaned"

    @classmethod
    def default(cls) -> "ProcessStatus":
        return cls.ERROR


class FileStatus(_StatusEnum):
    UPLOADED = "Uploaded"
    INSERTED = "Inserted"
    CONFLICT = "Conflict"
    DELETED = "Deleted"

    @classmethod
    def default(cls) -> "FileStatus":
        return cls.UPLOADED


class FileProcessStatus(_StatusEnum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    COMPLETED = "Completed"
    FAILED = "Failed"

    @classmethod
    def default(cls) -> "FileProcessStatus":
        return cls.PENDING


class DuplicateRecordStatus(_StatusEnum):
    DETECTED = "Detected"
    CONFIRMED = "Confirmed"
    REJECTED = "Rejected"

    @classmethod
    def default(cls) -> "DuplicateRecordStatus":
        return cls.DETECTED


class ExceptionStatus(_StatusEnum):
    PENDING = "Pending"
    REVIEWED = "Reviewed"
    CONFIRMED = "Confirmed"
    REJECTED = "Rejected"
    RESOLVED = "Resolved"
    IGNORED = "Ignored"

    @classmethod
    def default(cls) -> "ExceptionStatus":
        return cls.PENDING


class ConflictStatus(_StatusEnum):
    UNRESOLVED = "Unresolved"
    RESOLVED = "Resolved"

    @classmethod
    def default(cls) -> "ConflictStatus":
        return cls.UNRESOLVED
