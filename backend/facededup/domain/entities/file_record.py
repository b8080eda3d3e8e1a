"""Domain entity for uploaded image files."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from .statuses import FileProcessStatus, FileStatus


@dataclass
class FileRecord:
    """An uploaded image owned by at most one deduplication process.

    ``payload`` holds the base64-encoded image as stored by the uploader.
    ``face_id`` is the identifier assigned by the face-match API once the
    face has been registered.
    """

    id: str
    file_name: str
    payload: str = ""
    status: FileStatus = FileStatus.UPLOADED
    process_status: FileProcessStatus = FileProcessStatus.PENDING
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    process_start_date: datetime | None = None
    face_id: str | None = None
    deduplicated: bool = False

    @property
    def is_settled(self) -> bool:
        """Inserted or finished processing: the states that require complete data."""
        return (
            self.status == FileStatus.INSERTED
            or self.process_status == FileProcessStatus.COMPLETED
        )
