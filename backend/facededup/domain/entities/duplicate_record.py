"""Domain entities for detected duplicates."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from .statuses import DuplicateRecordStatus


@dataclass
class DuplicateMatch:
    file_id: str
    file_name: str
    confidence: float
    person_id: str


@dataclass
class DuplicatedRecord:
    """One original file found to have one or more duplicate counterparts."""

    id: str
    process_id: str
    original_file_id: str
    original_file_name: str
    duplicates: list[DuplicateMatch] = field(default_factory=list)
    status: DuplicateRecordStatus = DuplicateRecordStatus.DETECTED
    detected_date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    confirmation_user: str | None = None
    confirmation_date: datetime | None = None
    notes: str | None = None

    def review(self, status: DuplicateRecordStatus, username: str, notes: str | None = None) -> None:
        """Record a confirm/reject decision. Existing notes are kept when none are given."""
        self.status = status
        self.confirmation_user = username
        self.confirmation_date = datetime.now(timezone.utc)
        if notes:
            self.notes = notes
