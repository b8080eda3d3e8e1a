"""Domain entity for file-vs-file conflicts."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from .statuses import ConflictStatus


@dataclass
class Conflict:
    """An ambiguous match between two files, pending manual or automatic resolution."""

    id: str
    process_id: str
    file_name: str
    matched_file_name: str
    confidence: float
    status: ConflictStatus = ConflictStatus.UNRESOLVED
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    resolved_by: str | None = None
    resolved_at: datetime | None = None
    resolution: str | None = None

    def resolve(self, resolution: str, resolved_by: str) -> None:
        """Transition to resolved state, stamping who resolved it and when."""
        self.status = ConflictStatus.RESOLVED
        self.resolution = resolution
        self.resolved_by = resolved_by
        self.resolved_at = datetime.now(timezone.utc)
