"""Domain entity for deduplication processes."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from .statuses import ProcessStatus


@dataclass
class ProcessStep:
    """One named phase of a process run (Initialization, Insertion, Identification)."""

    name: str
    status: str = "In Progress"
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    ended_at: datetime | None = None
    processed_file_ids: list[str] = field(default_factory=list)

    def complete(self) -> None:
        self.status = "Completed"
        self.ended_at = datetime.now(timezone.utc)


@dataclass
class DeduplicationProcess:
    """A single deduplication run over a batch of uploaded files.

    ``file_count`` and ``current_stage`` are denormalized copies of
    ``len(file_ids)`` and ``status``; they can drift after interrupted writes
    and are repaired by the reconciliation pass.
    """

    id: str
    name: str
    username: str | None = None
    created_by: str | None = None
    status: ProcessStatus = ProcessStatus.READY_TO_START
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: datetime | None = None
    process_start_date: datetime | None = None
    process_end_date: datetime | None = None
    cleanup_username: str | None = None
    cleanup_date: datetime | None = None
    file_ids: list[str] = field(default_factory=list)
    file_count: int = 0
    processed_files: int = 0
    current_stage: str | None = None
    completion_notes: str | None = None
    steps: list[ProcessStep] = field(default_factory=list)

    def get_step(self, name: str) -> ProcessStep | None:
        return next((s for s in self.steps if s.name == name), None)

    def start_step(self, name: str) -> ProcessStep:
        """Append a new in-progress step and return it."""
        step = ProcessStep(name=name)
        self.steps.append(step)
        return step

    def processed_file_ids(self) -> set[str]:
        """Distinct file IDs processed across all steps."""
        return {file_id for step in self.steps for file_id in step.processed_file_ids}
