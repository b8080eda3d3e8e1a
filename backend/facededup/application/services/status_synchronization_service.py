"""Process/file status reconciliation.

Processes and files live in separate collections that are written in
separate commits, so a crash or an interrupted run can leave file-level state
behind the process-level state. This service re-derives file statuses from
the owning process and patches missing fields on both. Every pass is
idempotent: re-running it with no intervening change writes nothing.
"""

import logging
import re
import uuid
from datetime import datetime, timedelta, timezone

from facededup.application.interfaces import FileRepository, ProcessRepository
from facededup.application.services.id_normalization_service import (
    DocumentType,
    IdNormalizationService,
)
from facededup.domain.entities import (
    DeduplicationProcess,
    FileProcessStatus,
    FileRecord,
    FileStatus,
    ProcessStatus,
)
from facededup.domain.exceptions import InvalidInputError
from facededup.domain.process_state_machine import is_valid_transition

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 100

_PROCESSED_FILES_NOTE = re.compile(r"Processed (\d+) files")
_START_DATE_BACKDATE = timedelta(minutes=5)


def apply_process_status(file: FileRecord, status: ProcessStatus) -> bool:
    """Push the owning process's ``status`` down onto ``file``.

    Returns True if the file was modified. ``Paused``, ``Ready to Start``,
    ``Conflict Detected`` and ``Cleaning`` have no file-level consequence.
    """
    if status == ProcessStatus.COMPLETED:
        if (
            file.status == FileStatus.UPLOADED
            or file.process_status == FileProcessStatus.PROCESSING
        ):
            file.status = FileStatus.INSERTED
            file.process_status = FileProcessStatus.COMPLETED
            return True

    elif status == ProcessStatus.CLEANED:
        if file.status != FileStatus.DELETED:
            file.status = FileStatus.DELETED
            file.process_status = FileProcessStatus.COMPLETED
            return True

    elif status == ProcessStatus.ERROR:
        if file.process_status != FileProcessStatus.FAILED:
            file.process_status = FileProcessStatus.FAILED
            return True

    elif status == ProcessStatus.IN_PROCESSING:
        if file.process_status != FileProcessStatus.PROCESSING:
            file.process_status = FileProcessStatus.PROCESSING
            return True

    return False


def _processed_count_from_notes(notes: str | None) -> int | None:
    if not notes:
        return None
    match = _PROCESSED_FILES_NOTE.search(notes)
    return int(match.group(1)) if match else None


def repair_process_fields(process: DeduplicationProcess, now: datetime | None = None) -> bool:
    """Fill in derived process fields left unset by partial writes.

    Returns True if anything changed.
    """
    now = now or datetime.now(timezone.utc)
    completed = process.status == ProcessStatus.COMPLETED
    changed = False

    if process.completed_at is None and (completed or process.process_end_date is not None):
        process.completed_at = process.process_end_date or now
        changed = True

    if process.file_count == 0 and process.file_ids:
        process.file_count = len(process.file_ids)
        changed = True

    if not process.created_by and process.username:
        process.created_by = process.username
        changed = True

    if not process.cleanup_username and (
        process.status == ProcessStatus.CLEANED or process.cleanup_date is not None
    ):
        process.cleanup_username = process.username or "system"
        changed = True

    if not process.current_stage:
        process.current_stage = process.status.value
        changed = True

    if process.processed_files == 0 and process.file_ids:
        noted = _processed_count_from_notes(process.completion_notes)
        if noted:
            process.processed_files = noted
            changed = True
        elif completed:
            process.processed_files = len(process.file_ids)
            changed = True

    if completed and process.current_stage != ProcessStatus.COMPLETED.value:
        process.current_stage = ProcessStatus.COMPLETED.value
        changed = True

    return changed


def repair_file_fields(file: FileRecord, now: datetime | None = None) -> bool:
    """Complete the data of a file that is inserted or finished processing.

    Each rule is checked independently against the file's current state.
    Returns True if anything changed.
    """
    now = now or datetime.now(timezone.utc)
    changed = False

    if not file.face_id and file.is_settled:
        # Placeholder: no face was ever registered under this identifier.
        file.face_id = f"face_{uuid.uuid4()}"
        changed = True

    if file.process_start_date is None and file.is_settled:
        file.process_start_date = now - _START_DATE_BACKDATE
        changed = True

    if file.status == FileStatus.INSERTED and file.process_status != FileProcessStatus.COMPLETED:
        file.process_status = FileProcessStatus.COMPLETED
        changed = True

    if file.is_settled and not file.deduplicated:
        file.deduplicated = True
        changed = True

    return changed


class StatusSynchronizationService:
    """Keeps file state consistent with the state of the process that owns it."""

    def __init__(
        self,
        process_repository: ProcessRepository,
        file_repository: FileRepository,
        id_normalizer: IdNormalizationService | None = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self._processes = process_repository
        self._files = file_repository
        self._ids = id_normalizer or IdNormalizationService()
        self._batch_size = batch_size

    def is_valid_transition(self, current: ProcessStatus, new: ProcessStatus) -> bool:
        return is_valid_transition(current, new)

    async def synchronize_file_statuses(self, process_id: str) -> int:
        """Derive each file's status from its process and save the files that differ.

        A missing process is not an error: callers may synchronize
        speculatively. Returns the number of files updated.
        """
        if not process_id:
            raise InvalidInputError("Process ID cannot be null or empty")

        process_id = self._ids.normalize(process_id, DocumentType.PROCESS)
        logger.info("Synchronizing file statuses for process %s", process_id)

        process = await self._processes.get_by_id(process_id)
        if process is None:
            logger.warning("Process %s not found during status synchronization", process_id)
            return 0

        status = ProcessStatus.parse(process.status)
        files = await self.load_files(process)
        if not files:
            logger.info("No files found to synchronize for process %s", process_id)
            return 0

        changed = [f for f in files if apply_process_status(f, status)]
        if not changed:
            logger.info("No file status updates needed for process %s", process_id)
            return 0

        await self._files.update_many(changed)
        logger.info(
            "Updated %d files to match process status %s for process %s",
            len(changed), status.value, process_id,
        )
        return len(changed)

    async def fix_process_data(self, process_id: str) -> bool:
        """Repair a process and its files, then resynchronize file statuses.

        Meant to be safely retried as background maintenance: failures are
        logged and reported as False, never raised.
        """
        try:
            process_id = self._ids.normalize(process_id, DocumentType.PROCESS)
            logger.info("Checking for inconsistencies in process %s", process_id)

            process = await self._processes.get_by_id(process_id) if process_id else None
            if process is None:
                logger.warning("Process %s not found during consistency check", process_id)
                return False

            if repair_process_fields(process):
                await self._processes.update(process)
                logger.info("Fixed inconsistencies in process %s", process_id)

            await self.synchronize_file_statuses(process_id)
            await self._fix_file_data(process_id)
            return True
        except Exception:
            logger.exception("Error fixing inconsistencies in process %s", process_id)
            return False

    async def _fix_file_data(self, process_id: str) -> int:
        process = await self._processes.get_by_id(process_id)
        if process is None:
            return 0

        files = await self.load_files(process)
        now = datetime.now(timezone.utc)
        changed = [f for f in files if repair_file_fields(f, now)]
        if changed:
            await self._files.update_many(changed)
            logger.info(
                "Fixed %d files with missing data for process %s", len(changed), process_id
            )
        return len(changed)

    async def load_files(self, process: DeduplicationProcess) -> list[FileRecord]:
        """Load every file the process references, in batches."""
        files: list[FileRecord] = []
        ids = process.file_ids
        for start in range(0, len(ids), self._batch_size):
            files.extend(await self._files.get_many(ids[start:start + self._batch_size]))
        return files
