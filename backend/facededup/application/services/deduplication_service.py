"""Deduplication service: drives a process through its lifecycle.

Run pipeline:  mark In Processing -> Insertion -> Identification -> mark Completed

Insertion registers each face with the face-match API unless it matches a
face already inserted in the same run, in which case a Conflict is recorded.
Identification searches every inserted face against all registered faces and
records exceptions and duplicate records for the matches found. File statuses
are resynchronized after every process status change.
"""

import hashlib
import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from facededup.application.interfaces import (
    FaceMatchClient,
    FileRepository,
    ProcessRepository,
)
from facededup.application.services.conflict_service import ConflictService
from facededup.application.services.duplicate_record_service import DuplicateRecordService
from facededup.application.services.exception_service import (
    ExceptionService,
    processing_metadata,
)
from facededup.application.services.id_normalization_service import (
    DocumentType,
    IdNormalizationService,
)
from facededup.application.services.status_synchronization_service import (
    StatusSynchronizationService,
)
from facededup.domain.entities import (
    DeduplicationProcess,
    DuplicateMatch,
    FileProcessStatus,
    FileRecord,
    FileStatus,
    IdentificationMatch,
    ProcessStatus,
)
from facededup.domain.exceptions import (
    EntityNotFoundError,
    FaceApiError,
    InvalidInputError,
    InvalidStatusTransitionError,
)
from facededup.domain.process_state_machine import is_terminal, is_valid_transition
from facededup.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

logger = logging.getLogger(__name__)
plog = PipelineLogger()

DEFAULT_CONFLICT_THRESHOLD = 0.7

INITIALIZATION_STEP = "Initialization"
INSERTION_STEP = "Insertion"
IDENTIFICATION_STEP = "Identification"


def person_name_for(payload: str) -> str:
    """Deterministic face-API person name for an image payload."""
    digest = hashlib.sha256((payload or "").encode("utf-8")).hexdigest()
    return f"person_{digest[:10]}"


def collapse_matches(
    matches: list[IdentificationMatch], own_face_id: str | None
) -> list[IdentificationMatch]:
    """Drop self matches and keep the best match per person, best first."""
    best: dict[str, IdentificationMatch] = {}
    for match in matches:
        if own_face_id and match.person_id == own_face_id:
            continue
        current = best.get(match.person_id)
        if current is None or match.confidence > current.confidence:
            best[match.person_id] = match
    return sorted(best.values(), key=lambda m: m.confidence, reverse=True)


@dataclass
class _RunCounters:
    duplicate_records: int = 0
    total_matches: int = 0
    exceptions: int = 0


class DeduplicationService:
    """Creates deduplication processes and runs them through the face-match pipeline."""

    def __init__(
        self,
        process_repository: ProcessRepository,
        file_repository: FileRepository,
        face_client: FaceMatchClient,
        conflict_service: ConflictService,
        exception_service: ExceptionService,
        duplicate_record_service: DuplicateRecordService,
        sync_service: StatusSynchronizationService,
        id_normalizer: IdNormalizationService | None = None,
        conflict_threshold: float = DEFAULT_CONFLICT_THRESHOLD,
    ):
        self._processes = process_repository
        self._files = file_repository
        self._face_client = face_client
        self._conflicts = conflict_service
        self._exceptions = exception_service
        self._duplicates = duplicate_record_service
        self._sync = sync_service
        self._ids = id_normalizer or IdNormalizationService()
        self._conflict_threshold = conflict_threshold

    # ── Queries ──────────────────────────────────────────────────────

    async def get_process(self, process_id: str) -> DeduplicationProcess:
        if not process_id:
            raise InvalidInputError("Process ID cannot be null or empty")
        for candidate in self._ids.variations(process_id, DocumentType.PROCESS):
            process = await self._processes.get_by_id(candidate)
            if process is not None:
                return process
        raise EntityNotFoundError("Process", process_id)

    async def list_processes(self, limit: int = 1000) -> list[DeduplicationProcess]:
        return await self._processes.get_all(limit=limit)

    # ── Lifecycle ────────────────────────────────────────────────────

    async def create_process(
        self,
        file_ids: list[str],
        username: str | None = None,
        name: str | None = None,
    ) -> DeduplicationProcess:
        if not file_ids:
            raise InvalidInputError("At least one file ID is required")

        now = datetime.now(timezone.utc)
        owner = username or "system"
        process = DeduplicationProcess(
            id=self._ids.new_id(DocumentType.PROCESS),
            name=name or f"Process-{now:%Y%m%d-%H%M%S}",
            username=owner,
            created_by=owner,
            created_at=now,
            file_ids=[self._ids.normalize(f, DocumentType.FILE) for f in file_ids],
            file_count=len(file_ids),
            current_stage="Created",
        )
        process.start_step(INITIALIZATION_STEP).complete()

        created = await self._processes.create(process)
        logger.info("Created process %s with %d files", created.id, created.file_count)
        return created

    async def start_process(self, process_id: str) -> DeduplicationProcess:
        process = await self.get_process(process_id)
        self._ensure_transition(process, ProcessStatus.IN_PROCESSING)
        return await self._run(process)

    async def pause_process(self, process_id: str) -> DeduplicationProcess:
        process = await self.get_process(process_id)
        self._ensure_transition(process, ProcessStatus.PAUSED)

        process.status = ProcessStatus.PAUSED
        process.current_stage = ProcessStatus.PAUSED.value
        await self._processes.update(process)
        logger.info("Process %s paused", process.id)
        await self._synchronize(process)
        return process

    async def resume_process(self, process_id: str) -> DeduplicationProcess:
        process = await self.get_process(process_id)
        if process.status != ProcessStatus.PAUSED:
            raise InvalidStatusTransitionError(
                process.id, process.status.value, ProcessStatus.IN_PROCESSING.value
            )
        return await self._run(process)

    async def cleanup_process(
        self, process_id: str, username: str | None = None
    ) -> DeduplicationProcess:
        """Mark every file of a completed process as deleted and close the process."""
        process = await self.get_process(process_id)
        self._ensure_transition(process, ProcessStatus.CLEANING)

        now = datetime.now(timezone.utc)
        process.status = ProcessStatus.CLEANING
        process.current_stage = ProcessStatus.CLEANING.value
        process.cleanup_date = now
        process.cleanup_username = username or process.username or process.created_by or "system"
        await self._processes.update(process)

        plog.step_start(PipelineStage.CLEANUP, f"Cleaning up process {process.id}")
        try:
            cleaned, failed = 0, 0
            for file in await self._sync.load_files(process):
                try:
                    file.status = FileStatus.DELETED
                    file.process_status = FileProcessStatus.COMPLETED
                    await self._files.update(file)
                    cleaned += 1
                except Exception:
                    logger.exception("Failed to clean up file %s", file.id)
                    failed += 1

            process.status = ProcessStatus.CLEANED
            process.current_stage = ProcessStatus.CLEANED.value
            process.completed_at = process.completed_at or now
            process.completion_notes = (
                f"Successfully cleaned up {cleaned} files. {failed} files had errors."
            )
            await self._processes.update(process)
            plog.step_complete(PipelineStage.CLEANUP, "Cleanup finished", cleaned=cleaned, failed=failed)
            await self._synchronize(process)
            return process
        except Exception as e:
            plog.step_error(PipelineStage.CLEANUP, f"Cleanup of process {process.id} failed", error=e)
            await self._mark_error(process, f"Error during cleanup: {e}")
            raise

    async def fix_process_data(self, process_id: str) -> bool:
        plog.step_start(PipelineStage.REPAIR, f"Repairing process {process_id}")
        fixed = await self._sync.fix_process_data(process_id)
        plog.detail("Repair finished", fixed=fixed)
        return fixed

    async def synchronize_process(self, process_id: str) -> int:
        process = await self.get_process(process_id)
        return await self._synchronize(process)

    # ── Pipeline ─────────────────────────────────────────────────────

    async def _run(self, process: DeduplicationProcess) -> DeduplicationProcess:
        plog.separator(f"Process {process.id}")
        plog.step_start(PipelineStage.PROCESS, f"Running {process.name}", files=len(process.file_ids))
        try:
            process.status = ProcessStatus.IN_PROCESSING
            process.process_start_date = process.process_start_date or datetime.now(timezone.utc)
            process.current_stage = INSERTION_STEP
            await self._processes.update(process)
            await self._synchronize(process)

            files = [
                f for f in await self._sync.load_files(process)
                if f.status != FileStatus.DELETED
            ]
            counters = _RunCounters()

            with plog.timed_step(PipelineStage.INSERTION, "Inserting faces", files=len(files)):
                inserted = await self._insertion_step(process, files, counters)

            if await self._paused_meanwhile(process):
                return await self._defer(process)

            process.current_stage = IDENTIFICATION_STEP
            await self._processes.update(process)

            with plog.timed_step(PipelineStage.IDENTIFICATION, "Identifying faces", files=len(inserted)):
                await self._identification_step(process, inserted, counters)

            if await self._paused_meanwhile(process):
                return await self._defer(process)

            self._complete(process, counters)
            await self._processes.update(process)
            plog.step_complete(PipelineStage.COMPLETE, f"Process {process.id} completed")
            plog.stats(
                processed=process.processed_files,
                duplicates=counters.duplicate_records,
                matches=counters.total_matches,
                exceptions=counters.exceptions,
            )
            await self._synchronize(process)
            return process
        except Exception as e:
            plog.step_error(PipelineStage.ERROR, f"Process {process.id} failed", error=e)
            await self._mark_error(process, f"Error during processing: {e}")
            raise

    async def _insertion_step(
        self,
        process: DeduplicationProcess,
        files: list[FileRecord],
        counters: _RunCounters,
    ) -> list[FileRecord]:
        step = process.start_step(INSERTION_STEP)
        # Files settled by an earlier run of this process are not verified or registered again
        inserted = [f for f in files if f.status == FileStatus.INSERTED]
        step.processed_file_ids.extend(f.id for f in inserted)

        for file in files:
            if file.status in (FileStatus.INSERTED, FileStatus.CONFLICT):
                continue
            try:
                conflicting = await self._find_conflicts(process, file, inserted)
                if conflicting:
                    file.status = FileStatus.CONFLICT
                    file.process_status = FileProcessStatus.COMPLETED
                    await self._files.update(file)
                    plog.detail(f"Conflict for {file.file_name}", matched=", ".join(conflicting))
                    continue

                registration = await self._face_client.register_face(
                    person_name_for(file.payload), file.payload
                )
                if not registration.success:
                    raise FaceApiError(registration.message or "Face registration failed", "addface")

                file.status = FileStatus.INSERTED
                file.process_status = FileProcessStatus.PROCESSING
                file.face_id = registration.assigned_id
                file.process_start_date = file.process_start_date or datetime.now(timezone.utc)
                await self._files.update(file)

                step.processed_file_ids.append(file.id)
                inserted.append(file)
                plog.detail(f"Inserted {file.file_name}", face_id=file.face_id)
            except Exception:
                logger.exception("Error inserting file %s", file.file_name)
                await self._exceptions.create_exception(
                    process.id, file.file_name, ["Error during insertion phase"], 0.0
                )
                counters.exceptions += 1

        step.complete()
        return inserted

    async def _find_conflicts(
        self,
        process: DeduplicationProcess,
        file: FileRecord,
        inserted: list[FileRecord],
    ) -> list[str]:
        conflicting: list[str] = []
        for other in inserted:
            result = await self._face_client.verify_against_person(
                file.payload, person_name_for(other.payload)
            )
            if result.is_match and result.confidence > self._conflict_threshold:
                await self._conflicts.create_conflict(
                    process.id, file.file_name, other.file_name, result.confidence
                )
                conflicting.append(other.file_name)
        return conflicting

    async def _identification_step(
        self,
        process: DeduplicationProcess,
        inserted: list[FileRecord],
        counters: _RunCounters,
    ) -> None:
        step = process.start_step(IDENTIFICATION_STEP)

        for file in inserted:
            try:
                result = await self._face_client.identify(file.payload)
                if not result.success:
                    logger.warning(
                        "Identification failed for file %s: %s", file.file_name, result.message
                    )
                    continue

                matches = collapse_matches(result.matches, file.face_id)
                if matches:
                    await self._record_matches(process, file, matches)
                    counters.duplicate_records += 1
                    counters.total_matches += len(matches)
                    counters.exceptions += 1
                step.processed_file_ids.append(file.id)
            except Exception as e:
                logger.exception("Error identifying file %s", file.file_name)
                await self._exceptions.create_exception(
                    process.id,
                    file.file_name,
                    ["Error during identification phase"],
                    0.0,
                    processing_metadata(errorMessage=str(e), errorType=type(e).__name__),
                )
                counters.exceptions += 1

        step.complete()

    async def _record_matches(
        self,
        process: DeduplicationProcess,
        file: FileRecord,
        matches: list[IdentificationMatch],
    ) -> None:
        by_face_id = {
            f.face_id: f
            for f in await self._files.get_by_face_ids([m.person_id for m in matches])
        }
        duplicates = []
        for match in matches:
            owner = by_face_id.get(match.person_id)
            duplicates.append(DuplicateMatch(
                file_id=owner.id if owner else "",
                file_name=owner.file_name if owner else match.name,
                confidence=match.confidence,
                person_id=match.person_id,
            ))

        await self._exceptions.create_exception(
            process.id,
            file.file_name,
            [d.file_name for d in duplicates],
            matches[0].confidence,
            processing_metadata(matchDetails=[
                {
                    "name": d.file_name,
                    "confidence": d.confidence,
                    "personId": d.person_id,
                    "fileId": d.file_id,
                }
                for d in duplicates
            ]),
        )
        await self._duplicates.create_record(process.id, file.id, file.file_name, duplicates)
        plog.detail(f"{file.file_name} has {len(duplicates)} potential duplicates")

    def _complete(self, process: DeduplicationProcess, counters: _RunCounters) -> None:
        now = datetime.now(timezone.utc)
        process.status = ProcessStatus.COMPLETED
        process.process_end_date = now
        process.completed_at = now
        process.current_stage = ProcessStatus.COMPLETED.value
        process.processed_files = len(process.processed_file_ids())
        process.completion_notes = (
            f"Process completed successfully. Processed {process.processed_files} files. "
            f"Found {counters.duplicate_records} duplicate records with "
            f"{counters.total_matches} total matches. "
            f"Created {counters.exceptions} exceptions."
        )

    # ── Helpers ──────────────────────────────────────────────────────

    def _ensure_transition(self, process: DeduplicationProcess, new: ProcessStatus) -> None:
        if not is_valid_transition(process.status, new):
            raise InvalidStatusTransitionError(process.id, process.status.value, new.value)

    async def _paused_meanwhile(self, process: DeduplicationProcess) -> bool:
        latest = await self._processes.get_by_id(process.id)
        return latest is not None and latest.status == ProcessStatus.PAUSED

    async def _defer(self, process: DeduplicationProcess) -> DeduplicationProcess:
        process.status = ProcessStatus.PAUSED
        process.current_stage = ProcessStatus.PAUSED.value
        await self._processes.update(process)
        plog.detail("Process was paused during the run; completion deferred")
        return process

    async def _synchronize(self, process: DeduplicationProcess) -> int:
        updated = await self._sync.synchronize_file_statuses(process.id)
        plog.step_complete(PipelineStage.SYNC, "Files synchronized", status=process.status.value, updated=updated)
        return updated

    async def _mark_error(self, process: DeduplicationProcess, notes: str) -> None:
        """Move a failed process to Error. Failures here are logged so the original error surfaces."""
        if is_terminal(process.status):
            return
        try:
            process.status = ProcessStatus.ERROR
            process.current_stage = ProcessStatus.ERROR.value
            process.completion_notes = notes
            await self._processes.update(process)
            await self._synchronize(process)
        except Exception:
            logger.exception("Failed to mark process %s as Error", process.id)
