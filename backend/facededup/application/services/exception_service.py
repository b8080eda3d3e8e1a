"""Application service (use case) for exception records."""

import logging
from datetime import datetime, timezone
from typing import Any

from facededup.application.interfaces import ExceptionRecordRepository
from facededup.application.services.id_normalization_service import (
    DocumentType,
    IdNormalizationService,
)
from facededup.domain.entities import ExceptionRecord, ExceptionStatus
from facededup.domain.exceptions import EntityNotFoundError, InvalidInputError

logger = logging.getLogger(__name__)

HIGH_CONFIDENCE = 0.9
MEDIUM_CONFIDENCE = 0.8


class ExceptionService:
    """Records comparisons the pipeline could not decide and tracks their review."""

    def __init__(
        self,
        repository: ExceptionRecordRepository,
        id_normalizer: IdNormalizationService | None = None,
    ):
        self._repository = repository
        self._ids = id_normalizer or IdNormalizationService()

    async def create_exception(
        self,
        process_id: str,
        file_name: str,
        candidate_file_names: list[str],
        comparison_score: float,
        metadata: dict[str, Any] | None = None,
    ) -> ExceptionRecord:
        if not process_id:
            raise InvalidInputError("Process ID cannot be null or empty")
        if not file_name:
            raise InvalidInputError("File name cannot be null or empty")
        if candidate_file_names is None:
            raise InvalidInputError("Candidate file names are required")

        record = ExceptionRecord(
            id=self._ids.new_id(DocumentType.EXCEPTION),
            process_id=self._ids.normalize(process_id, DocumentType.PROCESS),
            file_name=file_name,
            candidate_file_names=list(candidate_file_names),
            comparison_score=comparison_score,
            metadata=dict(metadata or {}),
        )
        created = await self._repository.create(record)
        logger.info(
            "Created exception %s for file %s in process %s",
            created.id, file_name, created.process_id,
        )
        return created

    async def list_by_process(self, process_id: str) -> list[ExceptionRecord]:
        if not process_id:
            raise InvalidInputError("Process ID cannot be null or empty")
        return await self._repository.get_by_process_ids(
            self._ids.variations(process_id, DocumentType.PROCESS)
        )

    async def list_all(self) -> list[ExceptionRecord]:
        return await self._repository.get_all()

    async def update_status(
        self,
        exception_id: str,
        status: ExceptionStatus | str | None,
        additional_metadata: dict[str, Any] | None = None,
    ) -> ExceptionRecord:
        """Set a record's status, merging ``additional_metadata`` into its metadata.

        The record is looked up under its normalized ID first, then under
        the ID as given.
        """
        if not exception_id:
            raise InvalidInputError("Exception ID cannot be null or empty")
        if not status:
            raise InvalidInputError("Status is required")

        record = await self._find(exception_id)
        record.update_status(ExceptionStatus.parse(status), additional_metadata)
        updated = await self._repository.update(record)
        logger.info("Updated exception %s to status %s", record.id, record.status.value)
        return updated

    async def by_score_threshold(self, min_score: float) -> list[ExceptionRecord]:
        """Records scoring at or above ``min_score``, best first."""
        return await self._repository.get_by_min_score(min_score)

    async def statistics(self) -> dict[str, int]:
        records = await self._repository.get_all()
        stats = {
            "total": len(records),
            **{status.name.lower(): 0 for status in ExceptionStatus},
            "high_confidence": 0,
            "medium_confidence": 0,
            "low_confidence": 0,
        }
        for record in records:
            stats[ExceptionStatus.parse(record.status).name.lower()] += 1
            if record.comparison_score >= HIGH_CONFIDENCE:
                stats["high_confidence"] += 1
            elif record.comparison_score >= MEDIUM_CONFIDENCE:
                stats["medium_confidence"] += 1
            else:
                stats["low_confidence"] += 1
        return stats

    async def _find(self, exception_id: str) -> ExceptionRecord:
        normalized = self._ids.normalize(exception_id, DocumentType.EXCEPTION)
        record = await self._repository.get_by_id(normalized)
        if record is None and normalized != exception_id:
            record = await self._repository.get_by_id(exception_id)
        if record is None:
            raise EntityNotFoundError("Exception", exception_id)
        return record


def processing_metadata(**values: Any) -> dict[str, Any]:
    """Build an exception metadata map stamped with the processing date."""
    return {**values, "processingDate": datetime.now(timezone.utc).isoformat()}
