"""Application service (use case) for duplicate records."""

import logging

from facededup.application.interfaces import DuplicateRecordRepository
from facededup.application.services.id_normalization_service import (
    DocumentType,
    IdNormalizationService,
)
from facededup.domain.entities import (
    DuplicatedRecord,
    DuplicateMatch,
    DuplicateRecordStatus,
)
from facededup.domain.exceptions import EntityNotFoundError, InvalidInputError

logger = logging.getLogger(__name__)


class DuplicateRecordService:
    def __init__(
        self,
        repository: DuplicateRecordRepository,
        id_normalizer: IdNormalizationService | None = None,
    ):
        self._repository = repository
        self._ids = id_normalizer or IdNormalizationService()

    async def create_record(
        self,
        process_id: str,
        original_file_id: str,
        original_file_name: str,
        duplicates: list[DuplicateMatch],
    ) -> DuplicatedRecord:
        if not process_id:
            raise InvalidInputError("Process ID cannot be null or empty")
        record = DuplicatedRecord(
            id=self._ids.new_id(DocumentType.DUPLICATE_RECORD),
            process_id=self._ids.normalize(process_id, DocumentType.PROCESS),
            original_file_id=original_file_id,
            original_file_name=original_file_name,
            duplicates=list(duplicates),
        )
        created = await self._repository.create(record)
        logger.info(
            "Created duplicate record %s for %s with %d matches",
            created.id, original_file_name, len(created.duplicates),
        )
        return created

    async def get_record(self, record_id: str) -> DuplicatedRecord:
        """Load a record under its normalized ID, falling back to the ID as given."""
        normalized = self._ids.normalize(record_id, DocumentType.DUPLICATE_RECORD)
        record = await self._repository.get_by_id(normalized)
        if record is None and normalized != record_id:
            record = await self._repository.get_by_id(record_id)
        if record is None:
            raise EntityNotFoundError("DuplicatedRecord", record_id)
        return record

    async def list_all(self) -> list[DuplicatedRecord]:
        return await self._repository.get_all()

    async def list_by_process(self, process_id: str) -> list[DuplicatedRecord]:
        if not process_id:
            raise InvalidInputError("Process ID cannot be null or empty")
        return await self._repository.get_by_process_ids(
            self._ids.variations(process_id, DocumentType.PROCESS)
        )

    async def list_by_status(self, status: DuplicateRecordStatus | str) -> list[DuplicatedRecord]:
        return await self._repository.get_by_status(DuplicateRecordStatus.parse(status))

    async def confirm(
        self, record_id: str, username: str, notes: str | None = None
    ) -> DuplicatedRecord:
        return await self._review(record_id, DuplicateRecordStatus.CONFIRMED, username, notes)

    async def reject(
        self, record_id: str, username: str, notes: str | None = None
    ) -> DuplicatedRecord:
        return await self._review(record_id, DuplicateRecordStatus.REJECTED, username, notes)

    async def _review(
        self,
        record_id: str,
        status: DuplicateRecordStatus,
        username: str,
        notes: str | None,
    ) -> DuplicatedRecord:
        if not record_id:
            raise InvalidInputError("Record ID cannot be null or empty")
        record = await self.get_record(record_id)
        record.review(status, username, notes)
        updated = await self._repository.update(record)
        logger.info("Duplicate record %s marked %s by %s", record.id, status.value, username)
        return updated
