"""Application service (use case) for conflict handling."""

import logging
from dataclasses import dataclass

from facededup.application.interfaces import ConflictRepository
from facededup.application.services.id_normalization_service import (
    DocumentType,
    IdNormalizationService,
)
from facededup.domain.entities import Conflict, ConflictStatus
from facededup.domain.exceptions import EntityNotFoundError, InvalidInputError

logger = logging.getLogger(__name__)

DEFAULT_AUTO_RESOLVE_THRESHOLD = 0.95
AUTO_RESOLUTION_NOTE = "Auto-resolved due to high confidence match"
AUTO_RESOLVER = "System"


@dataclass
class AutoResolveSummary:
    total: int
    auto_resolved: int
    remaining: int


class ConflictService:
    """Creates, lists and resolves conflicts. Depends on the repository port (DI)."""

    def __init__(
        self,
        repository: ConflictRepository,
        id_normalizer: IdNormalizationService | None = None,
    ):
        self._repository = repository
        self._ids = id_normalizer or IdNormalizationService()

    async def create_conflict(
        self,
        process_id: str,
        file_name: str,
        matched_file_name: str,
        confidence: float,
    ) -> Conflict:
        if not process_id:
            raise InvalidInputError("Process ID cannot be null or empty")
        conflict = Conflict(
            id=self._ids.new_id(DocumentType.CONFLICT),
            process_id=self._ids.normalize(process_id, DocumentType.PROCESS),
            file_name=file_name,
            matched_file_name=matched_file_name,
            confidence=confidence,
        )
        created = await self._repository.create(conflict)
        logger.info(
            "Created conflict %s for process %s (%s vs %s, confidence %.2f)",
            created.id, created.process_id, file_name, matched_file_name, confidence,
        )
        return created

    async def list_by_process(self, process_id: str) -> list[Conflict]:
        """Conflicts of a process, matching the process ID in either naming form."""
        if not process_id:
            raise InvalidInputError("Process ID cannot be null or empty")
        return await self._repository.get_by_process_ids(
            self._ids.variations(process_id, DocumentType.PROCESS)
        )

    async def list_all(self, limit: int = 1000) -> list[Conflict]:
        return await self._repository.get_all(limit=limit)

    async def get_conflict(self, conflict_id: str) -> Conflict:
        conflict = await self._repository.get_by_id(conflict_id)
        if conflict is None:
            raise EntityNotFoundError("Conflict", conflict_id)
        return conflict

    async def resolve_conflict(
        self, conflict_id: str, resolution: str, resolved_by: str
    ) -> Conflict:
        """Resolve the conflict stored under exactly ``conflict_id``.

        Callers holding a short ID retry with the other naming form on
        ``EntityNotFoundError``.
        """
        if not resolution:
            raise InvalidInputError("Resolution cannot be null or empty")
        conflict = await self.get_conflict(conflict_id)
        conflict.resolve(resolution, resolved_by)
        updated = await self._repository.update(conflict)
        logger.info("Resolved conflict %s by %s", conflict_id, resolved_by)
        return updated

    async def auto_resolve(
        self,
        process_id: str,
        threshold: float = DEFAULT_AUTO_RESOLVE_THRESHOLD,
    ) -> AutoResolveSummary:
        """Resolve every unresolved conflict of a process scoring at or above ``threshold``.

        A conflict that fails to resolve is logged and counted as remaining;
        it does not stop the others.
        """
        conflicts = [
            c for c in await self.list_by_process(process_id)
            if c.status == ConflictStatus.UNRESOLVED
        ]

        resolved = 0
        for conflict in conflicts:
            if conflict.confidence < threshold:
                continue
            try:
                conflict.resolve(AUTO_RESOLUTION_NOTE, AUTO_RESOLVER)
                await self._repository.update(conflict)
                resolved += 1
            except Exception:
                logger.exception("Failed to auto-resolve conflict %s", conflict.id)

        summary = AutoResolveSummary(
            total=len(conflicts),
            auto_resolved=resolved,
            remaining=len(conflicts) - resolved,
        )
        logger.info(
            "Auto-resolved %d of %d conflicts for process %s (threshold %.2f)",
            summary.auto_resolved, summary.total, process_id, threshold,
        )
        return summary
