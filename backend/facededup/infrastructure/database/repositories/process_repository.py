"""Concrete repository implementation for deduplication processes backed by SQLAlchemy."""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from facededup.application.interfaces import ProcessRepository
from facededup.domain.entities import DeduplicationProcess, ProcessStatus, ProcessStep
from facededup.domain.exceptions import EntityNotFoundError
from facededup.infrastructure.database.base import as_utc, commit_or_rollback
from facededup.infrastructure.database.models import ProcessModel


def _steps_to_json(steps: list[ProcessStep]) -> list[dict]:
    return [
        {
            "name": s.name,
            "status": s.status,
            "started_at": s.started_at.isoformat(),
            "ended_at": s.ended_at.isoformat() if s.ended_at else None,
            "processed_file_ids": list(s.processed_file_ids),
        }
        for s in steps
    ]


def _steps_from_json(raw: list[dict] | None) -> list[ProcessStep]:
    steps = []
    for item in raw or []:
        ended = item.get("ended_at")
        steps.append(ProcessStep(
            name=item.get("name", ""),
            status=item.get("status", "In Progress"),
            started_at=as_utc(datetime.fromisoformat(item["started_at"])),
            ended_at=as_utc(datetime.fromisoformat(ended)) if ended else None,
            processed_file_ids=list(item.get("processed_file_ids") or []),
        ))
    return steps


class SQLAlchemyProcessRepository(ProcessRepository):
    """Implements the ProcessRepository port using an SQLAlchemy async session."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: ProcessModel) -> DeduplicationProcess:
        """Map ORM model → domain entity."""
        return DeduplicationProcess(
            id=model.id,
            name=model.name,
            username=model.username,
            created_by=model.created_by,
            status=ProcessStatus.parse(model.status),
            created_at=as_utc(model.created_at),
            completed_at=as_utc(model.completed_at),
            process_start_date=as_utc(model.process_start_date),
            process_end_date=as_utc(model.process_end_date),
            cleanup_username=model.cleanup_username,
            cleanup_date=as_utc(model.cleanup_date),
            file_ids=list(model.file_ids or []),
            file_count=model.file_count,
            processed_files=model.processed_files,
            current_stage=model.current_stage,
            completion_notes=model.completion_notes,
            steps=_steps_from_json(model.steps),
        )

    @staticmethod
    def _apply(model: ProcessModel, entity: DeduplicationProcess) -> None:
        """Copy entity state onto the ORM model."""
        model.name = entity.name
        model.username = entity.username
        model.created_by = entity.created_by
        model.status = entity.status.value
        model.created_at = entity.created_at
        model.completed_at = entity.completed_at
        model.process_start_date = entity.process_start_date
        model.process_end_date = entity.process_end_date
        model.cleanup_username = entity.cleanup_username
        model.cleanup_date = entity.cleanup_date
        model.file_ids = list(entity.file_ids)
        model.file_count = entity.file_count
        model.processed_files = entity.processed_files
        model.current_stage = entity.current_stage
        model.completion_notes = entity.completion_notes
        model.steps = _steps_to_json(entity.steps)

    async def get_by_id(self, process_id: str) -> DeduplicationProcess | None:
        # Always re-read: another request may have changed the status meanwhile
        result = await self._session.get(ProcessModel, process_id, populate_existing=True)
        return self._to_entity(result) if result else None

    async def get_all(self, limit: int = 1000) -> list[DeduplicationProcess]:
        stmt = select(ProcessModel).order_by(ProcessModel.created_at.desc()).limit(limit)
        result = await self._session.execute(stmt)
        return [self._to_entity(row) for row in result.scalars().all()]

    async def create(self, process: DeduplicationProcess) -> DeduplicationProcess:
        model = ProcessModel(id=process.id)
        self._apply(model, process)
        self._session.add(model)
        await commit_or_rollback(self._session)
        return self._to_entity(model)

    async def update(self, process: DeduplicationProcess) -> DeduplicationProcess:
        model = await self._session.get(ProcessModel, process.id)
        if model is None:
            raise EntityNotFoundError("Process", process.id)
        self._apply(model, process)
        await commit_or_rollback(self._session)
        return self._to_entity(model)
