"""Concrete repository implementation for exception records backed by SQLAlchemy."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from facededup.application.interfaces import ExceptionRecordRepository
from facededup.domain.entities import ExceptionRecord, ExceptionStatus
from facededup.domain.exceptions import EntityNotFoundError
from facededup.infrastructure.database.base import as_utc, commit_or_rollback
from facededup.infrastructure.database.models import ExceptionRecordModel


class SQLAlchemyExceptionRecordRepository(ExceptionRecordRepository):
    """Implements the ExceptionRecordRepository port using an SQLAlchemy async session."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: ExceptionRecordModel) -> ExceptionRecord:
        return ExceptionRecord(
            id=model.id,
            process_id=model.process_id,
            file_name=model.file_name,
            candidate_file_names=list(model.candidate_file_names or []),
            comparison_score=model.comparison_score,
            status=ExceptionStatus.parse(model.status),
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
            metadata=dict(model.extra_metadata or {}),
        )

    @staticmethod
    def _apply(model: ExceptionRecordModel, entity: ExceptionRecord) -> None:
        model.process_id = entity.process_id
        model.file_name = entity.file_name
        model.candidate_file_names = list(entity.candidate_file_names)
        model.comparison_score = entity.comparison_score
        model.status = entity.status.value
        model.created_at = entity.created_at
        model.updated_at = entity.updated_at
        model.extra_metadata = dict(entity.metadata)

    async def get_by_id(self, exception_id: str) -> ExceptionRecord | None:
        result = await self._session.get(ExceptionRecordModel, exception_id)
        return self._to_entity(result) if result else None

    async def get_by_process_ids(self, process_ids: list[str]) -> list[ExceptionRecord]:
        if not process_ids:
            return []
        stmt = (
            select(ExceptionRecordModel)
            .where(ExceptionRecordModel.process_id.in_(process_ids))
            .order_by(ExceptionRecordModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(row) for row in result.scalars().all()]

    async def get_all(self) -> list[ExceptionRecord]:
        stmt = select(ExceptionRecordModel).order_by(ExceptionRecordModel.created_at.desc())
        result = await self._session.execute(stmt)
        return [self._to_entity(row) for row in result.scalars().all()]

    async def get_by_min_score(self, threshold: float) -> list[ExceptionRecord]:
        stmt = (
            select(ExceptionRecordModel)
            .where(ExceptionRecordModel.comparison_score >= threshold)
            .order_by(ExceptionRecordModel.comparison_score.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(row) for row in result.scalars().all()]

    async def create(self, record: ExceptionRecord) -> ExceptionRecord:
        model = ExceptionRecordModel(id=record.id)
        self._apply(model, record)
        self._session.add(model)
        await commit_or_rollback(self._session)
        return self._to_entity(model)

    async def update(self, record: ExceptionRecord) -> ExceptionRecord:
        model = await self._session.get(ExceptionRecordModel, record.id)
        if model is None:
            raise EntityNotFoundError("Exception", record.id)
        self._apply(model, record)
        await commit_or_rollback(self._session)
        return self._to_entity(model)
