"""Concrete repository implementation for conflicts backed by SQLAlchemy."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from facededup.application.interfaces import ConflictRepository
from facededup.domain.entities import Conflict, ConflictStatus
from facededup.domain.exceptions import EntityNotFoundError
from facededup.infrastructure.database.base import as_utc, commit_or_rollback
from facededup.infrastructure.database.models import ConflictModel


class SQLAlchemyConflictRepository(ConflictRepository):
    """Implements the ConflictRepository port using an SQLAlchemy async session."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: ConflictModel) -> Conflict:
        return Conflict(
            id=model.id,
            process_id=model.process_id,
            file_name=model.file_name,
            matched_file_name=model.matched_file_name,
            confidence=model.confidence,
            status=ConflictStatus.parse(model.status),
            created_at=as_utc(model.created_at),
            resolved_by=model.resolved_by,
            resolved_at=as_utc(model.resolved_at),
            resolution=model.resolution,
        )

    @staticmethod
    def _apply(model: ConflictModel, entity: Conflict) -> None:
        model.process_id = entity.process_id
        model.file_name = entity.file_name
        model.matched_file_name = entity.matched_file_name
        model.confidence = entity.confidence
        model.status = entity.status.value
        model.created_at = entity.created_at
        model.resolved_by = entity.resolved_by
        model.resolved_at = entity.resolved_at
        model.resolution = entity.resolution

    async def get_by_id(self, conflict_id: str) -> Conflict | None:
        result = await self._session.get(ConflictModel, conflict_id)
        return self._to_entity(result) if result else None

    async def get_by_process_ids(self, process_ids: list[str]) -> list[Conflict]:
        if not process_ids:
            return []
        stmt = (
            select(ConflictModel)
            .where(ConflictModel.process_id.in_(process_ids))
            .order_by(ConflictModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(row) for row in result.scalars().all()]

    async def get_all(self, limit: int = 1000) -> list[Conflict]:
        stmt = select(ConflictModel).order_by(ConflictModel.created_at.desc()).limit(limit)
        result = await self._session.execute(stmt)
        return [self._to_entity(row) for row in result.scalars().all()]

    async def create(self, conflict: Conflict) -> Conflict:
        model = ConflictModel(id=conflict.id)
        self._apply(model, conflict)
        self._session.add(model)
        await commit_or_rollback(self._session)
        return self._to_entity(model)

    async def update(self, conflict: Conflict) -> Conflict:
        model = await self._session.get(ConflictModel, conflict.id)
        if model is None:
            raise EntityNotFoundError("Conflict", conflict.id)
        self._apply(model, conflict)
        await commit_or_rollback(self._session)
        return self._to_entity(model)
