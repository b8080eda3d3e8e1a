"""Concrete repository implementation for duplicate records backed by SQLAlchemy."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from facededup.application.interfaces import DuplicateRecordRepository
from facededup.domain.entities import (
    DuplicatedRecord,
    DuplicateMatch,
    DuplicateRecordStatus,
)
from facededup.domain.exceptions import EntityNotFoundError
from facededup.infrastructure.database.base import as_utc, commit_or_rollback
from facededup.infrastructure.database.models import DuplicatedRecordModel


class SQLAlchemyDuplicateRecordRepository(DuplicateRecordRepository):
    """Implements the DuplicateRecordRepository port using an SQLAlchemy async session."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: DuplicatedRecordModel) -> DuplicatedRecord:
        return DuplicatedRecord(
            id=model.id,
            process_id=model.process_id,
            original_file_id=model.original_file_id,
            original_file_name=model.original_file_name,
            duplicates=[
                DuplicateMatch(
                    file_id=d.get("file_id", ""),
                    file_name=d.get("file_name", ""),
                    confidence=float(d.get("confidence", 0.0)),
                    person_id=d.get("person_id", ""),
                )
                for d in model.duplicates or []
            ],
            status=DuplicateRecordStatus.parse(model.status),
            detected_date=as_utc(model.detected_date),
            confirmation_user=model.confirmation_user,
            confirmation_date=as_utc(model.confirmation_date),
            notes=model.notes,
        )

    @staticmethod
    def _apply(model: DuplicatedRecordModel, entity: DuplicatedRecord) -> None:
        model.process_id = entity.process_id
        model.original_file_id = entity.original_file_id
        model.original_file_name = entity.original_file_name
        model.duplicates = [
            {
                "file_id": d.file_id,
                "file_name": d.file_name,
                "confidence": d.confidence,
                "person_id": d.person_id,
            }
            for d in entity.duplicates
        ]
        model.status = entity.status.value
        model.detected_date = entity.detected_date
        model.confirmation_user = entity.confirmation_user
        model.confirmation_date = entity.confirmation_date
        model.notes = entity.notes

    async def get_by_id(self, record_id: str) -> DuplicatedRecord | None:
        result = await self._session.get(DuplicatedRecordModel, record_id)
        return self._to_entity(result) if result else None

    async def get_by_process_ids(self, process_ids: list[str]) -> list[DuplicatedRecord]:
        if not process_ids:
            return []
        stmt = (
            select(DuplicatedRecordModel)
            .where(DuplicatedRecordModel.process_id.in_(process_ids))
            .order_by(DuplicatedRecordModel.detected_date.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(row) for row in result.scalars().all()]

    async def get_by_status(self, status: DuplicateRecordStatus) -> list[DuplicatedRecord]:
        stmt = (
            select(DuplicatedRecordModel)
            .where(DuplicatedRecordModel.status == status.value)
            .order_by(DuplicatedRecordModel.detected_date.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(row) for row in result.scalars().all()]

    async def get_all(self) -> list[DuplicatedRecord]:
        stmt = select(DuplicatedRecordModel).order_by(DuplicatedRecordModel.detected_date.desc())
        result = await self._session.execute(stmt)
        return [self._to_entity(row) for row in result.scalars().all()]

    async def create(self, record: DuplicatedRecord) -> DuplicatedRecord:
        model = DuplicatedRecordModel(id=record.id)
        self._apply(model, record)
        self._session.add(model)
        await commit_or_rollback(self._session)
        return self._to_entity(model)

    async def update(self, record: DuplicatedRecord) -> DuplicatedRecord:
        model = await self._session.get(DuplicatedRecordModel, record.id)
        if model is None:
            raise EntityNotFoundError("DuplicatedRecord", record.id)
        self._apply(model, record)
        await commit_or_rollback(self._session)
        return self._to_entity(model)
