"""Concrete repository implementation for uploaded files backed by SQLAlchemy."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from facededup.application.interfaces import FileRepository
from facededup.domain.entities import FileProcessStatus, FileRecord, FileStatus
from facededup.domain.exceptions import EntityNotFoundError
from facededup.infrastructure.database.base import as_utc, commit_or_rollback
from facededup.infrastructure.database.models import FileModel


class SQLAlchemyFileRepository(FileRepository):
    """Implements the FileRepository port using an SQLAlchemy async session."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: FileModel) -> FileRecord:
        return FileRecord(
            id=model.id,
            file_name=model.file_name,
            payload=model.payload or "",
            status=FileStatus.parse(model.status),
            process_status=FileProcessStatus.parse(model.process_status),
            created_at=as_utc(model.created_at),
            process_start_date=as_utc(model.process_start_date),
            face_id=model.face_id,
            deduplicated=bool(model.deduplicated),
        )

    @staticmethod
    def _apply(model: FileModel, entity: FileRecord) -> None:
        model.file_name = entity.file_name
        model.payload = entity.payload
        model.status = entity.status.value
        model.process_status = entity.process_status.value
        model.created_at = entity.created_at
        model.process_start_date = entity.process_start_date
        model.face_id = entity.face_id
        model.deduplicated = entity.deduplicated

    async def get_by_id(self, file_id: str) -> FileRecord | None:
        result = await self._session.get(FileModel, file_id)
        return self._to_entity(result) if result else None

    async def get_many(self, file_ids: list[str]) -> list[FileRecord]:
        if not file_ids:
            return []
        result = await self._session.execute(
            select(FileModel).where(FileModel.id.in_(file_ids))
        )
        by_id = {m.id: m for m in result.scalars().all()}
        return [self._to_entity(by_id[i]) for i in file_ids if i in by_id]

    async def get_by_face_ids(self, face_ids: list[str]) -> list[FileRecord]:
        if not face_ids:
            return []
        result = await self._session.execute(
            select(FileModel).where(FileModel.face_id.in_(face_ids))
        )
        return [self._to_entity(row) for row in result.scalars().all()]

    async def create(self, file: FileRecord) -> FileRecord:
        model = FileModel(id=file.id)
        self._apply(model, file)
        self._session.add(model)
        await commit_or_rollback(self._session)
        return self._to_entity(model)

    async def update(self, file: FileRecord) -> FileRecord:
        model = await self._session.get(FileModel, file.id)
        if model is None:
            raise EntityNotFoundError("File", file.id)
        self._apply(model, file)
        await commit_or_rollback(self._session)
        return self._to_entity(model)

    async def update_many(self, files: list[FileRecord]) -> int:
        """Write all files in one commit. Files no longer stored are skipped."""
        if not files:
            return 0
        result = await self._session.execute(
            select(FileModel).where(FileModel.id.in_([f.id for f in files]))
        )
        models = {m.id: m for m in result.scalars().all()}
        written = 0
        for file in files:
            model = models.get(file.id)
            if model is None:
                continue
            self._apply(model, file)
            written += 1
        await commit_or_rollback(self._session)
        return written
