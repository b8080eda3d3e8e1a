"""FastAPI dependency injection: wires infrastructure to the application layer.

Each collection gets its own session (``use_cache=False``), so writes to
different collections are committed independently.
"""

from collections.abc import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from facededup.config import get_settings
from facededup.application.interfaces import (
    ConflictRepository,
    DuplicateRecordRepository,
    ExceptionRecordRepository,
    FaceMatchClient,
    FileRepository,
    ProcessRepository,
)
from facededup.application.services import (
    ConflictService,
    DeduplicationService,
    DuplicateRecordService,
    ExceptionService,
    IdNormalizationService,
    StatusSynchronizationService,
)
from facededup.infrastructure.database.session import get_db_session
from facededup.infrastructure.database.repositories import (
    SQLAlchemyConflictRepository,
    SQLAlchemyDuplicateRecordRepository,
    SQLAlchemyExceptionRecordRepository,
    SQLAlchemyFileRepository,
    SQLAlchemyProcessRepository,
)
from facededup.infrastructure.face_api import HttpFaceMatchClient


# ── Repositories (one session per collection) ───────────────────────

async def get_process_repository(
    session: AsyncSession = Depends(get_db_session, use_cache=False),
) -> ProcessRepository:
    return SQLAlchemyProcessRepository(session)


async def get_file_repository(
    session: AsyncSession = Depends(get_db_session, use_cache=False),
) -> FileRepository:
    return SQLAlchemyFileRepository(session)


async def get_conflict_repository(
    session: AsyncSession = Depends(get_db_session, use_cache=False),
) -> ConflictRepository:
    return SQLAlchemyConflictRepository(session)


async def get_exception_record_repository(
    session: AsyncSession = Depends(get_db_session, use_cache=False),
) -> ExceptionRecordRepository:
    return SQLAlchemyExceptionRecordRepository(session)


async def get_duplicate_record_repository(
    session: AsyncSession = Depends(get_db_session, use_cache=False),
) -> DuplicateRecordRepository:
    return SQLAlchemyDuplicateRecordRepository(session)


# ── Services ────────────────────────────────────────────────────────

def get_id_normalizer() -> IdNormalizationService:
    return IdNormalizationService()


def get_face_match_client() -> FaceMatchClient:
    """Provides the HTTP face-match client configured from settings."""
    settings = get_settings()
    return HttpFaceMatchClient(
        base_url=settings.face_api_base_url,
        api_key=settings.face_api_key,
        timeout=settings.face_api_timeout,
        max_retries=settings.face_api_max_retries,
        retry_base_delay=settings.face_api_retry_base_delay,
        hit_threshold=settings.face_api_hit_threshold,
    )


async def get_conflict_service(
    repository: ConflictRepository = Depends(get_conflict_repository),
    id_normalizer: IdNormalizationService = Depends(get_id_normalizer),
) -> AsyncGenerator[ConflictService, None]:
    yield ConflictService(repository, id_normalizer)


async def get_exception_service(
    repository: ExceptionRecordRepository = Depends(get_exception_record_repository),
    id_normalizer: IdNormalizationService = Depends(get_id_normalizer),
) -> AsyncGenerator[ExceptionService, None]:
    yield ExceptionService(repository, id_normalizer)


async def get_duplicate_record_service(
    repository: DuplicateRecordRepository = Depends(get_duplicate_record_repository),
    id_normalizer: IdNormalizationService = Depends(get_id_normalizer),
) -> AsyncGenerator[DuplicateRecordService, None]:
    yield DuplicateRecordService(repository, id_normalizer)


async def get_status_synchronization_service(
    process_repository: ProcessRepository = Depends(get_process_repository),
    file_repository: FileRepository = Depends(get_file_repository),
    id_normalizer: IdNormalizationService = Depends(get_id_normalizer),
) -> AsyncGenerator[StatusSynchronizationService, None]:
    settings = get_settings()
    yield StatusSynchronizationService(
        process_repository,
        file_repository,
        id_normalizer,
        batch_size=settings.sync_batch_size,
    )


async def get_deduplication_service(
    process_repository: ProcessRepository = Depends(get_process_repository),
    file_repository: FileRepository = Depends(get_file_repository),
    face_client: FaceMatchClient = Depends(get_face_match_client),
    conflict_service: ConflictService = Depends(get_conflict_service),
    exception_service: ExceptionService = Depends(get_exception_service),
    duplicate_record_service: DuplicateRecordService = Depends(get_duplicate_record_service),
    sync_service: StatusSynchronizationService = Depends(get_status_synchronization_service),
    id_normalizer: IdNormalizationService = Depends(get_id_normalizer),
) -> AsyncGenerator[DeduplicationService, None]:
    """Provides a DeduplicationService with every collaborator wired up."""
    settings = get_settings()
    yield DeduplicationService(
        process_repository=process_repository,
        file_repository=file_repository,
        face_client=face_client,
        conflict_service=conflict_service,
        exception_service=exception_service,
        duplicate_record_service=duplicate_record_service,
        sync_service=sync_service,
        id_normalizer=id_normalizer,
        conflict_threshold=settings.conflict_confidence_threshold,
    )
