"""In-memory fakes of the repository and face-match ports, shared by the unit tests."""

import copy

import pytest

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
from facededup.domain.entities import (
    Conflict,
    DeduplicationProcess,
    DuplicatedRecord,
    DuplicateRecordStatus,
    ExceptionRecord,
    FileRecord,
    IdentificationResult,
    RegisterFaceResult,
    VerificationResult,
)
from facededup.domain.exceptions import EntityNotFoundError, FaceApiError


class _InMemoryStore:
    """Stores deep copies, so unsaved mutations never leak into the store."""

    entity_type = "Entity"

    def __init__(self):
        self.items: dict[str, object] = {}
        self.update_count = 0

    def _load(self, item_id):
        item = self.items.get(item_id)
        return copy.deepcopy(item) if item is not None else None

    def _save(self, item):
        self.items[item.id] = copy.deepcopy(item)
        return copy.deepcopy(item)

    def _replace(self, item):
        if item.id not in self.items:
            raise EntityNotFoundError(self.entity_type, item.id)
        self.update_count += 1
        return self._save(item)

    def _all(self):
        return [copy.deepcopy(i) for i in self.items.values()]


class FakeProcessRepository(_InMemoryStore, ProcessRepository):
    entity_type = "Process"

    async def get_by_id(self, process_id: str) -> DeduplicationProcess | None:
        return self._load(process_id)

    async def get_all(self, limit: int = 1000) -> list[DeduplicationProcess]:
        return self._all()[:limit]

    async def create(self, process: DeduplicationProcess) -> DeduplicationProcess:
        return self._save(process)

    async def update(self, process: DeduplicationProcess) -> DeduplicationProcess:
        return self._replace(process)


class FakeFileRepository(_InMemoryStore, FileRepository):
    entity_type = "File"

    def __init__(self):
        super().__init__()
        self.get_many_calls: list[list[str]] = []
        self.update_many_calls: list[list[str]] = []
        self.fail_on_update: set[str] = set()

    async def get_by_id(self, file_id: str) -> FileRecord | None:
        return self._load(file_id)

    async def get_many(self, file_ids: list[str]) -> list[FileRecord]:
        self.get_many_calls.append(list(file_ids))
        return [self._load(i) for i in file_ids if i in self.items]

    async def get_by_face_ids(self, face_ids: list[str]) -> list[FileRecord]:
        return [f for f in self._all() if f.face_id in face_ids]

    async def create(self, file: FileRecord) -> FileRecord:
        return self._save(file)

    async def update(self, file: FileRecord) -> FileRecord:
        if file.id in self.fail_on_update:
            raise RuntimeError(f"write failed for {file.id}")
        return self._replace(file)

    async def update_many(self, files: list[FileRecord]) -> int:
        self.update_many_calls.append([f.id for f in files])
        for f in files:
            self._save(f)
        return len(files)


class FakeConflictRepository(_InMemoryStore, ConflictRepository):
    entity_type = "Conflict"

    def __init__(self):
        super().__init__()
        self.fail_on_update: set[str] = set()

    async def get_by_id(self, conflict_id: str) -> Conflict | None:
        return self._load(conflict_id)

    async def get_by_process_ids(self, process_ids: list[str]) -> list[Conflict]:
        return [c for c in self._all() if c.process_id in process_ids]

    async def get_all(self, limit: int = 1000) -> list[Conflict]:
        return self._all()[:limit]

    async def create(self, conflict: Conflict) -> Conflict:
        return self._save(conflict)

    async def update(self, conflict: Conflict) -> Conflict:
        if conflict.id in self.fail_on_update:
            raise RuntimeError(f"write failed for {conflict.id}")
        return self._replace(conflict)


class FakeExceptionRecordRepository(_InMemoryStore, ExceptionRecordRepository):
    entity_type = "Exception"

    async def get_by_id(self, exception_id: str) -> ExceptionRecord | None:
        return self._load(exception_id)

    async def get_by_process_ids(self, process_ids: list[str]) -> list[ExceptionRecord]:
        return [r for r in self._all() if r.process_id in process_ids]

    async def get_all(self) -> list[ExceptionRecord]:
        return self._all()

    async def get_by_min_score(self, threshold: float) -> list[ExceptionRecord]:
        matching = [r for r in self._all() if r.comparison_score >= threshold]
        return sorted(matching, key=lambda r: r.comparison_score, reverse=True)

    async def create(self, record: ExceptionRecord) -> ExceptionRecord:
        return self._save(record)

    async def update(self, record: ExceptionRecord) -> ExceptionRecord:
        return self._replace(record)


class FakeDuplicateRecordRepository(_InMemoryStore, DuplicateRecordRepository):
    entity_type = "DuplicatedRecord"

    async def get_by_id(self, record_id: str) -> DuplicatedRecord | None:
        return self._load(record_id)

    async def get_by_process_ids(self, process_ids: list[str]) -> list[DuplicatedRecord]:
        return [r for r in self._all() if r.process_id in process_ids]

    async def get_by_status(self, status: DuplicateRecordStatus) -> list[DuplicatedRecord]:
        return [r for r in self._all() if r.status == status]

    async def get_all(self) -> list[DuplicatedRecord]:
        return self._all()

    async def create(self, record: DuplicatedRecord) -> DuplicatedRecord:
        return self._save(record)

    async def update(self, record: DuplicatedRecord) -> DuplicatedRecord:
        return self._replace(record)


class FakeFaceMatchClient(FaceMatchClient):
    """Scripted face API: no matches unless told otherwise."""

    def __init__(self):
        self.registered: dict[str, str] = {}
        self.verifications: dict[tuple[str, str], VerificationResult] = {}
        self.identifications: dict[str, IdentificationResult] = {}
        self.failing_images: set[str] = set()
        self.calls: list[tuple[str, str]] = []
        self._next_id = 100

    def _check(self, operation: str, image: str) -> None:
        self.calls.append((operation, image))
        if image in self.failing_images:
            raise FaceApiError("simulated outage", operation)

    async def register_face(self, name: str, image: str) -> RegisterFaceResult:
        self._check("addface", image)
        self._next_id += 1
        self.registered[image] = str(self._next_id)
        return RegisterFaceResult(success=True, assigned_id=str(self._next_id), name=name)

    async def verify_against_person(self, image: str, person_name: str) -> VerificationResult:
        self._check("verify", image)
        return self.verifications.get(
            (image, person_name), VerificationResult(success=True, is_match=False, confidence=0.1)
        )

    async def identify(self, image: str) -> IdentificationResult:
        self._check("identify", image)
        return self.identifications.get(image, IdentificationResult(success=True))


@pytest.fixture
def id_normalizer() -> IdNormalizationService:
    return IdNormalizationService()


@pytest.fixture
def process_repo() -> FakeProcessRepository:
    return FakeProcessRepository()


@pytest.fixture
def file_repo() -> FakeFileRepository:
    return FakeFileRepository()


@pytest.fixture
def conflict_repo() -> FakeConflictRepository:
    return FakeConflictRepository()


@pytest.fixture
def exception_repo() -> FakeExceptionRecordRepository:
    return FakeExceptionRecordRepository()


@pytest.fixture
def duplicate_repo() -> FakeDuplicateRecordRepository:
    return FakeDuplicateRecordRepository()


@pytest.fixture
def face_client() -> FakeFaceMatchClient:
    return FakeFaceMatchClient()


@pytest.fixture
def sync_service(process_repo, file_repo, id_normalizer) -> StatusSynchronizationService:
    return StatusSynchronizationService(process_repo, file_repo, id_normalizer)


@pytest.fixture
def conflict_service(conflict_repo, id_normalizer) -> ConflictService:
    return ConflictService(conflict_repo, id_normalizer)


@pytest.fixture
def exception_service(exception_repo, id_normalizer) -> ExceptionService:
    return ExceptionService(exception_repo, id_normalizer)


@pytest.fixture
def duplicate_service(duplicate_repo, id_normalizer) -> DuplicateRecordService:
    return DuplicateRecordService(duplicate_repo, id_normalizer)


@pytest.fixture
def dedup_service(
    process_repo,
    file_repo,
    face_client,
    conflict_service,
    exception_service,
    duplicate_service,
    sync_service,
    id_normalizer,
) -> DeduplicationService:
    return DeduplicationService(
        process_repository=process_repo,
        file_repository=file_repo,
        face_client=face_client,
        conflict_service=conflict_service,
        exception_service=exception_service,
        duplicate_record_service=duplicate_service,
        sync_service=sync_service,
        id_normalizer=id_normalizer,
    )
