"""Integration tests for the SQLAlchemy repositories on SQLite."""

from datetime import datetime, timezone

import pytest
from sqlalchemy.exc import IntegrityError

from facededup.domain.entities import (
    Conflict,
    DeduplicationProcess,
    DuplicatedRecord,
    DuplicateMatch,
    DuplicateRecordStatus,
    ExceptionRecord,
    ExceptionStatus,
    FileProcessStatus,
    FileRecord,
    FileStatus,
    ProcessStatus,
)
from facededup.domain.exceptions import EntityNotFoundError
from facededup.infrastructure.database.models import FileModel, ProcessModel
from facededup.infrastructure.database.repositories import (
    SQLAlchemyConflictRepository,
    SQLAlchemyDuplicateRecordRepository,
    SQLAlchemyExceptionRecordRepository,
    SQLAlchemyFileRepository,
    SQLAlchemyProcessRepository,
)


@pytest.mark.asyncio
async def test_process_round_trip_with_steps(session):
    repo = SQLAlchemyProcessRepository(session)
    process = DeduplicationProcess(
        id="processes/p1",
        name="batch",
        username="alice",
        file_ids=["Files/a", "Files/b"],
        file_count=2,
    )
    step = process.start_step("Insertion")
    step.processed_file_ids.append("Files/a")
    step.complete()

    await repo.create(process)
    loaded = await repo.get_by_id("processes/p1")

    assert loaded.status == ProcessStatus.READY_TO_START
    assert loaded.file_ids == ["Files/a", "Files/b"]
    assert loaded.created_at.tzinfo is not None
    (loaded_step,) = loaded.steps
    assert loaded_step.name == "Insertion"
    assert loaded_step.status == "Completed"
    assert loaded_step.processed_file_ids == ["Files/a"]
    assert loaded_step.ended_at is not None


@pytest.mark.asyncio
async def test_process_update_and_missing(session):
    repo = SQLAlchemyProcessRepository(session)
    process = await repo.create(DeduplicationProcess(id="processes/p1", name="batch"))

    process.status = ProcessStatus.PAUSED
    await repo.update(process)

    assert (await repo.get_by_id("processes/p1")).status == ProcessStatus.PAUSED
    assert await repo.get_by_id("processes/ghost") is None
    with pytest.raises(EntityNotFoundError):
        await repo.update(DeduplicationProcess(id="processes/ghost", name="x"))


@pytest.mark.asyncio
async def test_unknown_stored_status_reads_as_default(session):
    session.add(ProcessModel(id="processes/legacy", name="old", status="Archived"))
    session.add(FileModel(id="Files/legacy", file_name="x.jpg", status="???", process_status="Done"))
    await session.commit()

    process = await SQLAlchemyProcessRepository(session).get_by_id("processes/legacy")
    file = await SQLAlchemyFileRepository(session).get_by_id("Files/legacy")

    assert process.status == ProcessStatus.ERROR
    assert file.status == FileStatus.UPLOADED
    assert file.process_status == FileProcessStatus.PENDING


@pytest.mark.asyncio
async def test_process_get_all_newest_first(session):
    repo = SQLAlchemyProcessRepository(session)
    for i, day in enumerate((1, 3, 2)):
        await repo.create(DeduplicationProcess(
            id=f"processes/p{i}", name=f"p{i}",
            created_at=datetime(2026, 1, day, tzinfo=timezone.utc),
        ))

    assert [p.id for p in await repo.get_all()] == ["processes/p1", "processes/p2", "processes/p0"]
    assert len(await repo.get_all(limit=2)) == 2


@pytest.mark.asyncio
async def test_file_batch_operations(session):
    repo = SQLAlchemyFileRepository(session)
    for name in ("a", "b", "c"):
        await repo.create(FileRecord(id=f"Files/{name}", file_name=f"{name}.jpg", face_id=f"face-{name}"))

    files = await repo.get_many(["Files/c", "Files/ghost", "Files/a"])
    assert [f.id for f in files] == ["Files/c", "Files/a"]

    for f in files:
        f.status = FileStatus.INSERTED
        f.process_status = FileProcessStatus.COMPLETED
    ghost = FileRecord(id="Files/ghost", file_name="ghost.jpg")
    assert await repo.update_many(files + [ghost]) == 2

    stored = {f.id: f for f in await repo.get_many(["Files/a", "Files/b", "Files/c"])}
    assert stored["Files/a"].status == FileStatus.INSERTED
    assert stored["Files/b"].status == FileStatus.UPLOADED
    assert [f.id for f in await repo.get_by_face_ids(["face-b"])] == ["Files/b"]
    assert await repo.get_many([]) == []


@pytest.mark.asyncio
async def test_failed_update_leaves_session_usable(session):
    repo = SQLAlchemyFileRepository(session)
    for name in ("a", "b"):
        await repo.create(FileRecord(id=f"Files/{name}", file_name=f"{name}.jpg"))

    broken = await repo.get_by_id("Files/a")
    broken.file_name = None
    with pytest.raises(IntegrityError):
        await repo.update(broken)

    b = await repo.get_by_id("Files/b")
    b.status = FileStatus.DELETED
    await repo.update(b)

    assert (await repo.get_by_id("Files/a")).file_name == "a.jpg"
    assert (await repo.get_by_id("Files/b")).status == FileStatus.DELETED


@pytest.mark.asyncio
async def test_conflict_queries(session):
    repo = SQLAlchemyConflictRepository(session)
    await repo.create(Conflict(id="Conflicts/c1", process_id="processes/p1",
                               file_name="a.jpg", matched_file_name="b.jpg", confidence=0.9))
    await repo.create(Conflict(id="Conflicts/c2", process_id="p1",
                               file_name="c.jpg", matched_file_name="d.jpg", confidence=0.8))

    conflicts = await repo.get_by_process_ids(["p1", "processes/p1"])
    assert {c.id for c in conflicts} == {"Conflicts/c1", "Conflicts/c2"}

    c1 = await repo.get_by_id("Conflicts/c1")
    c1.resolve("Keep both", "alice")
    await repo.update(c1)
    assert (await repo.get_by_id("Conflicts/c1")).resolved_by == "alice"


@pytest.mark.asyncio
async def test_exception_metadata_and_score_order(session):
    repo = SQLAlchemyExceptionRecordRepository(session)
    for i, score in enumerate((0.5, 0.97, 0.85)):
        await repo.create(ExceptionRecord(
            id=f"Exceptions/e{i}", process_id="processes/p1", file_name=f"{i}.jpg",
            candidate_file_names=["x.jpg"], comparison_score=score,
            metadata={"matchDetails": [{"name": "x.jpg", "confidence": score}]},
        ))

    assert [r.comparison_score for r in await repo.get_by_min_score(0.85)] == [0.97, 0.85]

    record = await repo.get_by_id("Exceptions/e0")
    record.update_status(ExceptionStatus.REVIEWED, {"reviewer": "alice"})
    await repo.update(record)

    stored = await repo.get_by_id("Exceptions/e0")
    assert stored.status == ExceptionStatus.REVIEWED
    assert stored.metadata["reviewer"] == "alice"
    assert stored.metadata["matchDetails"][0]["name"] == "x.jpg"


@pytest.mark.asyncio
async def test_duplicate_record_round_trip(session):
    repo = SQLAlchemyDuplicateRecordRepository(session)
    await repo.create(DuplicatedRecord(
        id="DuplicatedRecords/d1",
        process_id="processes/p1",
        original_file_id="Files/a",
        original_file_name="a.jpg",
        duplicates=[DuplicateMatch(file_id="Files/b", file_name="b.jpg", confidence=0.91, person_id="7")],
    ))

    record = await repo.get_by_id("DuplicatedRecords/d1")
    assert record.duplicates == [
        DuplicateMatch(file_id="Files/b", file_name="b.jpg", confidence=0.91, person_id="7")
    ]

    record.review(DuplicateRecordStatus.CONFIRMED, "alice", "same person")
    await repo.update(record)

    confirmed = await repo.get_by_status(DuplicateRecordStatus.CONFIRMED)
    assert [r.id for r in confirmed] == ["DuplicatedRecords/d1"]
    assert confirmed[0].confirmation_user == "alice"
    assert await repo.get_by_status(DuplicateRecordStatus.DETECTED) == []
