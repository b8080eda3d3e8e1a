"""End-to-end API tests: a process run over SQLite with a stubbed face API."""

import pytest

from facededup.domain.entities import FileRecord
from facededup.infrastructure.database.repositories import SQLAlchemyFileRepository


async def _seed_files(session, *names):
    repo = SQLAlchemyFileRepository(session)
    for name in names:
        await repo.create(FileRecord(id=f"Files/{name}", file_name=f"{name}.jpg", payload=f"img-{name}"))


@pytest.mark.asyncio
async def test_create_rejects_empty_file_list(api_client):
    response = await api_client.post("/api/v1/processes", json={"file_ids": []})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_unknown_process_returns_404(api_client):
    response = await api_client.get("/api/v1/processes/processes/ghost")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_full_process_lifecycle(api_client, session, face_api):
    await _seed_files(session, "a", "b")
    # a registers as face 1, b as face 2
    face_api.candidates["img-a"] = [{"name": "person_b", "id": 2, "similarity": 91}]

    created = await api_client.post(
        "/api/v1/processes", json={"file_ids": ["a", "b"], "username": "alice"}
    )
    assert created.status_code == 201
    process = created.json()
    assert process["status"] == "Ready to Start"
    assert process["file_ids"] == ["Files/a", "Files/b"]
    short_id = process["id"].removeprefix("processes/")

    started = await api_client.post(f"/api/v1/processes/{short_id}/start")
    assert started.status_code == 200
    assert started.json()["status"] == "Completed"
    assert started.json()["processed_files"] == 2

    fetched = await api_client.get(f"/api/v1/processes/{process['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["current_stage"] == "Completed"

    records = (await api_client.get(f"/api/v1/duplicate-records/process/{short_id}")).json()
    assert len(records) == 1
    assert records[0]["original_file_id"] == "Files/a"
    assert records[0]["duplicates"][0]["file_id"] == "Files/b"

    record_short_id = records[0]["id"].removeprefix("DuplicatedRecords/")
    confirmed = await api_client.post(
        f"/api/v1/duplicate-records/{record_short_id}/confirm", json={"username": "reviewer"}
    )
    assert confirmed.status_code == 200
    assert confirmed.json()["status"] == "Confirmed"
    by_status = await api_client.get("/api/v1/duplicate-records", params={"status": "confirmed"})
    assert [r["id"] for r in by_status.json()] == [records[0]["id"]]

    stats = (await api_client.get("/api/v1/exceptions/statistics")).json()
    assert stats["total"] == 1
    assert stats["pending"] == 1
    assert stats["high_confidence"] == 1

    restarted = await api_client.post(f"/api/v1/processes/{short_id}/start")
    assert restarted.status_code == 409
    assert restarted.json()["detail"]["current_status"] == "Completed"

    cleaned = await api_client.post(
        f"/api/v1/processes/{short_id}/cleanup", json={"username": "janitor"}
    )
    assert cleaned.status_code == 200
    assert cleaned.json()["status"] == "Cleaned"
    assert cleaned.json()["cleanup_username"] == "janitor"


@pytest.mark.asyncio
async def test_pause_requires_running_process(api_client, session):
    await _seed_files(session, "a")
    process = (await api_client.post("/api/v1/processes", json={"file_ids": ["a"]})).json()

    response = await api_client.post(f"/api/v1/processes/{process['id']}/pause")

    assert response.status_code == 409
    assert response.json()["detail"]["current_status"] == "Ready to Start"


@pytest.mark.asyncio
async def test_fix_and_synchronize(api_client, session):
    await _seed_files(session, "a")
    process = (await api_client.post("/api/v1/processes", json={"file_ids": ["a"]})).json()

    fixed = await api_client.post(f"/api/v1/processes/{process['id']}/fix")
    assert fixed.json() == {"process_id": process["id"], "fixed": True}

    synced = await api_client.post(f"/api/v1/processes/{process['id']}/synchronize")
    assert synced.json() == {"process_id": process["id"], "updated_files": 0}

    missing = await api_client.post("/api/v1/processes/ghost/fix")
    assert missing.json()["fixed"] is False
