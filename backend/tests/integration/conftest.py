"""Shared fixtures for integration tests: a throwaway SQLite database per test."""

import itertools
import json

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from facededup.infrastructure.database import Base
from facededup.infrastructure.database import models  # noqa: F401  registers tables
from facededup.infrastructure.face_api import HttpFaceMatchClient


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


class FaceApiStub:
    """Request handler for httpx.MockTransport emulating the person-face API.

    Every face gets a fresh numeric ID, verification never matches, and
    identification returns whatever was scripted in ``candidates`` for an image.
    """

    def __init__(self):
        self._ids = itertools.count(1)
        self.candidates: dict[str, list[dict]] = {}
        self.requests: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        path = request.url.path
        self.requests.append(path)
        if path.endswith("/addface_64"):
            return httpx.Response(200, json={"id": next(self._ids), "name": body["user_name"]})
        if path.endswith("/verify_64"):
            return httpx.Response(200, json={"verification_result": {
                "verification_status": 0,
                "verification_error": "",
                "similarity": 12,
                "compare_result": "different_person",
            }})
        if path.endswith("/identify_64"):
            return httpx.Response(200, json={
                "identification_candidates": self.candidates.get(body["search_image"], [])
            })
        return httpx.Response(404, text="unknown endpoint")


@pytest.fixture
def face_api() -> FaceApiStub:
    return FaceApiStub()


@pytest.fixture
def face_client(face_api) -> HttpFaceMatchClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(face_api))
    return HttpFaceMatchClient("https://face.test", http_client=http_client, retry_base_delay=0)


@pytest_asyncio.fixture
async def api_client(session_factory, face_client):
    """AsyncClient over a fresh app wired to the test database and the stub face API."""
    from facededup.infrastructure.database.session import get_db_session
    from facededup.infrastructure.dependencies import get_face_match_client
    from facededup.main import create_app

    async def override_db_session():
        async with session_factory() as session:
            yield session

    app = create_app()
    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_face_match_client] = lambda: face_client

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
