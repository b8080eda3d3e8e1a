"""Unit tests for HttpFaceMatchClient against an httpx.MockTransport."""

import json

import httpx
import pytest

from facededup.domain.exceptions import FaceApiError
from facededup.infrastructure.face_api import HttpFaceMatchClient
from facededup.infrastructure.face_api.http_face_match_client import (
    clean_base64,
    parse_confidence,
)

BASE_URL = "https://face.test"


def _client(handler, **kwargs) -> HttpFaceMatchClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    kwargs.setdefault("retry_base_delay", 0)
    return HttpFaceMatchClient(BASE_URL, http_client=http_client, **kwargs)


class TestParsing:
    @pytest.mark.parametrize(
        "raw, expected",
        [(0.42, 0.42), (1.0, 1.0), (87.5, 0.875), ("93", 0.93), (None, 0.0), ("n/a", 0.0)],
    )
    def test_parse_confidence(self, raw, expected):
        assert parse_confidence(raw) == pytest.approx(expected)

    def test_clean_base64_strips_data_uri(self):
        assert clean_base64("data:image/jpeg;base64,QUJD") == "QUJD"
        assert clean_base64("  QUJD ") == "QUJD"
        assert clean_base64(None) == ""


class TestEndpoints:
    @pytest.mark.asyncio
    async def test_register_face(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            seen["api_key"] = request.headers.get("x-api-key")
            return httpx.Response(200, json={"id": 42, "name": "person_abc", "feature": "..."})

        client = _client(handler, api_key="secret")
        result = await client.register_face("person_abc", "data:image/png;base64,QUJD")

        assert result.success is True
        assert result.assigned_id == "42"
        assert result.name == "person_abc"
        assert seen["path"] == "/personface/addface_64"
        assert seen["body"] == {"id": 0, "user_name": "person_abc", "user_image": "QUJD"}
        assert seen["api_key"] == "secret"

    @pytest.mark.asyncio
    async def test_api_key_header_is_omitted_when_unset(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["headers"] = request.headers
            return httpx.Response(200, json={"id": 1})

        await _client(handler).register_face("p", "QUJD")

        assert "x-api-key" not in seen["headers"]

    @pytest.mark.asyncio
    async def test_verify_same_person(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/personface/verify_64"
            assert json.loads(request.content) == {"person_name": "person_abc", "person_face": "QUJD"}
            return httpx.Response(200, json={
                "verification_result": {
                    "verification_status": 0,
                    "verification_error": "",
                    "similarity": 87.5,
                    "compare_result": "same_person",
                }
            })

        result = await _client(handler).verify_against_person("QUJD", "person_abc")

        assert result.success is True
        assert result.is_match is True
        assert result.confidence == pytest.approx(0.875)
        assert result.message == "Success"
        assert "same_person" in result.raw_response

    @pytest.mark.asyncio
    async def test_verify_reports_api_side_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={
                "verification_result": {
                    "verification_status": 3,
                    "verification_error": "no face detected",
                    "similarity": 0,
                    "compare_result": "different_person",
                }
            })

        result = await _client(handler).verify_against_person("QUJD", "person_abc")

        assert result.success is False
        assert result.is_match is False
        assert result.message == "no face detected"

    @pytest.mark.asyncio
    async def test_verify_without_result_block_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"unexpected": True})

        with pytest.raises(FaceApiError) as exc_info:
            await _client(handler).verify_against_person("QUJD", "person_abc")

        assert exc_info.value.endpoint == "verify"

    @pytest.mark.asyncio
    async def test_identify_parses_candidates(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert json.loads(request.content) == {"search_image": "QUJD", "hit_threshold": 55}
            return httpx.Response(200, json={
                "identification_candidates": [
                    {"name": "person_a", "id": 7, "similarity": 93},
                    {"name": "person_b", "id": "8", "similarity": 0.71},
                    {"name": "orphan", "id": None, "similarity": 99},
                ]
            })

        result = await _client(handler, hit_threshold=55).identify("QUJD")

        assert result.success is True
        assert [(m.person_id, m.confidence, m.name) for m in result.matches] == [
            ("7", pytest.approx(0.93), "person_a"),
            ("8", pytest.approx(0.71), "person_b"),
        ]

    @pytest.mark.asyncio
    async def test_identify_without_candidates(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"identification_candidates": []})

        result = await _client(handler).identify("QUJD")

        assert result.success is True
        assert not result.has_matches


class TestErrors:
    @pytest.mark.asyncio
    async def test_transport_error_is_retried(self):
        attempts = []

        def handler(request: httpx.Request) -> httpx.Response:
            attempts.append(request)
            if len(attempts) == 1:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(200, json={"id": 5})

        result = await _client(handler, max_retries=3).register_face("p", "QUJD")

        assert result.assigned_id == "5"
        assert len(attempts) == 2

    @pytest.mark.asyncio
    async def test_retries_are_bounded(self):
        attempts = []

        def handler(request: httpx.Request) -> httpx.Response:
            attempts.append(request)
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(FaceApiError) as exc_info:
            await _client(handler, max_retries=3).identify("QUJD")

        assert len(attempts) == 3
        assert "after 3 attempts" in str(exc_info.value)
        assert exc_info.value.endpoint == "identify"
        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_http_error_is_not_retried(self):
        attempts = []

        def handler(request: httpx.Request) -> httpx.Response:
            attempts.append(request)
            return httpx.Response(500, text="internal error")

        with pytest.raises(FaceApiError) as exc_info:
            await _client(handler).register_face("p", "QUJD")

        assert len(attempts) == 1
        assert exc_info.value.status_code == 500
        assert exc_info.value.endpoint == "addface"

    @pytest.mark.asyncio
    async def test_malformed_body_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>gateway</html>")

        with pytest.raises(FaceApiError, match="Malformed response body"):
            await _client(handler).identify("QUJD")
