"""Face-match API client: implements the FaceMatchClient port over HTTP.

Talks to the person-face REST API (``/personface/*_64`` endpoints, base64
images in JSON bodies) using httpx. Transport failures are retried with
exponential backoff; HTTP error responses are not.
"""

import asyncio
import logging
from typing import Any

import httpx

from facededup.application.interfaces.face_match_client import FaceMatchClient
from facededup.domain.entities import (
    IdentificationMatch,
    IdentificationResult,
    RegisterFaceResult,
    VerificationResult,
)
from facededup.domain.exceptions import FaceApiError

logger = logging.getLogger(__name__)

SAME_PERSON = "same_person"


def clean_base64(image: str) -> str:
    """Strip a ``data:<mime>;base64,`` prefix if present."""
    image = (image or "").strip()
    if image.startswith("data:") and "," in image:
        return image.split(",", 1)[1]
    return image


def parse_confidence(value: Any) -> float:
    """Parse an API similarity into [0, 1]; percentages are scaled down."""
    try:
        confidence = float(value)
    except (TypeError, ValueError):
        return 0.0
    return confidence / 100.0 if confidence > 1.0 else confidence


class HttpFaceMatchClient(FaceMatchClient):
    """Infrastructure adapter for the face-match API.

    An ``http_client`` can be injected (tests pass one built on
    ``httpx.MockTransport``); otherwise a client is created per call.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout: float = 30.0,
        max_retries: int = 3,
        retry_base_delay: float = 1.0,
        hit_threshold: int = 70,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._max_attempts = max(1, max_retries)
        self._retry_base_delay = retry_base_delay
        self._hit_threshold = hit_threshold
        self._http_client = http_client

    def _get_headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["x-api-key"] = self._api_key
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout)

    async def register_face(self, name: str, image: str) -> RegisterFaceResult:
        logger.info("Registering face for %s", name)
        payload = {"id": 0, "user_name": name, "user_image": clean_base64(image)}
        data, raw = await self._post("/personface/addface_64", payload, "addface")

        assigned = data.get("id")
        return RegisterFaceResult(
            success=True,
            assigned_id=str(assigned) if assigned is not None else None,
            name=data.get("name") or name,
            message="Face registered successfully",
            raw_response=raw,
        )

    async def verify_against_person(self, image: str, person_name: str) -> VerificationResult:
        logger.info("Verifying face against person %s", person_name)
        payload = {"person_name": person_name, "person_face": clean_base64(image)}
        data, raw = await self._post("/personface/verify_64", payload, "verify")

        details = data.get("verification_result")
        if not isinstance(details, dict):
            raise FaceApiError("Invalid response format: missing verification_result", "verify")

        return VerificationResult(
            success=details.get("verification_status", 0) == 0,
            is_match=details.get("compare_result") == SAME_PERSON,
            confidence=parse_confidence(details.get("similarity")),
            message=details.get("verification_error") or "Success",
            raw_response=raw,
        )

    async def identify(self, image: str) -> IdentificationResult:
        payload = {"search_image": clean_base64(image), "hit_threshold": self._hit_threshold}
        data, raw = await self._post("/personface/identify_64", payload, "identify")

        candidates = data.get("identification_candidates") or []
        matches = [
            IdentificationMatch(
                person_id=str(c.get("id")),
                confidence=parse_confidence(c.get("similarity")),
                name=c.get("name") or "",
            )
            for c in candidates
            if isinstance(c, dict) and c.get("id") is not None
        ]
        if matches:
            logger.info("Face identification found %d match(es)", len(matches))
        else:
            logger.info("Face identification did not find any matches")

        return IdentificationResult(
            success=True,
            matches=matches,
            message="Success",
            raw_response=raw,
        )

    async def _post(self, path: str, payload: dict, endpoint: str) -> tuple[dict, str]:
        """POST ``payload`` and return the decoded JSON body and its raw text."""
        url = f"{self._base_url}{path}"
        client = await self._get_client()
        should_close = self._http_client is None

        try:
            response = await self._send_with_retry(client, url, payload, endpoint)

            if not response.is_success:
                logger.warning(
                    "Face API %s returned %d: %s", endpoint, response.status_code, response.text[:200]
                )
                raise FaceApiError(
                    f"HTTP {response.status_code}: {response.text[:200]}",
                    endpoint,
                    response.status_code,
                )

            try:
                data = response.json()
            except ValueError as e:
                raise FaceApiError("Malformed response body", endpoint, response.status_code) from e
            if not isinstance(data, dict):
                raise FaceApiError("Unexpected response body", endpoint, response.status_code)
            return data, response.text

        finally:
            if should_close:
                await client.aclose()

    async def _send_with_retry(
        self, client: httpx.AsyncClient, url: str, payload: dict, endpoint: str
    ) -> httpx.Response:
        attempt = 0
        while True:
            attempt += 1
            try:
                return await client.post(url, headers=self._get_headers(), json=payload)
            except httpx.TransportError as e:
                if attempt >= self._max_attempts:
                    logger.error(
                        "Face API %s failed after %d attempts: %s", endpoint, attempt, e
                    )
                    raise FaceApiError(
                        f"Request failed after {attempt} attempts: {type(e).__name__}: {e}",
                        endpoint,
                    ) from e

                delay = self._retry_base_delay * 2 ** (attempt - 1)
                logger.warning(
                    "Attempt %d/%d for face API %s failed (%s). Retrying in %.2fs",
                    attempt, self._max_attempts, endpoint, type(e).__name__, delay,
                )
                await asyncio.sleep(delay)
