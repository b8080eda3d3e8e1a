"""Abstract interface (port) for the external face-recognition API."""

from abc import ABC, abstractmethod

from facededup.domain.entities import (
    IdentificationResult,
    RegisterFaceResult,
    VerificationResult,
)


class FaceMatchClient(ABC):
    """Port for face registration, verification and identification.

    Images are base64 strings, optionally carrying a ``data:...;base64,`` prefix.
    Implementations raise ``FaceApiError`` when the API cannot be reached or
    answers with an error.
    """

    @abstractmethod
    async def register_face(self, name: str, image: str) -> RegisterFaceResult:
        """Register ``image`` under the person ``name``."""
        ...

    @abstractmethod
    async def verify_against_person(self, image: str, person_name: str) -> VerificationResult:
        """Check whether ``image`` shows the already-registered person ``person_name``."""
        ...

    @abstractmethod
    async def identify(self, image: str) -> IdentificationResult:
        """Search every registered person for matches to ``image``."""
        ...
