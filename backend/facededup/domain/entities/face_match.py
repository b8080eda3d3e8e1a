"""Value objects returned by the face-match API port."""

from dataclasses import dataclass, field


@dataclass
class VerificationResult:
    success: bool
    is_match: bool = False
    confidence: float = 0.0
    message: str = ""
    raw_response: str = ""


@dataclass
class IdentificationMatch:
    person_id: str
    confidence: float
    name: str = ""


@dataclass
class IdentificationResult:
    success: bool
    matches: list[IdentificationMatch] = field(default_factory=list)
    message: str = ""
    raw_response: str = ""

    @property
    def has_matches(self) -> bool:
        return bool(self.matches)


@dataclass
class RegisterFaceResult:
    success: bool
    assigned_id: str | None = None
    name: str = ""
    message: str = ""
    raw_response: str = ""
