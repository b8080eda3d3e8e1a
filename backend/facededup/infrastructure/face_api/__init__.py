"""Face-match API infrastructure package."""

from .http_face_match_client import HttpFaceMatchClient

__all__ = ["HttpFaceMatchClient"]
