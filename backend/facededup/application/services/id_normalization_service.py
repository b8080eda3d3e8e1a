"""Canonicalization of collection-prefixed document IDs.

Every stored ID has the form ``<Prefix>/<token>`` where the prefix names the
collection. Clients send IDs in either form, so lookups normalize to the
prefixed form and fall back to the other one when needed.
"""

import logging
import uuid
from enum import Enum

logger = logging.getLogger(__name__)


class DocumentType(str, Enum):
    PROCESS = "process"
    FILE = "file"
    CONFLICT = "conflict"
    EXCEPTION = "exception"
    DUPLICATE_RECORD = "duplicate_record"


DOCUMENT_PREFIXES: dict[DocumentType, str] = {
    DocumentType.PROCESS: "processes/",
    DocumentType.FILE: "Files/",
    DocumentType.CONFLICT: "Conflicts/",
    DocumentType.EXCEPTION: "Exceptions/",
    DocumentType.DUPLICATE_RECORD: "DuplicatedRecords/",
}


class IdNormalizationService:
    """Normalizes IDs to their prefixed form and produces lookup variations.

    Prefix detection is case-insensitive and an ID that already carries a
    prefix is returned as given. None of the methods raise: empty
    IDs and unknown document types pass through unchanged.
    """

    def _prefix_for(self, document_type: DocumentType | str, operation: str) -> str | None:
        try:
            return DOCUMENT_PREFIXES[DocumentType(document_type)]
        except ValueError:
            logger.warning(
                "Unknown document type %r for ID %s", document_type, operation
            )
            return None

    @staticmethod
    def _strip(id_: str, prefix: str) -> str | None:
        """Return ``id_`` without ``prefix``, or None if it does not carry it."""
        if id_[: len(prefix)].casefold() == prefix.casefold():
            return id_[len(prefix):]
        return None

    def normalize(self, id_: str | None, document_type: DocumentType | str) -> str | None:
        """Ensure ``id_`` carries the prefix of ``document_type``."""
        if not id_:
            logger.warning(
                "Attempted to normalize an empty ID for document type %s", document_type
            )
            return id_

        prefix = self._prefix_for(document_type, "normalization")
        if prefix is None:
            return id_

        if self._strip(id_, prefix) is not None:
            return id_

        normalized = f"{prefix}{id_}"
        logger.debug("Normalized %s ID from %s to %s", document_type, id_, normalized)
        return normalized

    def shorten(self, id_: str | None, document_type: DocumentType | str) -> str | None:
        """Strip the prefix of ``document_type`` from ``id_`` if present."""
        if not id_:
            return id_

        prefix = self._prefix_for(document_type, "shortening")
        if prefix is None:
            return id_

        token = self._strip(id_, prefix)
        return token if token is not None else id_

    def variations(self, id_: str | None, document_type: DocumentType | str) -> list[str]:
        """Return the supplied form of ``id_`` followed by the other naming form.

        Empty input yields an empty list; an unknown document type yields ``[id_]``.
        """
        if not id_:
            return []

        prefix = self._prefix_for(document_type, "variations")
        if prefix is None:
            return [id_]

        token = self._strip(id_, prefix)
        if token is None:
            return [id_, f"{prefix}{id_}"]
        return [id_, token]

    def new_id(self, document_type: DocumentType | str) -> str:
        """Generate a fresh ``<Prefix>/<uuid>`` ID."""
        return f"{DOCUMENT_PREFIXES[DocumentType(document_type)]}{uuid.uuid4()}"
