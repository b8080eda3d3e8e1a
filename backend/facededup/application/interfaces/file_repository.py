"""Abstract repository interface (port) for uploaded files."""

from abc import ABC, abstractmethod

from facededup.domain.entities import FileRecord


class FileRepository(ABC):
    """Port for the ``files`` collection, implemented in the infrastructure layer."""

    @abstractmethod
    async def get_by_id(self, file_id: str) -> FileRecord | None:
        ...

    @abstractmethod
    async def get_many(self, file_ids: list[str]) -> list[FileRecord]:
        """Load a batch of files by ID. IDs with no stored file are skipped."""
        ...

    @abstractmethod
    async def get_by_face_ids(self, face_ids: list[str]) -> list[FileRecord]:
        """Retrieve files whose registered face identifier is in ``face_ids``."""
        ...

    @abstractmethod
    async def create(self, file: FileRecord) -> FileRecord:
        ...

    @abstractmethod
    async def update(self, file: FileRecord) -> FileRecord:
        """Save changes to a single file and commit them."""
        ...

    @abstractmethod
    async def update_many(self, files: list[FileRecord]) -> int:
        """Save changes to several files in one commit. Returns the number written."""
        ...
