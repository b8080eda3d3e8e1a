"""Abstract repository interface (port) for deduplication processes."""

from abc import ABC, abstractmethod

from facededup.domain.entities import DeduplicationProcess


class ProcessRepository(ABC):
    """Port for the ``processes`` collection, implemented in the infrastructure layer."""

    @abstractmethod
    async def get_by_id(self, process_id: str) -> DeduplicationProcess | None:
        """Load a process by its exact ID."""
        ...

    @abstractmethod
    async def get_all(self, limit: int = 1000) -> list[DeduplicationProcess]:
        """Retrieve processes, most recent first."""
        ...

    @abstractmethod
    async def create(self, process: DeduplicationProcess) -> DeduplicationProcess:
        """Persist a new process."""
        ...

    @abstractmethod
    async def update(self, process: DeduplicationProcess) -> DeduplicationProcess:
        """Save changes to an existing process and commit them."""
        ...
