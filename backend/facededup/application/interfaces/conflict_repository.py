"""Abstract repository interface (port) for conflicts."""

from abc import ABC, abstractmethod

from facededup.domain.entities import Conflict


class ConflictRepository(ABC):
    """Port for the ``conflicts`` collection, implemented in the infrastructure layer."""

    @abstractmethod
    async def get_by_id(self, conflict_id: str) -> Conflict | None:
        """Load a conflict by its exact ID."""
        ...

    @abstractmethod
    async def get_by_process_ids(self, process_ids: list[str]) -> list[Conflict]:
        """Retrieve conflicts whose process ID is any of the given forms."""
        ...

    @abstractmethod
    async def get_all(self, limit: int = 1000) -> list[Conflict]:
        ...

    @abstractmethod
    async def create(self, conflict: Conflict) -> Conflict:
        ...

    @abstractmethod
    async def update(self, conflict: Conflict) -> Conflict:
        ...
