"""Abstract repository interface (port) for exception records."""

from abc import ABC, abstractmethod

from facededup.domain.entities import ExceptionRecord


class ExceptionRecordRepository(ABC):
    """Port for the ``exceptions`` collection, implemented in the infrastructure layer."""

    @abstractmethod
    async def get_by_id(self, exception_id: str) -> ExceptionRecord | None:
        ...

    @abstractmethod
    async def get_by_process_ids(self, process_ids: list[str]) -> list[ExceptionRecord]:
        ...

    @abstractmethod
    async def get_all(self) -> list[ExceptionRecord]:
        ...

    @abstractmethod
    async def get_by_min_score(self, threshold: float) -> list[ExceptionRecord]:
        """Retrieve records scoring at or above ``threshold``, highest score first."""
        ...

    @abstractmethod
    async def create(self, record: ExceptionRecord) -> ExceptionRecord:
        ...

    @abstractmethod
    async def update(self, record: ExceptionRecord) -> ExceptionRecord:
        ...
