"""Abstract repository interface (port) for duplicate records."""

from abc import ABC, abstractmethod

from facededup.domain.entities import DuplicatedRecord, DuplicateRecordStatus


class DuplicateRecordRepository(ABC):
    """Port for the ``duplicated_records`` collection, implemented in the infrastructure layer."""

    @abstractmethod
    async def get_by_id(self, record_id: str) -> DuplicatedRecord | None:
        ...

    @abstractmethod
    async def get_by_process_ids(self, process_ids: list[str]) -> list[DuplicatedRecord]:
        ...

    @abstractmethod
    async def get_by_status(self, status: DuplicateRecordStatus) -> list[DuplicatedRecord]:
        ...

    @abstractmethod
    async def get_all(self) -> list[DuplicatedRecord]:
        ...

    @abstractmethod
    async def create(self, record: DuplicatedRecord) -> DuplicatedRecord:
        ...

    @abstractmethod
    async def update(self, record: DuplicatedRecord) -> DuplicatedRecord:
        ...
