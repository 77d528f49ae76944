"""Abstract repository interface (port) for ManagedDatabase persistence."""

from abc import ABC, abstractmethod

from hostpanel.domain.entities import ManagedDatabase


class DatabaseRepository(ABC):

    @abstractmethod
    async def get_by_id(self, database_id: str) -> ManagedDatabase | None:
        ...

    @abstractmethod
    async def get_by_name(self, name: str) -> ManagedDatabase | None:
        ...

    @abstractmethod
    async def get_all(self, skip: int = 0, limit: int = 100) -> list[ManagedDatabase]:
        ...

    @abstractmethod
    async def create(self, database: ManagedDatabase) -> ManagedDatabase:
        ...

    @abstractmethod
    async def delete(self, database_id: str) -> bool:
        ...
