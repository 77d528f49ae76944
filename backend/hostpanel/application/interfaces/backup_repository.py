"""Abstract repository interface (port) for Backup persistence."""

from abc import ABC, abstractmethod

from hostpanel.domain.entities import Backup


class BackupRepository(ABC):

    @abstractmethod
    async def get_by_id(self, backup_id: str) -> Backup | None:
        ...

    @abstractmethod
    async def get_all(self, skip: int = 0, limit: int = 100) -> list[Backup]:
        """Newest first."""
        ...

    @abstractmethod
    async def create(self, backup: Backup) -> Backup:
        ...

    @abstractmethod
    async def update(self, backup: Backup) -> Backup:
        ...

    @abstractmethod
    async def delete(self, backup_id: str) -> bool:
        ...
