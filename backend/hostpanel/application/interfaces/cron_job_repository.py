"""Abstract repository interface (port) for CronJob persistence."""

from abc import ABC, abstractmethod

from hostpanel.domain.entities import CronJob


class CronJobRepository(ABC):

    @abstractmethod
    async def get_by_id(self, job_id: str) -> CronJob | None:
        ...

    @abstractmethod
    async def get_all(self, skip: int = 0, limit: int = 100) -> list[CronJob]:
        """Oldest first, the order lines appear in the rendered crontab."""
        ...

    @abstractmethod
    async def create(self, job: CronJob) -> CronJob:
        ...

    @abstractmethod
    async def update(self, job: CronJob) -> CronJob:
        ...

    @abstractmethod
    async def delete(self, job_id: str) -> bool:
        ...
