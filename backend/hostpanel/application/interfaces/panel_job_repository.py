"""Abstract repository interface (port) for panel jobs."""

from abc import ABC, abstractmethod

from hostpanel.domain.entities.panel_job import JobStatus, JobType, PanelJob


class PanelJobRepository(ABC):
    """Port for panel job persistence: implemented in the infrastructure layer."""

    @abstractmethod
    async def get_by_id(self, job_id: str) -> PanelJob | None:
        """Retrieve a single job by ID."""
        ...

    @abstractmethod
    async def get_all(
        self,
        *,
        job_type: JobType | None = None,
        status: JobStatus | None = None,
        limit: int = 200,
    ) -> list[PanelJob]:
        """Retrieve jobs, most recent first."""
        ...

    @abstractmethod
    async def get_queued(self, limit: int = 10) -> list[PanelJob]:
        """Retrieve queued jobs ordered by creation time (FIFO)."""
        ...

    @abstractmethod
    async def create(self, job: PanelJob) -> PanelJob:
        """Persist a new job and return it with the generated ID."""
        ...

    @abstractmethod
    async def update(self, job: PanelJob) -> PanelJob:
        """Update an existing job."""
        ...
