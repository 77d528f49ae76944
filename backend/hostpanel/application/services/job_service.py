"""Application service for the panel job queue."""

from hostpanel.application.interfaces import PanelJobRepository
from hostpanel.domain.entities import JobStatus, JobType, PanelJob
from hostpanel.domain.exceptions import EntityNotFoundError, ValidationError


class PanelJobService:

    def __init__(self, repository: PanelJobRepository):
        self._repository = repository

    async def enqueue(self, job_type: JobType, target: str, payload: dict | None = None) -> PanelJob:
        job = PanelJob(job_type=job_type, target=target, payload=payload or {})
        return await self._repository.create(job)

    async def get_job(self, job_id: str) -> PanelJob:
        job = await self._repository.get_by_id(job_id)
        if job is None:
            raise EntityNotFoundError("PanelJob", job_id)
        return job

    async def list_jobs(
        self,
        *,
        job_type: JobType | None = None,
        status: JobStatus | None = None,
        limit: int = 200,
    ) -> list[PanelJob]:
        return await self._repository.get_all(job_type=job_type, status=status, limit=limit)

    async def restart_job(self, job_id: str) -> PanelJob:
        """Re-queue a finished job. Queued or running jobs cannot be restarted."""
        job = await self.get_job(job_id)
        if job.status not in (JobStatus.COMPLETED, JobStatus.FAILED):
            raise ValidationError("status", "Only completed or failed jobs can be restarted")
        job.mark_requeued()
        return await self._repository.update(job)

    async def has_active(self, job_type: JobType) -> bool:
        for status in (JobStatus.QUEUED, JobStatus.PROCESSING):
            if await self._repository.get_all(job_type=job_type, status=status, limit=1):
                return True
        return False
