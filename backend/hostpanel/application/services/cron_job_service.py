"""Application service (use case) for scheduled cron jobs."""

from hostpanel.application.interfaces import CronJobRepository
from hostpanel.application.schemas.operations import CronJobCreate, CronJobUpdate
from hostpanel.domain.entities import CronJob, CronStatus
from hostpanel.domain.exceptions import EntityNotFoundError, ValidationError
from hostpanel.domain.validators import ensure_cron_schedule


def _clean_command(command: str) -> str:
    command = command.strip()
    if not command or "\n" in command:
        raise ValidationError("command", "Command must be a single non-empty line")
    return command


class CronJobService:

    def __init__(self, repository: CronJobRepository):
        self._repository = repository

    async def get_job(self, job_id: str) -> CronJob:
        job = await self._repository.get_by_id(job_id)
        if job is None:
            raise EntityNotFoundError("CronJob", job_id)
        return job

    async def list_jobs(self, skip: int = 0, limit: int = 100) -> list[CronJob]:
        return await self._repository.get_all(skip=skip, limit=limit)

    async def create_job(self, data: CronJobCreate) -> CronJob:
        job = CronJob(
            name=data.name.strip(),
            command=_clean_command(data.command),
            schedule=ensure_cron_schedule(data.schedule),
        )
        return await self._repository.create(job)

    async def update_job(self, job_id: str, data: CronJobUpdate) -> CronJob:
        job = await self.get_job(job_id)
        job.update(
            name=data.name.strip() if data.name is not None else None,
            command=_clean_command(data.command) if data.command is not None else None,
            schedule=ensure_cron_schedule(data.schedule) if data.schedule is not None else None,
        )
        return await self._repository.update(job)

    async def pause_job(self, job_id: str) -> CronJob:
        job = await self.get_job(job_id)
        job.pause()
        return await self._repository.update(job)

    async def resume_job(self, job_id: str) -> CronJob:
        job = await self.get_job(job_id)
        job.resume()
        return await self._repository.update(job)

    async def delete_job(self, job_id: str) -> bool:
        await self.get_job(job_id)
        return await self._repository.delete(job_id)

    async def render_crontab(self) -> str:
        """Active jobs as crontab text, each line preceded by a ``# name`` comment."""
        lines: list[str] = []
        for job in await self._repository.get_all(skip=0, limit=10_000):
            if job.status != CronStatus.ACTIVE:
                continue
            lines.append(f"# {job.name}")
            lines.append(job.to_crontab_line())
        return "\n".join(lines) + ("\n" if lines else "")
