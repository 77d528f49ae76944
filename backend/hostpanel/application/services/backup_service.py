"""Application service (use case) for backups."""

import logging
from datetime import datetime, timezone
from pathlib import Path

from hostpanel.application.interfaces import BackupRepository
from hostpanel.application.services.backup_runner import BackupRunner
from hostpanel.application.services.job_service import PanelJobService
from hostpanel.domain.entities import Backup, BackupStatus, BackupType, JobType, PanelJob
from hostpanel.domain.entities.backup import BACKUP_LABELS
from hostpanel.domain.exceptions import EntityNotFoundError

logger = logging.getLogger(__name__)


class BackupService:

    def __init__(self, repository: BackupRepository, jobs: PanelJobService):
        self._repository = repository
        self._jobs = jobs

    async def get_backup(self, backup_id: str) -> Backup:
        backup = await self._repository.get_by_id(backup_id)
        if backup is None:
            raise EntityNotFoundError("Backup", backup_id)
        return backup

    async def list_backups(self, skip: int = 0, limit: int = 100) -> list[Backup]:
        return await self._repository.get_all(skip=skip, limit=limit)

    async def create_backup(self, backup_type: BackupType) -> tuple[Backup, PanelJob]:
        """Store a pending backup and queue the job that will produce it."""
        now = datetime.now(timezone.utc)
        backup = Backup(
            name=f"{BACKUP_LABELS[backup_type]} {now:%Y-%m-%d %H:%M}",
            backup_type=backup_type,
            created_at=now,
        )
        backup = await self._repository.create(backup)
        job = await self._jobs.enqueue(JobType.BACKUP, backup.id, {"backup_type": backup_type.value})
        logger.info("Queued %s backup %s (job %s)", backup_type.value, backup.id, job.id)
        return backup, job

    async def run_backup(self, backup_id: str, runner: BackupRunner) -> Backup:
        """Produce the archive for a pending backup and record the outcome."""
        backup = await self.get_backup(backup_id)
        backup.mark_running()
        await self._repository.update(backup)

        try:
            path, size = await runner.run(backup)
        except Exception as exc:
            backup.mark_failed(str(exc))
            await self._repository.update(backup)
            return backup

        backup.mark_completed(path, size)
        return await self._repository.update(backup)

    async def get_download_path(self, backup_id: str) -> Path:
        backup = await self.get_backup(backup_id)
        if backup.status != BackupStatus.COMPLETED or not backup.file_path:
            raise EntityNotFoundError("BackupArchive", backup_id)
        path = Path(backup.file_path)
        if not path.is_file():
            raise EntityNotFoundError("BackupArchive", backup_id)
        return path

    async def delete_backup(self, backup_id: str) -> bool:
        backup = await self.get_backup(backup_id)
        if backup.file_path:
            path = Path(backup.file_path)
            if path.is_file():
                path.unlink()
                logger.info("Removed backup archive %s", path)
        return await self._repository.delete(backup_id)

    async def fail_backup(self, backup_id: str, error: str) -> Backup:
        backup = await self.get_backup(backup_id)
        backup.mark_failed(error)
        return await self._repository.update(backup)
