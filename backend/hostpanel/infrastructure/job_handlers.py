"""Handlers the BackgroundProcessor dispatches panel jobs to.

Each handler receives the job, the job's own session and a progress
callback. Entity failure states are committed before raising, because the
processor rolls the session back when a handler raises.
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from hostpanel.application.services import (
    BackupRunner,
    BackupService,
    CertificateService,
    InstallationManager,
    PanelJobService,
    VPSManager,
)
from hostpanel.application.services.background_processor import JobHandler, ProgressCallback
from hostpanel.config import Settings
from hostpanel.domain.entities import (
    BackupStatus,
    CertificateStatus,
    InstallationConfig,
    InstallationStep,
    JobType,
    PanelJob,
    ServerType,
    StepStatus,
    WordPressInstallConfig,
)
from hostpanel.domain.exceptions import VPSNotConnectedError
from hostpanel.infrastructure.database.repositories import (
    SQLAlchemyBackupRepository,
    SQLAlchemyCertificateRepository,
    SQLAlchemyDomainRepository,
    SQLAlchemyPanelJobRepository,
)

logger = logging.getLogger(__name__)

SECRET_PAYLOAD_KEYS = ("db_password", "wp_admin_password")


class JobFailedError(Exception):
    """A handler finished its work but the outcome was a failure."""


def build_job_handlers(
    vps_manager: VPSManager,
    installation_manager: InstallationManager,
    settings: Settings,
) -> dict[JobType, JobHandler]:

    async def run_backup(job: PanelJob, session: AsyncSession, progress: ProgressCallback) -> dict[str, Any]:
        service = BackupService(
            SQLAlchemyBackupRepository(session),
            PanelJobService(SQLAlchemyPanelJobRepository(session)),
        )
        try:
            runner = vps_manager.runner
        except VPSNotConnectedError as exc:
            await service.fail_backup(job.target, str(exc))
            await session.commit()
            raise

        await progress(10, "Creating archive")
        backup = await service.run_backup(
            job.target,
            BackupRunner(runner, settings.backup_dir, settings.web_root),
        )
        await session.commit()
        if backup.status == BackupStatus.FAILED:
            raise JobFailedError(backup.error_message or "Backup failed")
        return {"backup_id": backup.id, "file_path": backup.file_path, "size_bytes": backup.size_bytes}

    async def issue_certificate(job: PanelJob, session: AsyncSession, progress: ProgressCallback) -> dict[str, Any]:
        service = CertificateService(
            SQLAlchemyCertificateRepository(session),
            PanelJobService(SQLAlchemyPanelJobRepository(session)),
            SQLAlchemyDomainRepository(session),
        )
        await progress(10, f"Issuing certificate for {job.payload.get('domain', job.target)}")
        certificate = await service.issue(job.target, vps_manager)
        await session.commit()
        if certificate.status == CertificateStatus.FAILED:
            raise JobFailedError(certificate.error_message or "Certificate issuance failed")
        return {
            "certificate_id": certificate.id,
            "status": certificate.status.value,
            "expires_at": certificate.expires_at.isoformat() if certificate.expires_at else None,
        }

    async def install_wordpress(job: PanelJob, session: AsyncSession, progress: ProgressCallback) -> dict[str, Any]:
        config = WordPressInstallConfig(**job.payload)

        # Credentials are only needed for this run.
        job.payload = {k: v for k, v in job.payload.items() if k not in SECRET_PAYLOAD_KEYS}

        async def on_step(name: str, index: int, total: int) -> None:
            await progress(100 * index / total, name)

        result = await vps_manager.install_wordpress(config, on_step=on_step)
        if not result.success:
            raise JobFailedError(result.error or "WordPress installation failed")
        return result.to_dict(include_password=False)

    async def run_server_setup(job: PanelJob, session: AsyncSession, progress: ProgressCallback) -> dict[str, Any]:
        config = InstallationConfig(
            server_type=ServerType(job.payload.get("server_type", ServerType.FULL.value)),
            domain=job.payload.get("domain"),
            email=job.payload.get("email"),
            features=list(job.payload.get("features", [])),
            applications=list(job.payload.get("applications", [])),
        )

        async def on_progress(steps: list[InstallationStep]) -> None:
            done = sum(1 for s in steps if s.status == StepStatus.COMPLETED)
            current = next((s.name for s in steps if s.status == StepStatus.RUNNING), None)
            await progress(100 * done / len(steps), current or f"{done}/{len(steps)} steps completed")

        runner = vps_manager.runner
        installation_manager.on_progress(on_progress)
        try:
            ok = await installation_manager.start(config, runner)
        finally:
            installation_manager.remove_progress_callback(on_progress)

        steps = installation_manager.steps
        completed = sum(1 for s in steps if s.status == StepStatus.COMPLETED)
        if not ok:
            failed = next((s for s in steps if s.status == StepStatus.FAILED), None)
            if failed is None:
                raise JobFailedError("Server setup failed")
            raise JobFailedError(f"Step {failed.id} failed: {failed.error}")
        return {"completed_steps": completed, "total_steps": len(steps)}

    return {
        JobType.BACKUP: run_backup,
        JobType.CERTIFICATE: issue_certificate,
        JobType.WORDPRESS_INSTALL: install_wordpress,
        JobType.SERVER_SETUP: run_server_setup,
    }
