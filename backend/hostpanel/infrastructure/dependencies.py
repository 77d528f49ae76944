"""FastAPI dependency injection: wires infrastructure to application layer."""

from collections.abc import AsyncGenerator
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hostpanel.application.interfaces import PasswordHasher
from hostpanel.application.services import (
    ApiTokenService,
    BackupService,
    CertificateService,
    CronJobService,
    DatabaseService,
    DomainService,
    EmailAccountService,
    FTPAccountService,
    InstallationManager,
    PanelJobService,
    PreferencesService,
    SSEManager,
    SystemMonitor,
    VPSManager,
)
from hostpanel.config import get_settings
from hostpanel.infrastructure.database.repositories import (
    SQLAlchemyApiTokenRepository,
    SQLAlchemyBackupRepository,
    SQLAlchemyCertificateRepository,
    SQLAlchemyCronJobRepository,
    SQLAlchemyDatabaseRepository,
    SQLAlchemyDomainRepository,
    SQLAlchemyEmailAccountRepository,
    SQLAlchemyFTPAccountRepository,
    SQLAlchemyPanelJobRepository,
)
from hostpanel.infrastructure.database.session import get_db_session
from hostpanel.infrastructure.installer_factory import build_wordpress_installer
from hostpanel.infrastructure.runners import create_runner
from hostpanel.infrastructure.security import PasslibPasswordHasher


# ── Process-wide singletons ──────────────────────────────────────────


@lru_cache
def get_sse_manager() -> SSEManager:
    return SSEManager()


@lru_cache
def get_vps_manager() -> VPSManager:
    """The single VPS connection holder for this process."""
    settings = get_settings()
    return VPSManager(
        runner_factory=lambda connection: create_runner(connection, settings),
        command_timeout=settings.command_timeout,
        nginx_sites_enabled=settings.nginx_sites_enabled,
        installer_factory=build_wordpress_installer,
    )


@lru_cache
def get_system_monitor() -> SystemMonitor:
    settings = get_settings()
    return SystemMonitor(get_vps_manager(), interval=settings.monitor_interval, sse_manager=get_sse_manager())


async def _enable_live_monitoring() -> str:
    await get_system_monitor().start()
    return "VPS integration configured successfully. Live monitoring enabled."


@lru_cache
def get_installation_manager() -> InstallationManager:
    settings = get_settings()
    return InstallationManager(
        step_timeout=max(settings.command_timeout, 1800),
        web_root=settings.web_root,
        wordpress_download_url=settings.wordpress_download_url,
        integration_hook=_enable_live_monitoring,
    )


@lru_cache
def get_preferences_service() -> PreferencesService:
    return PreferencesService(get_settings().preferences_file)


@lru_cache
def get_password_hasher() -> PasswordHasher:
    return PasslibPasswordHasher()


# ── Per-request services ─────────────────────────────────────────────


async def get_domain_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[DomainService, None]:
    """Provides a DomainService instance with its repository wired up."""
    yield DomainService(SQLAlchemyDomainRepository(session), web_root=get_settings().web_root)


async def get_database_service(
    session: AsyncSession = Depends(get_db_session),
    vps_manager: VPSManager = Depends(get_vps_manager),
) -> AsyncGenerator[DatabaseService, None]:
    """Provides a DatabaseService that provisions through the connected server."""
    yield DatabaseService(SQLAlchemyDatabaseRepository(session), vps_manager)


async def get_email_account_service(
    session: AsyncSession = Depends(get_db_session),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> AsyncGenerator[EmailAccountService, None]:
    yield EmailAccountService(SQLAlchemyEmailAccountRepository(session), hasher)


async def get_ftp_account_service(
    session: AsyncSession = Depends(get_db_session),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> AsyncGenerator[FTPAccountService, None]:
    yield FTPAccountService(SQLAlchemyFTPAccountRepository(session), hasher)


async def get_job_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[PanelJobService, None]:
    yield PanelJobService(SQLAlchemyPanelJobRepository(session))


async def get_backup_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[BackupService, None]:
    """Provides a BackupService that queues its work on the panel job table."""
    jobs = PanelJobService(SQLAlchemyPanelJobRepository(session))
    yield BackupService(SQLAlchemyBackupRepository(session), jobs)


async def get_certificate_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[CertificateService, None]:
    jobs = PanelJobService(SQLAlchemyPanelJobRepository(session))
    yield CertificateService(
        SQLAlchemyCertificateRepository(session),
        jobs,
        SQLAlchemyDomainRepository(session),
    )


async def get_cron_job_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[CronJobService, None]:
    yield CronJobService(SQLAlchemyCronJobRepository(session))


async def get_api_token_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[ApiTokenService, None]:
    yield ApiTokenService(SQLAlchemyApiTokenRepository(session))
