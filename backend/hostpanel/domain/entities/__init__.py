from .hosted_domain import HostedDomain, DomainStatus
from .managed_database import ManagedDatabase, DatabaseEngine, DatabaseStatus
from .mail_account import EmailAccount, FTPAccount, AccountStatus
from .backup import Backup, BackupType, BackupStatus
from .certificate import Certificate, CertificateMethod, CertificateStatus
from .cron_job import CronJob, CronStatus
from .api_token import ApiToken
from .panel_job import PanelJob, JobStatus, JobType
from .vps import (
    VPSConnection,
    CommandResult,
    ServiceState,
    ServiceStatus,
    HostedSite,
    ServerDatabase,
)
from .system_metrics import SystemMetrics, CpuMetrics, UsageMetrics, NetworkMetrics
from .installation import InstallationConfig, InstallationStep, ServerType, StepStatus
from .wordpress import WordPressInstallConfig, WordPressInstallResult

__all__ = [
    "HostedDomain",
    "DomainStatus",
    "ManagedDatabase",
    "DatabaseEngine",
    "DatabaseStatus",
    "EmailAccount",
    "FTPAccount",
    "AccountStatus",
    "Backup",
    "BackupType",
    "BackupStatus",
    "Certificate",
    "CertificateMethod",
    "CertificateStatus",
    "CronJob",
    "CronStatus",
    "ApiToken",
    "PanelJob",
    "JobStatus",
    "JobType",
    "VPSConnection",
    "CommandResult",
    "ServiceState",
    "ServiceStatus",
    "HostedSite",
    "ServerDatabase",
    "SystemMetrics",
    "CpuMetrics",
    "UsageMetrics",
    "NetworkMetrics",
    "InstallationConfig",
    "InstallationStep",
    "ServerType",
    "StepStatus",
    "WordPressInstallConfig",
    "WordPressInstallResult",
]
