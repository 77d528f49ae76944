from .domain_repository import DomainRepository
from .database_repository import DatabaseRepository
from .account_repository import EmailAccountRepository, FTPAccountRepository
from .backup_repository import BackupRepository
from .certificate_repository import CertificateRepository
from .cron_job_repository import CronJobRepository
from .api_token_repository import ApiTokenRepository
from .panel_job_repository import PanelJobRepository
from .command_runner import CommandRunner, TIMEOUT_EXIT_CODE
from .database_admin import DatabaseAdmin
from .password_hasher import PasswordHasher

__all__ = [
    "DomainRepository",
    "DatabaseRepository",
    "EmailAccountRepository",
    "FTPAccountRepository",
    "BackupRepository",
    "CertificateRepository",
    "CronJobRepository",
    "ApiTokenRepository",
    "PanelJobRepository",
    "CommandRunner",
    "TIMEOUT_EXIT_CODE",
    "DatabaseAdmin",
    "PasswordHasher",
]
