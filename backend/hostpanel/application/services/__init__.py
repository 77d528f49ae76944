from .domain_service import DomainService
from .database_service import DatabaseService
from .email_account_service import EmailAccountService
from .ftp_account_service import FTPAccountService
from .backup_service import BackupService
from .backup_runner import BackupRunner
from .certificate_service import CertificateService
from .cron_job_service import CronJobService
from .api_token_service import ApiTokenService
from .job_service import PanelJobService
from .preferences_service import PreferencesService
from .vps_manager import VPSManager
from .wordpress_installer import WordPressInstaller
from .installation_manager import InstallationManager
from .system_monitor import SystemMonitor
from .background_processor import BackgroundProcessor
from .sse_manager import SSEManager

__all__ = [
    "DomainService",
    "DatabaseService",
    "EmailAccountService",
    "FTPAccountService",
    "BackupService",
    "BackupRunner",
    "CertificateService",
    "CronJobService",
    "ApiTokenService",
    "PanelJobService",
    "PreferencesService",
    "VPSManager",
    "WordPressInstaller",
    "InstallationManager",
    "SystemMonitor",
    "BackgroundProcessor",
    "SSEManager",
]
