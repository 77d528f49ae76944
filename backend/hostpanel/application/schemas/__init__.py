from .hosting import (
    DomainCreate,
    DomainUpdate,
    DomainResponse,
    DatabaseCreate,
    DatabaseResponse,
)
from .accounts import (
    EmailAccountCreate,
    EmailAccountUpdate,
    EmailAccountResponse,
    FTPAccountCreate,
    FTPAccountUpdate,
    FTPAccountResponse,
)
from .jobs import PanelJobResponse
from .operations import (
    BackupCreate,
    BackupResponse,
    BackupQueuedResponse,
    CertificateCreate,
    CertificateResponse,
    CertificateQueuedResponse,
    CronJobCreate,
    CronJobUpdate,
    CronJobResponse,
    ApiTokenCreate,
    ApiTokenResponse,
    ApiTokenCreatedResponse,
    ApiTokenVerifyRequest,
)
from .server import (
    VPSConnectRequest,
    VPSStatusResponse,
    ExecuteRequest,
    CommandResultResponse,
    ServiceStatusResponse,
    RestartResponse,
    HostedSiteResponse,
    ServerDatabaseResponse,
    SystemMetricsResponse,
    MonitorStartRequest,
    MonitorStatusResponse,
    InstallationStartRequest,
    InstallationStepResponse,
    InstallationStatusResponse,
    WordPressInstallRequest,
)
from .preferences import PreferencesResponse

__all__ = [
    "DomainCreate",
    "DomainUpdate",
    "DomainResponse",
    "DatabaseCreate",
    "DatabaseResponse",
    "EmailAccountCreate",
    "EmailAccountUpdate",
    "EmailAccountResponse",
    "FTPAccountCreate",
    "FTPAccountUpdate",
    "FTPAccountResponse",
    "PanelJobResponse",
    "BackupCreate",
    "BackupResponse",
    "BackupQueuedResponse",
    "CertificateCreate",
    "CertificateResponse",
    "CertificateQueuedResponse",
    "CronJobCreate",
    "CronJobUpdate",
    "CronJobResponse",
    "ApiTokenCreate",
    "ApiTokenResponse",
    "ApiTokenCreatedResponse",
    "ApiTokenVerifyRequest",
    "VPSConnectRequest",
    "VPSStatusResponse",
    "ExecuteRequest",
    "CommandResultResponse",
    "ServiceStatusResponse",
    "RestartResponse",
    "HostedSiteResponse",
    "ServerDatabaseResponse",
    "SystemMetricsResponse",
    "MonitorStartRequest",
    "MonitorStatusResponse",
    "InstallationStartRequest",
    "InstallationStepResponse",
    "InstallationStatusResponse",
    "WordPressInstallRequest",
    "PreferencesResponse",
]
