from .domain_models import HostedDomainModel, ManagedDatabaseModel
from .account_models import EmailAccountModel, FTPAccountModel
from .operations_models import BackupModel, CertificateModel, CronJobModel, ApiTokenModel
from .panel_job_models import PanelJobModel

__all__ = [
    "HostedDomainModel",
    "ManagedDatabaseModel",
    "EmailAccountModel",
    "FTPAccountModel",
    "BackupModel",
    "CertificateModel",
    "CronJobModel",
    "ApiTokenModel",
    "PanelJobModel",
]
