from .domain_repository import SQLAlchemyDomainRepository
from .database_repository import SQLAlchemyDatabaseRepository
from .account_repository import SQLAlchemyEmailAccountRepository, SQLAlchemyFTPAccountRepository
from .operations_repository import (
    SQLAlchemyApiTokenRepository,
    SQLAlchemyBackupRepository,
    SQLAlchemyCertificateRepository,
    SQLAlchemyCronJobRepository,
)
from .panel_job_repository import SQLAlchemyPanelJobRepository

__all__ = [
    "SQLAlchemyDomainRepository",
    "SQLAlchemyDatabaseRepository",
    "SQLAlchemyEmailAccountRepository",
    "SQLAlchemyFTPAccountRepository",
    "SQLAlchemyBackupRepository",
    "SQLAlchemyCertificateRepository",
    "SQLAlchemyCronJobRepository",
    "SQLAlchemyApiTokenRepository",
    "SQLAlchemyPanelJobRepository",
]
