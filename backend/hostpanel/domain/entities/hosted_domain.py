"""Domain entity: a website domain served by the panel's web server."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from uuid import uuid4

DEFAULT_PHP_VERSION = "8.1"
REGISTRATION_PERIOD = timedelta(days=365)


class DomainStatus(str, Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"
    PENDING = "pending"


@dataclass
class HostedDomain:
    """A domain hosted on the server, with its document root and PHP runtime."""

    name: str
    document_root: str
    php_version: str = DEFAULT_PHP_VERSION
    status: DomainStatus = DomainStatus.ACTIVE
    ssl_enabled: bool = False
    subdomains: list[str] = field(default_factory=lambda: ["www"])
    id: str = field(default_factory=lambda: str(uuid4()))
    expires_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc) + REGISTRATION_PERIOD
    )
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def suspend(self) -> None:
        self.status = DomainStatus.SUSPENDED
        self.updated_at = datetime.now(timezone.utc)

    def activate(self) -> None:
        self.status = DomainStatus.ACTIVE
        self.updated_at = datetime.now(timezone.utc)

    def enable_ssl(self) -> None:
        self.ssl_enabled = True
        self.updated_at = datetime.now(timezone.utc)

    def update(
        self,
        status: DomainStatus | None = None,
        php_version: str | None = None,
        subdomains: list[str] | None = None,
    ) -> None:
        """Update mutable fields and refresh the updated_at timestamp."""
        if status is not None:
            self.status = status
        if php_version is not None:
            self.php_version = php_version
        if subdomains is not None:
            self.subdomains = subdomains
        self.updated_at = datetime.now(timezone.utc)
