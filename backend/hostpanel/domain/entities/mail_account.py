"""Domain entities for mailbox and FTP login accounts."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4


class AccountStatus(str, Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"


@dataclass
class EmailAccount:
    """A mailbox ``username@domain`` with a storage quota.

    Only the password hash is kept; the plaintext never leaves the service.
    """

    username: str
    domain: str
    password_hash: str
    quota_mb: int = 500
    used_mb: float = 0.0
    status: AccountStatus = AccountStatus.ACTIVE
    forwarding_to: str | None = None
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def address(self) -> str:
        return f"{self.username}@{self.domain}"

    @property
    def forwarding(self) -> bool:
        return self.forwarding_to is not None

    def update(
        self,
        quota_mb: int | None = None,
        forwarding_to: str | None = ...,  # type: ignore[assignment]
        status: AccountStatus | None = None,
    ) -> None:
        """Update mutable fields and refresh the updated_at timestamp."""
        if quota_mb is not None:
            self.quota_mb = quota_mb
        if forwarding_to is not ...:
            self.forwarding_to = forwarding_to
        if status is not None:
            self.status = status
        self.updated_at = datetime.now(timezone.utc)


@dataclass
class FTPAccount:
    """An FTP login jailed to a directory below the web root."""

    username: str
    password_hash: str
    directory: str = "/public_html"
    quota_mb: int = 1024
    used_mb: float = 0.0
    status: AccountStatus = AccountStatus.ACTIVE
    last_login: datetime | None = None
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def update(
        self,
        directory: str | None = None,
        quota_mb: int | None = None,
        status: AccountStatus | None = None,
        password_hash: str | None = None,
    ) -> None:
        if directory is not None:
            self.directory = directory
        if quota_mb is not None:
            self.quota_mb = quota_mb
        if status is not None:
            self.status = status
        if password_hash is not None:
            self.password_hash = password_hash
        self.updated_at = datetime.now(timezone.utc)
