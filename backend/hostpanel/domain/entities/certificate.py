"""Domain entity for TLS certificates issued for hosted domains."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from uuid import uuid4


class CertificateMethod(str, Enum):
    LETSENCRYPT = "letsencrypt"
    SELF_SIGNED = "self_signed"


class CertificateStatus(str, Enum):
    PENDING = "pending"
    VALID = "valid"
    EXPIRED = "expired"
    REVOKED = "revoked"
    FAILED = "failed"


ISSUERS = {
    CertificateMethod.LETSENCRYPT: "Let's Encrypt",
    CertificateMethod.SELF_SIGNED: "Self-Signed",
}

VALIDITY = {
    CertificateMethod.LETSENCRYPT: timedelta(days=90),
    CertificateMethod.SELF_SIGNED: timedelta(days=365),
}


@dataclass
class Certificate:
    domain: str
    method: CertificateMethod
    issuer: str = ""
    status: CertificateStatus = CertificateStatus.PENDING
    auto_renew: bool = False
    expires_at: datetime | None = None
    error_message: str | None = None
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if not self.issuer:
            self.issuer = ISSUERS[self.method]

    def issue(self, now: datetime | None = None) -> None:
        """Mark the certificate as issued, valid for the method's lifetime."""
        now = now or datetime.now(timezone.utc)
        self.status = CertificateStatus.VALID
        self.expires_at = now + VALIDITY[self.method]
        self.error_message = None

    def revoke(self) -> None:
        self.status = CertificateStatus.REVOKED
        self.auto_renew = False

    def fail(self, error: str) -> None:
        self.status = CertificateStatus.FAILED
        self.error_message = error

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expires_at is None:
            return False
        now = now or datetime.now(timezone.utc)
        expires_at = self.expires_at
        # SQLite drops tzinfo on round-trip
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return expires_at <= now

    def effective_status(self, now: datetime | None = None) -> CertificateStatus:
        if self.status == CertificateStatus.VALID and self.is_expired(now):
            return CertificateStatus.EXPIRED
        return self.status
