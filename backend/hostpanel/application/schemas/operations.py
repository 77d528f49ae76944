"""Pydantic DTOs for backups, certificates, cron jobs and API tokens."""

from datetime import datetime

from pydantic import BaseModel, Field

from hostpanel.application.schemas.jobs import PanelJobResponse
from hostpanel.domain.entities import (
    BackupStatus,
    BackupType,
    CertificateMethod,
    CertificateStatus,
    CronStatus,
)


# ── Backups ──────────────────────────────────────────────────────────


class BackupCreate(BaseModel):
    backup_type: BackupType = BackupType.FULL


class BackupResponse(BaseModel):
    id: str
    name: str
    backup_type: BackupType
    status: BackupStatus
    size_bytes: int
    file_path: str | None
    error_message: str | None
    created_at: datetime
    completed_at: datetime | None

    model_config = {"from_attributes": True}


class BackupQueuedResponse(BaseModel):
    """Returned by create: the pending backup and the job that will produce it."""

    backup: BackupResponse
    job: PanelJobResponse


# ── Certificates ─────────────────────────────────────────────────────


class CertificateCreate(BaseModel):
    domain: str = Field(..., min_length=4, max_length=253)
    method: CertificateMethod = CertificateMethod.LETSENCRYPT


class CertificateResponse(BaseModel):
    id: str
    domain: str
    issuer: str
    method: CertificateMethod
    status: CertificateStatus
    auto_renew: bool
    expires_at: datetime | None
    error_message: str | None
    created_at: datetime


class CertificateQueuedResponse(BaseModel):
    certificate: CertificateResponse
    job: PanelJobResponse


# ── Cron jobs ────────────────────────────────────────────────────────


class CronJobCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, examples=["Nightly backup"])
    command: str = Field(..., min_length=1, examples=["/usr/local/bin/backup.sh"])
    schedule: str = Field(..., min_length=1, examples=["0 2 * * *"])


class CronJobUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    command: str | None = Field(None, min_length=1)
    schedule: str | None = Field(None, min_length=1)


class CronJobResponse(BaseModel):
    id: str
    name: str
    command: str
    schedule: str
    status: CronStatus
    last_run: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


# ── API tokens ───────────────────────────────────────────────────────


class ApiTokenCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, examples=["Backup script"])
    permissions: list[str] = Field(default_factory=list, examples=[["backup", "stats"]])


class ApiTokenResponse(BaseModel):
    id: str
    name: str
    token_hint: str
    permissions: list[str]
    created_at: datetime
    last_used: datetime | None

    model_config = {"from_attributes": True}


class ApiTokenCreatedResponse(ApiTokenResponse):
    """Create response: the only time the plaintext token is shown."""

    token: str


class ApiTokenVerifyRequest(BaseModel):
    token: str = Field(..., min_length=1)
    permission: str | None = None
