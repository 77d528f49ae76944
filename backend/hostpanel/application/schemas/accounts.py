"""Pydantic DTOs for email and FTP accounts. Passwords are write-only."""

from datetime import datetime

from pydantic import BaseModel, Field

from hostpanel.domain.entities import AccountStatus


class EmailAccountCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=64, examples=["info"])
    domain: str = Field(..., min_length=4, max_length=253, examples=["example.com"])
    password: str = Field(..., min_length=1)
    quota_mb: int = Field(500, gt=0)


class EmailAccountUpdate(BaseModel):
    """All fields optional; send ``forwarding_to: null`` to clear forwarding."""

    quota_mb: int | None = Field(None, gt=0)
    forwarding_to: str | None = None
    status: AccountStatus | None = None


class EmailAccountResponse(BaseModel):
    id: str
    username: str
    domain: str
    address: str
    quota_mb: int
    used_mb: float
    status: AccountStatus
    forwarding: bool
    forwarding_to: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class FTPAccountCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1)
    directory: str = "/public_html"
    quota_mb: int = Field(1024, gt=0)


class FTPAccountUpdate(BaseModel):
    directory: str | None = None
    quota_mb: int | None = Field(None, gt=0)
    status: AccountStatus | None = None
    password: str | None = Field(None, min_length=1)


class FTPAccountResponse(BaseModel):
    id: str
    username: str
    directory: str
    quota_mb: int
    used_mb: float
    status: AccountStatus
    last_login: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
