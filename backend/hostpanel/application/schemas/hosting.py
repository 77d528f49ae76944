"""Pydantic DTOs for domains and databases."""

from datetime import datetime

from pydantic import BaseModel, Field

from hostpanel.domain.entities import DatabaseEngine, DatabaseStatus, DomainStatus


class DomainCreate(BaseModel):
    """Schema for adding a hosted domain."""

    name: str = Field(..., min_length=4, max_length=253, examples=["example.com"])
    document_root: str | None = Field(None, max_length=500)
    php_version: str | None = Field(None, pattern=r"^\d+\.\d+$", examples=["8.1"])


class DomainUpdate(BaseModel):
    """Schema for updating a domain: all fields optional."""

    status: DomainStatus | None = None
    php_version: str | None = Field(None, pattern=r"^\d+\.\d+$")
    subdomains: list[str] | None = None


class DomainResponse(BaseModel):
    id: str
    name: str
    status: DomainStatus
    document_root: str
    php_version: str
    ssl_enabled: bool
    subdomains: list[str]
    expires_at: datetime
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class DatabaseCreate(BaseModel):
    """Schema for creating a database; ``password`` is only used for server provisioning."""

    name: str = Field(..., min_length=1, max_length=64, examples=["wp_site"])
    engine: DatabaseEngine = DatabaseEngine.MYSQL
    charset: str = "utf8mb4"
    collation: str = "utf8mb4_unicode_ci"
    users: list[str] = Field(default_factory=list)
    password: str | None = Field(None, min_length=8)


class DatabaseResponse(BaseModel):
    id: str
    name: str
    engine: DatabaseEngine
    charset: str
    collation: str
    size_mb: float
    table_count: int
    users: list[str]
    status: DatabaseStatus
    created_at: datetime

    model_config = {"from_attributes": True}
