"""SQLAlchemy ORM models for hosted domains and their databases."""

from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, DateTime, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from hostpanel.infrastructure.database.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HostedDomainModel(Base):
    """ORM model: maps to the 'hosted_domains' table."""

    __tablename__ = "hosted_domains"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(253), nullable=False, unique=True, index=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    document_root: Mapped[str] = mapped_column(String(1024), nullable=False)
    php_version: Mapped[str] = mapped_column(String(10), nullable=False, default="8.1")
    ssl_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    subdomains: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<HostedDomainModel(id={self.id}, name='{self.name}', status='{self.status}')>"


class ManagedDatabaseModel(Base):
    """ORM model: maps to the 'managed_databases' table."""

    __tablename__ = "managed_databases"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    engine: Mapped[str] = mapped_column(String(20), nullable=False, default="mysql")
    charset: Mapped[str] = mapped_column(String(32), nullable=False, default="utf8mb4")
    collation: Mapped[str] = mapped_column(String(64), nullable=False, default="utf8mb4_unicode_ci")
    size_mb: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    table_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    users: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="online")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )
