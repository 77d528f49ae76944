"""SQLAlchemy ORM model for the panel job queue."""

import uuid

from sqlalchemy import JSON, Column, DateTime, Index, Integer, String, Text, func

from hostpanel.infrastructure.database.base import Base


def _generate_uuid() -> str:
    return str(uuid.uuid4())


class PanelJobModel(Base):
    """A single unit of work in the background processing queue."""

    __tablename__ = "panel_jobs"

    id = Column(String(36), primary_key=True, default=_generate_uuid)
    job_type = Column(String(30), nullable=False, index=True)
    target = Column(String(1000), nullable=False)
    payload = Column(JSON, nullable=False, default=dict)
    status = Column(String(20), nullable=False, default="queued", index=True)
    progress = Column(Integer, nullable=False, default=0)
    progress_message = Column(Text, nullable=True)
    result = Column(JSON, nullable=True)
    error_message = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    started_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("idx_panel_jobs_status_created", "status", "created_at"),
    )
