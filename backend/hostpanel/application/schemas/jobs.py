"""Pydantic DTOs for background panel jobs."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from hostpanel.domain.entities import JobStatus, JobType


class PanelJobResponse(BaseModel):
    id: str
    job_type: JobType
    target: str
    status: JobStatus
    progress: int
    progress_message: str | None
    result: dict[str, Any] | None
    error_message: str | None
    created_at: datetime
    started_at: datetime | None
    completed_at: datetime | None

    model_config = {"from_attributes": True}
