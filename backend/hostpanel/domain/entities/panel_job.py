"""Domain entity for panel jobs: database-backed queue of long-running server work."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class JobStatus(str, Enum):
    """Lifecycle states of a panel job."""

    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class JobType(str, Enum):
    """Kinds of work the background processor knows how to run."""

    BACKUP = "backup"
    CERTIFICATE = "certificate"
    WORDPRESS_INSTALL = "wordpress_install"
    SERVER_SETUP = "server_setup"


@dataclass
class PanelJob:
    """A single unit of work in the background queue.

    ``target`` names what the job acts on (a backup id, a domain, ...) and
    ``payload`` carries the job-type-specific parameters.
    """

    job_type: JobType
    target: str
    payload: dict[str, Any] = field(default_factory=dict)
    id: str | None = None
    status: JobStatus = JobStatus.QUEUED
    progress: int = 0
    progress_message: str | None = None
    result: dict[str, Any] | None = None
    error_message: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    started_at: datetime | None = None
    completed_at: datetime | None = None

    def mark_processing(self, message: str = "Processing started") -> None:
        """Transition to processing state."""
        self.status = JobStatus.PROCESSING
        self.started_at = datetime.now(timezone.utc)
        self.progress = 0
        self.progress_message = message

    def update_progress(self, progress: int | float, message: str | None = None) -> None:
        self.progress = max(0, min(100, int(progress)))
        if message is not None:
            self.progress_message = message

    def mark_completed(self, result: dict[str, Any] | None = None) -> None:
        """Transition to completed state with the handler's result."""
        self.status = JobStatus.COMPLETED
        self.result = result or {}
        self.progress = 100
        self.completed_at = datetime.now(timezone.utc)
        self.progress_message = "Completed"

    def mark_failed(self, error: str) -> None:
        """Transition to failed state."""
        self.status = JobStatus.FAILED
        self.error_message = error
        self.completed_at = datetime.now(timezone.utc)
        self.progress_message = f"Failed: {error[:100]}"

    def mark_requeued(self) -> None:
        """Reset the job to queued state for another run."""
        self.status = JobStatus.QUEUED
        self.progress = 0
        self.progress_message = "Re-queued"
        self.error_message = None
        self.result = None
        self.started_at = None
        self.completed_at = None
