"""Domain entity for server backups: archive files produced by a background job."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4


class BackupType(str, Enum):
    FULL = "full"
    DATABASE = "database"
    FILES = "files"


class BackupStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


BACKUP_LABELS = {
    BackupType.FULL: "Full System Backup",
    BackupType.DATABASE: "Database Backup",
    BackupType.FILES: "Files Backup",
}


@dataclass
class Backup:
    """A single backup archive and its lifecycle."""

    name: str
    backup_type: BackupType
    status: BackupStatus = BackupStatus.PENDING
    size_bytes: int = 0
    file_path: str | None = None
    error_message: str | None = None
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: datetime | None = None

    def mark_running(self) -> None:
        self.status = BackupStatus.RUNNING

    def mark_completed(self, file_path: str, size_bytes: int) -> None:
        self.status = BackupStatus.COMPLETED
        self.file_path = file_path
        self.size_bytes = size_bytes
        self.completed_at = datetime.now(timezone.utc)

    def mark_failed(self, error: str) -> None:
        self.status = BackupStatus.FAILED
        self.error_message = error
        self.completed_at = datetime.now(timezone.utc)
