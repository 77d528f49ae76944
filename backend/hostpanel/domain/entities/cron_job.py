"""Domain entity: a scheduled command in the panel user's crontab."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4


class CronStatus(str, Enum):
    ACTIVE = "active"
    PAUSED = "paused"


@dataclass
class CronJob:
    name: str
    command: str
    schedule: str
    status: CronStatus = CronStatus.ACTIVE
    last_run: datetime | None = None
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def pause(self) -> None:
        self.status = CronStatus.PAUSED
        self.updated_at = datetime.now(timezone.utc)

    def resume(self) -> None:
        self.status = CronStatus.ACTIVE
        self.updated_at = datetime.now(timezone.utc)

    def to_crontab_line(self) -> str:
        return f"{self.schedule} {self.command}"

    def update(
        self,
        name: str | None = None,
        command: str | None = None,
        schedule: str | None = None,
    ) -> None:
        if name is not None:
            self.name = name
        if command is not None:
            self.command = command
        if schedule is not None:
            self.schedule = schedule
        self.updated_at = datetime.now(timezone.utc)
