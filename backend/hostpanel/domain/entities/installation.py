"""Domain entities for automated server setup runs."""

from dataclasses import dataclass, field
from enum import Enum


class ServerType(str, Enum):
    WEB = "web"
    DATABASE = "database"
    FULL = "full"


class StepStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class InstallationConfig:
    server_type: ServerType = ServerType.FULL
    domain: str | None = None
    email: str | None = None
    features: list[str] = field(default_factory=list)
    applications: list[str] = field(default_factory=list)


@dataclass
class InstallationStep:
    """One step of a setup run. ``command`` is None for steps handled in-process."""

    id: str
    name: str
    description: str
    command: str | None = None
    status: StepStatus = StepStatus.PENDING
    progress: int = 0
    output: str | None = None
    error: str | None = None

    def start(self) -> None:
        self.status = StepStatus.RUNNING
        self.progress = 0

    def complete(self, output: str) -> None:
        self.status = StepStatus.COMPLETED
        self.progress = 100
        self.output = output

    def fail(self, error: str) -> None:
        self.status = StepStatus.FAILED
        self.error = error
