"""Value objects describing a managed server, its services and command results."""

from dataclasses import dataclass, field
from enum import Enum


@dataclass
class VPSConnection:
    """SSH coordinates of the managed server. Secrets stay in process memory."""

    host: str
    username: str
    password: str | None = None
    private_key: str | None = None
    port: int = 22

    @property
    def is_local(self) -> bool:
        return self.host in ("localhost", "127.0.0.1") and not (self.password or self.private_key)


@dataclass
class CommandResult:
    command: str
    exit_code: int
    stdout: str = ""
    stderr: str = ""
    duration: float = 0.0

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class ServiceState(str, Enum):
    RUNNING = "running"
    STOPPED = "stopped"
    ERROR = "error"
    RESTARTING = "restarting"


@dataclass
class ServiceStatus:
    name: str
    status: ServiceState
    pid: int | None = None
    uptime: str = ""
    memory_mb: float = 0.0
    cpu_percent: float = 0.0
    autostart: bool = False


@dataclass
class HostedSite:
    """A virtual host discovered in the web server configuration."""

    name: str
    document_root: str
    ssl: bool = False
    aliases: list[str] = field(default_factory=list)


@dataclass
class ServerDatabase:
    """A schema discovered on the server's MySQL instance."""

    name: str
    size_mb: float
    table_count: int
