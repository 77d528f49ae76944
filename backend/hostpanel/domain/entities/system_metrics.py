"""Value objects for sampled host telemetry."""

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class CpuMetrics:
    usage: float
    cores: int
    model: str = ""


@dataclass
class UsageMetrics:
    """Used/free/total in megabytes with usage as a percentage."""

    total_mb: float
    used_mb: float
    free_mb: float
    usage: float


@dataclass
class NetworkMetrics:
    bytes_in: int
    bytes_out: int
    packets_in: int
    packets_out: int


@dataclass
class SystemMetrics:
    cpu: CpuMetrics
    memory: UsageMetrics
    disk: UsageMetrics
    network: NetworkMetrics
    uptime_seconds: int
    load_average: list[float]
    processes: int
    sampled_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
