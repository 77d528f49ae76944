"""Pydantic DTOs for VPS control, monitoring, server setup and the WordPress installer."""

from datetime import datetime

from pydantic import BaseModel, Field, model_validator

from hostpanel.domain.entities import ServerType, ServiceState, StepStatus


# ── VPS ──────────────────────────────────────────────────────────────


class VPSConnectRequest(BaseModel):
    host: str = Field(..., min_length=1, examples=["203.0.113.10"])
    username: str = Field("root", min_length=1)
    password: str | None = None
    private_key: str | None = None
    port: int = Field(22, ge=1, le=65535)


class VPSStatusResponse(BaseModel):
    connected: bool
    host: str | None = None
    port: int | None = None
    username: str | None = None


class ExecuteRequest(BaseModel):
    command: str = Field(..., min_length=1, examples=["uptime"])
    timeout: float | None = Field(None, gt=0, le=3600)


class CommandResultResponse(BaseModel):
    command: str
    exit_code: int
    stdout: str
    stderr: str
    duration: float
    ok: bool

    model_config = {"from_attributes": True}


class ServiceStatusResponse(BaseModel):
    name: str
    status: ServiceState
    pid: int | None
    uptime: str
    memory_mb: float
    cpu_percent: float
    autostart: bool

    model_config = {"from_attributes": True}


class RestartResponse(BaseModel):
    service: str
    restarted: bool


class HostedSiteResponse(BaseModel):
    name: str
    document_root: str
    ssl: bool
    aliases: list[str]

    model_config = {"from_attributes": True}


class ServerDatabaseResponse(BaseModel):
    name: str
    size_mb: float
    table_count: int

    model_config = {"from_attributes": True}


# ── Monitoring ───────────────────────────────────────────────────────


class CpuMetricsSchema(BaseModel):
    usage: float
    cores: int
    model: str

    model_config = {"from_attributes": True, "protected_namespaces": ()}


class UsageMetricsSchema(BaseModel):
    total_mb: float
    used_mb: float
    free_mb: float
    usage: float

    model_config = {"from_attributes": True}


class NetworkMetricsSchema(BaseModel):
    bytes_in: int
    bytes_out: int
    packets_in: int
    packets_out: int

    model_config = {"from_attributes": True}


class SystemMetricsResponse(BaseModel):
    cpu: CpuMetricsSchema
    memory: UsageMetricsSchema
    disk: UsageMetricsSchema
    network: NetworkMetricsSchema
    uptime_seconds: int
    uptime: str
    load_average: list[float]
    processes: int
    sampled_at: datetime

    model_config = {"from_attributes": True}


class MonitorStartRequest(BaseModel):
    interval: float | None = Field(None, gt=0, le=3600)


class MonitorStatusResponse(BaseModel):
    running: bool
    interval: float
    samples: int


# ── Server setup ─────────────────────────────────────────────────────


class InstallationStartRequest(BaseModel):
    server_type: ServerType = ServerType.FULL
    domain: str | None = None
    email: str | None = None
    features: list[str] = Field(default_factory=list)
    applications: list[str] = Field(default_factory=list, examples=[["wordpress"]])


class InstallationStepResponse(BaseModel):
    id: str
    name: str
    description: str
    command: str | None
    status: StepStatus
    progress: int
    output: str | None
    error: str | None

    model_config = {"from_attributes": True}


class InstallationStatusResponse(BaseModel):
    in_progress: bool
    total_steps: int
    completed_steps: int
    failed_step: str | None
    steps: list[InstallationStepResponse]


# ── WordPress ────────────────────────────────────────────────────────


class WordPressInstallRequest(BaseModel):
    domain: str = Field(..., min_length=1, examples=["example.com"])
    db_name: str = Field(..., min_length=1, max_length=64)
    db_user: str = Field(..., min_length=1, max_length=32)
    db_password: str = Field(..., min_length=1)
    wp_admin_user: str = Field(..., min_length=1)
    wp_admin_password: str = Field(..., min_length=1)
    wp_admin_email: str = Field(..., min_length=3)
    site_title: str | None = None

    @model_validator(mode="after")
    def _strip(self) -> "WordPressInstallRequest":
        self.domain = self.domain.strip().lower()
        return self
