"""VPS control, live monitoring, server setup and WordPress install endpoints."""

from dataclasses import asdict

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import StreamingResponse

from hostpanel.application.schemas.jobs import PanelJobResponse
from hostpanel.application.schemas.server import (
    CommandResultResponse,
    ExecuteRequest,
    HostedSiteResponse,
    InstallationStartRequest,
    InstallationStatusResponse,
    InstallationStepResponse,
    MonitorStartRequest,
    MonitorStatusResponse,
    RestartResponse,
    ServerDatabaseResponse,
    ServiceStatusResponse,
    SystemMetricsResponse,
    VPSConnectRequest,
    VPSStatusResponse,
    WordPressInstallRequest,
)
from hostpanel.application.services import (
    InstallationManager,
    PanelJobService,
    SSEManager,
    SystemMonitor,
    VPSManager,
)
from hostpanel.application.services.system_monitor import metrics_to_dict
from hostpanel.domain.entities import (
    JobType,
    StepStatus,
    VPSConnection,
    WordPressInstallConfig,
)
from hostpanel.domain.exceptions import InstallationInProgressError, VPSNotConnectedError
from hostpanel.infrastructure.dependencies import (
    get_installation_manager,
    get_job_service,
    get_sse_manager,
    get_system_monitor,
    get_vps_manager,
)
from hostpanel.presentation.api.v1.endpoints.jobs import SSE_HEADERS
from hostpanel.presentation.api.v1.errors import PANEL_ERRORS, to_http

vps_router = APIRouter(prefix="/vps", tags=["VPS"])
monitoring_router = APIRouter(prefix="/monitoring", tags=["Monitoring"])
installation_router = APIRouter(prefix="/installation", tags=["Server Setup"])
wordpress_router = APIRouter(prefix="/wordpress", tags=["WordPress"])


def _vps_status(vps_manager: VPSManager) -> VPSStatusResponse:
    info = vps_manager.connection_info or {}
    return VPSStatusResponse(connected=vps_manager.is_connected, **info)


# ── VPS ──────────────────────────────────────────────────────────────


@vps_router.post("/connect", response_model=VPSStatusResponse)
async def connect(
    data: VPSConnectRequest,
    vps_manager: VPSManager = Depends(get_vps_manager),
    monitor: SystemMonitor = Depends(get_system_monitor),
) -> VPSStatusResponse:
    """Open the process-wide server connection. Credentials are never stored."""
    try:
        await vps_manager.connect(VPSConnection(**data.model_dump()))
    except PANEL_ERRORS as e:
        raise to_http(e)
    monitor.reset()
    return _vps_status(vps_manager)


@vps_router.post("/disconnect", response_model=VPSStatusResponse)
async def disconnect(
    vps_manager: VPSManager = Depends(get_vps_manager),
    monitor: SystemMonitor = Depends(get_system_monitor),
) -> VPSStatusResponse:
    await monitor.stop()
    await vps_manager.disconnect()
    return _vps_status(vps_manager)


@vps_router.get("/status", response_model=VPSStatusResponse)
async def connection_status(
    vps_manager: VPSManager = Depends(get_vps_manager),
) -> VPSStatusResponse:
    return _vps_status(vps_manager)


@vps_router.post("/execute", response_model=CommandResultResponse)
async def execute(
    data: ExecuteRequest,
    vps_manager: VPSManager = Depends(get_vps_manager),
) -> CommandResultResponse:
    """Run a shell command. A non-zero exit is reported in the body, not as an error."""
    try:
        result = await vps_manager.execute(data.command, timeout=data.timeout)
    except PANEL_ERRORS as e:
        raise to_http(e)
    return CommandResultResponse.model_validate(result)


@vps_router.get("/services", response_model=list[ServiceStatusResponse])
async def list_services(
    vps_manager: VPSManager = Depends(get_vps_manager),
) -> list[ServiceStatusResponse]:
    try:
        services = await vps_manager.get_services()
    except PANEL_ERRORS as e:
        raise to_http(e)
    return [ServiceStatusResponse.model_validate(s) for s in services]


@vps_router.post("/services/{name}/restart", response_model=RestartResponse)
async def restart_service(
    name: str,
    vps_manager: VPSManager = Depends(get_vps_manager),
) -> RestartResponse:
    try:
        restarted = await vps_manager.restart_service(name)
    except PANEL_ERRORS as e:
        raise to_http(e)
    return RestartResponse(service=name, restarted=restarted)


@vps_router.get("/domains", response_model=list[HostedSiteResponse])
async def list_hosted_sites(
    vps_manager: VPSManager = Depends(get_vps_manager),
) -> list[HostedSiteResponse]:
    try:
        sites = await vps_manager.get_domains()
    except PANEL_ERRORS as e:
        raise to_http(e)
    return [HostedSiteResponse.model_validate(s) for s in sites]


@vps_router.get("/databases", response_model=list[ServerDatabaseResponse])
async def list_server_databases(
    vps_manager: VPSManager = Depends(get_vps_manager),
) -> list[ServerDatabaseResponse]:
    try:
        databases = await vps_manager.get_databases()
    except PANEL_ERRORS as e:
        raise to_http(e)
    return [ServerDatabaseResponse.model_validate(d) for d in databases]


# ── Monitoring ───────────────────────────────────────────────────────


@monitoring_router.get("/metrics", response_model=SystemMetricsResponse)
async def get_metrics(
    monitor: SystemMonitor = Depends(get_system_monitor),
) -> SystemMetricsResponse:
    """Latest sample, or a fresh one when none has been taken yet."""
    try:
        metrics = await monitor.get_metrics()
    except PANEL_ERRORS as e:
        raise to_http(e)
    return SystemMetricsResponse.model_validate(metrics_to_dict(metrics))


@monitoring_router.get("/history", response_model=list[SystemMetricsResponse])
async def get_history(
    limit: int | None = Query(None, ge=1, le=720),
    monitor: SystemMonitor = Depends(get_system_monitor),
) -> list[SystemMetricsResponse]:
    return [SystemMetricsResponse.model_validate(metrics_to_dict(m)) for m in monitor.history(limit)]


@monitoring_router.get("/services", response_model=list[ServiceStatusResponse])
async def get_monitored_services(
    monitor: SystemMonitor = Depends(get_system_monitor),
) -> list[ServiceStatusResponse]:
    try:
        services = await monitor.get_services()
    except PANEL_ERRORS as e:
        raise to_http(e)
    return [ServiceStatusResponse.model_validate(s) for s in services]


@monitoring_router.get("/status", response_model=MonitorStatusResponse)
async def monitor_status(
    monitor: SystemMonitor = Depends(get_system_monitor),
) -> MonitorStatusResponse:
    return MonitorStatusResponse(running=monitor.is_running, interval=monitor.interval, samples=monitor.sample_count)


@monitoring_router.post("/start", response_model=MonitorStatusResponse)
async def start_monitoring(
    data: MonitorStartRequest | None = None,
    vps_manager: VPSManager = Depends(get_vps_manager),
    monitor: SystemMonitor = Depends(get_system_monitor),
) -> MonitorStatusResponse:
    """Start (or restart) sampling; the body may override the interval."""
    if not vps_manager.is_connected:
        raise to_http(VPSNotConnectedError())
    await monitor.start(data.interval if data else None)
    return MonitorStatusResponse(running=monitor.is_running, interval=monitor.interval, samples=monitor.sample_count)


@monitoring_router.post("/stop", response_model=MonitorStatusResponse)
async def stop_monitoring(
    monitor: SystemMonitor = Depends(get_system_monitor),
) -> MonitorStatusResponse:
    await monitor.stop()
    return MonitorStatusResponse(running=monitor.is_running, interval=monitor.interval, samples=monitor.sample_count)


@monitoring_router.get("/stream")
async def metrics_stream(
    sse: SSEManager = Depends(get_sse_manager),
) -> StreamingResponse:
    """SSE endpoint emitting a 'metrics' event for every sample."""
    return StreamingResponse(sse.subscribe({"metrics"}), media_type="text/event-stream", headers=SSE_HEADERS)


# ── Server setup ─────────────────────────────────────────────────────


def _installation_status(manager: InstallationManager) -> InstallationStatusResponse:
    steps = manager.steps
    failed = next((s.id for s in steps if s.status == StepStatus.FAILED), None)
    return InstallationStatusResponse(
        in_progress=manager.in_progress,
        total_steps=len(steps),
        completed_steps=sum(1 for s in steps if s.status == StepStatus.COMPLETED),
        failed_step=failed,
        steps=[InstallationStepResponse.model_validate(s) for s in steps],
    )


@installation_router.post("/start", response_model=PanelJobResponse, status_code=status.HTTP_202_ACCEPTED)
async def start_installation(
    data: InstallationStartRequest,
    manager: InstallationManager = Depends(get_installation_manager),
    jobs: PanelJobService = Depends(get_job_service),
) -> PanelJobResponse:
    """Queue a server setup run; 409 while another run is queued or running."""
    try:
        if manager.in_progress or await jobs.has_active(JobType.SERVER_SETUP):
            raise InstallationInProgressError()
    except PANEL_ERRORS as e:
        raise to_http(e)
    job = await jobs.enqueue(JobType.SERVER_SETUP, data.domain or data.server_type.value, data.model_dump(mode="json"))
    return PanelJobResponse.model_validate(job)


@installation_router.get("/steps", response_model=list[InstallationStepResponse])
async def installation_steps(
    manager: InstallationManager = Depends(get_installation_manager),
) -> list[InstallationStepResponse]:
    return [InstallationStepResponse.model_validate(s) for s in manager.steps]


@installation_router.get("/status", response_model=InstallationStatusResponse)
async def installation_status(
    manager: InstallationManager = Depends(get_installation_manager),
) -> InstallationStatusResponse:
    return _installation_status(manager)


# ── WordPress ────────────────────────────────────────────────────────


@wordpress_router.post("/install", response_model=PanelJobResponse, status_code=status.HTTP_202_ACCEPTED)
async def install_wordpress(
    data: WordPressInstallRequest,
    jobs: PanelJobService = Depends(get_job_service),
) -> PanelJobResponse:
    """Validate the request and queue a WordPress install on the connected server."""
    config = WordPressInstallConfig(**data.model_dump())
    try:
        config.validate()
    except PANEL_ERRORS as e:
        raise to_http(e)
    job = await jobs.enqueue(JobType.WORDPRESS_INSTALL, config.domain, asdict(config))
    return PanelJobResponse.model_validate(job)
