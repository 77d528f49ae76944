"""Panel job handlers driven through the BackgroundProcessor and the API."""

import asyncio
import re

import pytest

from hostpanel.application.interfaces import CommandRunner
from hostpanel.application.services import (
    BackgroundProcessor,
    InstallationManager,
    PanelJobService,
    SSEManager,
    VPSManager,
)
from hostpanel.config import Settings
from hostpanel.domain.entities import (
    BackupStatus,
    CertificateStatus,
    CommandResult,
    InstallationConfig,
    JobStatus,
    VPSConnection,
    WordPressInstallResult,
)
from hostpanel.infrastructure.database.repositories import (
    SQLAlchemyBackupRepository,
    SQLAlchemyCertificateRepository,
    SQLAlchemyPanelJobRepository,
)
from hostpanel.infrastructure.database.session import async_session_factory
from hostpanel.infrastructure.dependencies import get_installation_manager
from hostpanel.infrastructure.job_handlers import build_job_handlers
from hostpanel.main import app


class ScriptedRunner(CommandRunner):
    """Answers commands from regex rules; anything else succeeds silently."""

    def __init__(self):
        self.commands: list[str] = []
        self._rules: list[tuple[re.Pattern, int, str, str]] = []

    def on(self, pattern: str, stdout: str = "", exit_code: int = 0, stderr: str = "") -> "ScriptedRunner":
        self._rules.insert(0, (re.compile(pattern), exit_code, stdout, stderr))
        return self

    async def run(self, command, timeout=None):
        self.commands.append(command)
        for pattern, exit_code, stdout, stderr in self._rules:
            if pattern.search(command):
                return CommandResult(command=command, exit_code=exit_code, stdout=stdout, stderr=stderr)
        return CommandResult(command=command, exit_code=0)

    async def close(self):
        return None


class RecordingSSE(SSEManager):
    def __init__(self):
        super().__init__()
        self.events: list[dict] = []

    async def broadcast(self, event_type, data):
        if event_type == "job_update":
            self.events.append(data)


class RecordingInstaller:
    def __init__(self):
        self.configs = []

    async def install(self, config, on_step=None):
        self.configs.append(config)
        if on_step is not None:
            await on_step("connect_database", 0, 2)
            await on_step("set_permissions", 1, 2)
        return WordPressInstallResult(
            success=True,
            site_url=f"http://{config.domain}",
            admin_url=f"http://{config.domain}/wp-admin",
            admin_user=config.wp_admin_user,
            admin_password=config.wp_admin_password,
        )


WORDPRESS_REQUEST = {
    "domain": "blog.example.com",
    "db_name": "wp_blog",
    "db_user": "wp_blog",
    "db_password": "db-secret",
    "wp_admin_user": "admin",
    "wp_admin_password": "admin-secret",
    "wp_admin_email": "admin@example.com",
}


@pytest.fixture
def runner() -> ScriptedRunner:
    return ScriptedRunner()


@pytest.fixture
def installer() -> RecordingInstaller:
    return RecordingInstaller()


@pytest.fixture
def vps_manager(runner, installer) -> VPSManager:
    return VPSManager(runner_factory=lambda connection: runner, installer_factory=lambda r: installer)


@pytest.fixture
def sse() -> RecordingSSE:
    return RecordingSSE()


def make_processor(vps_manager, sse, installation_manager=None) -> BackgroundProcessor:
    handlers = build_job_handlers(
        vps_manager,
        installation_manager or InstallationManager(step_timeout=60),
        Settings(_env_file=None),
    )
    return BackgroundProcessor(sse, handlers, async_session_factory)


async def connect(vps_manager: VPSManager) -> None:
    await vps_manager.connect(VPSConnection(host="localhost", username="root"))


async def load_job(job_id: str):
    async with async_session_factory() as session:
        return await PanelJobService(SQLAlchemyPanelJobRepository(session)).get_job(job_id)


async def load_backup(backup_id: str):
    async with async_session_factory() as session:
        return await SQLAlchemyBackupRepository(session).get_by_id(backup_id)


async def load_certificate(certificate_id: str):
    async with async_session_factory() as session:
        return await SQLAlchemyCertificateRepository(session).get_by_id(certificate_id)


# ── Backups ──────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_backup_job_records_archive_size(client, vps_manager, runner, sse):
    runner.on(r"^stat -c", stdout="2048\n")
    await connect(vps_manager)
    body = (await client.post("/api/v1/backups", json={"backup_type": "files"})).json()

    await make_processor(vps_manager, sse).poll_once()

    job = await load_job(body["job"]["id"])
    backup = await load_backup(body["backup"]["id"])
    assert job.status == JobStatus.COMPLETED
    assert job.result["size_bytes"] == 2048
    assert backup.status == BackupStatus.COMPLETED
    assert backup.size_bytes == 2048
    assert any(c.startswith("mkdir -p") and "tar -czf" in c for c in runner.commands)


@pytest.mark.asyncio
async def test_backup_job_without_connection_fails_the_backup(client, vps_manager, sse):
    body = (await client.post("/api/v1/backups", json={"backup_type": "database"})).json()

    await make_processor(vps_manager, sse).poll_once()

    job = await load_job(body["job"]["id"])
    backup = await load_backup(body["backup"]["id"])
    assert job.status == JobStatus.FAILED
    assert job.error_message == "Not connected to VPS"
    assert backup.status == BackupStatus.FAILED
    assert backup.error_message == "Not connected to VPS"


# ── Certificates ─────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_certificate_job_enables_ssl_on_the_domain(client, vps_manager, runner, sse):
    await connect(vps_manager)
    domain = (await client.post("/api/v1/domains", json={"name": "shop.example.com"})).json()
    body = (await client.post("/api/v1/certificates", json={"domain": "shop.example.com"})).json()

    await make_processor(vps_manager, sse).poll_once()

    job = await load_job(body["job"]["id"])
    assert job.status == JobStatus.COMPLETED
    assert job.result["status"] == "valid"
    assert any(c.startswith("certbot --nginx -d shop.example.com") for c in runner.commands)
    refreshed = (await client.get(f"/api/v1/domains/{domain['id']}")).json()
    assert refreshed["ssl_enabled"] is True


@pytest.mark.asyncio
async def test_certificate_job_without_connection_fails_the_certificate(client, vps_manager, sse):
    body = (await client.post("/api/v1/certificates", json={"domain": "shop.example.com"})).json()

    await make_processor(vps_manager, sse).poll_once()

    job = await load_job(body["job"]["id"])
    certificate = await load_certificate(body["certificate"]["id"])
    assert job.status == JobStatus.FAILED
    assert certificate.status == CertificateStatus.FAILED
    assert certificate.error_message == "Not connected to VPS"


# ── WordPress ────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_wordpress_job_drops_credentials_from_payload_and_result(client, vps_manager, installer, sse):
    await connect(vps_manager)
    response = await client.post("/api/v1/wordpress/install", json=WORDPRESS_REQUEST)
    assert response.status_code == 202
    job_id = response.json()["id"]

    await make_processor(vps_manager, sse).poll_once()

    job = await load_job(job_id)
    assert job.status == JobStatus.COMPLETED
    assert "db_password" not in job.payload
    assert "wp_admin_password" not in job.payload
    assert job.payload["domain"] == "blog.example.com"
    assert "admin_password" not in job.result
    assert job.result["admin_url"] == "http://blog.example.com/wp-admin"
    assert installer.configs[0].db_password == "db-secret"
    assert 50 in [event["progress"] for event in sse.events]


@pytest.mark.asyncio
async def test_restarted_wordpress_job_needs_new_credentials(client, vps_manager, installer, sse):
    await connect(vps_manager)
    job_id = (await client.post("/api/v1/wordpress/install", json=WORDPRESS_REQUEST)).json()["id"]
    processor = make_processor(vps_manager, sse)
    await processor.poll_once()

    assert (await client.post(f"/api/v1/jobs/{job_id}/restart")).status_code == 200
    await processor.poll_once()

    assert (await load_job(job_id)).status == JobStatus.FAILED
    assert len(installer.configs) == 1


@pytest.mark.asyncio
async def test_wordpress_install_rejects_invalid_domain(client):
    response = await client.post("/api/v1/wordpress/install", json={**WORDPRESS_REQUEST, "domain": "not a domain"})
    assert response.status_code == 422


# ── Server setup ─────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_server_setup_progress_counts_completed_steps(client, vps_manager, sse):
    await connect(vps_manager)
    job_id = (await client.post("/api/v1/installation/start", json={"server_type": "full"})).json()["id"]

    await make_processor(vps_manager, sse).poll_once()

    job = await load_job(job_id)
    assert job.status == JobStatus.COMPLETED
    assert job.result == {"completed_steps": 10, "total_steps": 10}
    processing = {e["progress"] for e in sse.events if e["status"] == "processing"}
    assert processing == set(range(0, 101, 10))


@pytest.mark.asyncio
async def test_server_setup_stops_at_failed_step(client, vps_manager, runner, sse):
    runner.on(r"^ufw ", exit_code=1, stderr="ufw: command not found")
    await connect(vps_manager)
    job_id = (await client.post("/api/v1/installation/start", json={})).json()["id"]

    await make_processor(vps_manager, sse).poll_once()

    job = await load_job(job_id)
    assert job.status == JobStatus.FAILED
    assert job.error_message.startswith("Step security failed")
    assert job.progress == 60
    assert not any(c.startswith("sysctl") for c in runner.commands)


@pytest.mark.asyncio
async def test_installation_start_conflicts_while_queued(client):
    first = await client.post("/api/v1/installation/start", json={})
    second = await client.post("/api/v1/installation/start", json={})

    assert first.status_code == 202
    assert second.status_code == 409


@pytest.mark.asyncio
async def test_installation_start_conflicts_while_running(client):
    release = asyncio.Event()

    class BlockingRunner(ScriptedRunner):
        async def run(self, command, timeout=None):
            await release.wait()
            return await super().run(command, timeout)

    manager = InstallationManager(step_timeout=60)
    app.dependency_overrides[get_installation_manager] = lambda: manager
    try:
        run = asyncio.create_task(manager.start(InstallationConfig(), BlockingRunner()))
        while not manager.in_progress:
            await asyncio.sleep(0)

        response = await client.post("/api/v1/installation/start", json={})
        assert response.status_code == 409

        release.set()
        assert await run is True
        assert (await client.post("/api/v1/installation/start", json={})).status_code == 202
    finally:
        app.dependency_overrides.pop(get_installation_manager, None)
