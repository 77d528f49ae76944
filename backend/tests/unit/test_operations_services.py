"""Unit tests for backups, certificates, cron jobs, API tokens and the job queue."""

from datetime import datetime, timedelta, timezone

import pytest

from hostpanel.application.interfaces import (
    ApiTokenRepository,
    BackupRepository,
    CertificateRepository,
    CronJobRepository,
    DomainRepository,
    PanelJobRepository,
)
from hostpanel.application.schemas.operations import ApiTokenCreate, CronJobCreate, CronJobUpdate
from hostpanel.application.services import (
    ApiTokenService,
    BackupRunner,
    BackupService,
    CertificateService,
    CronJobService,
    PanelJobService,
    VPSManager,
)
from hostpanel.application.services.api_token_service import hash_token
from hostpanel.domain.entities import (
    ApiToken,
    BackupStatus,
    BackupType,
    Certificate,
    CertificateMethod,
    CertificateStatus,
    CronStatus,
    HostedDomain,
    JobStatus,
    JobType,
    PanelJob,
    VPSConnection,
)
from hostpanel.domain.exceptions import EntityNotFoundError, ValidationError


class InMemoryRepository:
    def __init__(self):
        self.items: dict[str, object] = {}

    async def get_by_id(self, item_id):
        return self.items.get(item_id)

    async def get_all(self, skip: int = 0, limit: int = 100):
        return list(self.items.values())[skip : skip + limit]

    async def create(self, item):
        self.items[item.id] = item
        return item

    async def update(self, item):
        self.items[item.id] = item
        return item

    async def delete(self, item_id) -> bool:
        return self.items.pop(item_id, None) is not None


class FakeBackupRepository(InMemoryRepository, BackupRepository):
    pass


class FakeCertificateRepository(InMemoryRepository, CertificateRepository):
    pass


class FakeCronJobRepository(InMemoryRepository, CronJobRepository):
    pass


class FakeApiTokenRepository(InMemoryRepository, ApiTokenRepository):
    async def get_all(self) -> list[ApiToken]:
        return list(self.items.values())

    async def get_by_hash(self, token_hash: str) -> ApiToken | None:
        return next((t for t in self.items.values() if t.token_hash == token_hash), None)


class FakeDomainRepository(InMemoryRepository, DomainRepository):
    async def get_by_name(self, name: str) -> HostedDomain | None:
        return next((d for d in self.items.values() if d.name == name), None)


class FakePanelJobRepository(PanelJobRepository):
    def __init__(self):
        self.jobs: dict[str, PanelJob] = {}
        self._next_id = 1

    async def get_by_id(self, job_id):
        return self.jobs.get(job_id)

    async def get_all(self, *, job_type=None, status=None, limit=200):
        jobs = [
            j for j in reversed(list(self.jobs.values()))
            if (job_type is None or j.job_type == job_type) and (status is None or j.status == status)
        ]
        return jobs[:limit]

    async def get_queued(self, limit=10):
        return [j for j in self.jobs.values() if j.status == JobStatus.QUEUED][:limit]

    async def create(self, job):
        job.id = f"job-{self._next_id}"
        self._next_id += 1
        self.jobs[job.id] = job
        return job

    async def update(self, job):
        self.jobs[job.id] = job
        return job


@pytest.fixture
def jobs() -> PanelJobService:
    return PanelJobService(FakePanelJobRepository())


async def connected_vps(runner) -> VPSManager:
    vps = VPSManager(runner_factory=lambda c: runner)
    await vps.connect(VPSConnection(host="192.0.2.7", username="root", password="pw"))
    return vps


# ── Job queue ────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_enqueue_and_restart(jobs: PanelJobService):
    job = await jobs.enqueue(JobType.BACKUP, "backup-1", {"backup_type": "full"})
    assert job.status == JobStatus.QUEUED
    assert await jobs.has_active(JobType.BACKUP)
    assert not await jobs.has_active(JobType.CERTIFICATE)

    with pytest.raises(ValidationError):
        await jobs.restart_job(job.id)

    job.mark_failed("disk full")
    restarted = await jobs.restart_job(job.id)
    assert restarted.status == JobStatus.QUEUED
    assert restarted.error_message is None
    assert restarted.progress_message == "Re-queued"


@pytest.mark.asyncio
async def test_get_missing_job(jobs: PanelJobService):
    with pytest.raises(EntityNotFoundError):
        await jobs.get_job("nope")


@pytest.mark.asyncio
async def test_list_jobs_filters(jobs: PanelJobService):
    await jobs.enqueue(JobType.BACKUP, "a")
    done = await jobs.enqueue(JobType.CERTIFICATE, "b")
    done.mark_completed({"ok": True})

    assert [j.target for j in await jobs.list_jobs(job_type=JobType.BACKUP)] == ["a"]
    assert [j.target for j in await jobs.list_jobs(status=JobStatus.COMPLETED)] == ["b"]


# ── Backups ──────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_create_backup_queues_job(jobs: PanelJobService):
    service = BackupService(FakeBackupRepository(), jobs)

    backup, job = await service.create_backup(BackupType.DATABASE)

    assert backup.status == BackupStatus.PENDING
    assert backup.name.startswith("Database Backup ")
    assert job.job_type == JobType.BACKUP
    assert job.target == backup.id
    assert job.payload == {"backup_type": "database"}


@pytest.mark.asyncio
async def test_run_backup_success(jobs, runner, tmp_path):
    runner.on(r"^stat -c %s", stdout="4096\n")
    service = BackupService(FakeBackupRepository(), jobs)
    backup, _ = await service.create_backup(BackupType.FILES)

    result = await service.run_backup(backup.id, BackupRunner(runner, str(tmp_path), "/var/www"))

    assert result.status == BackupStatus.COMPLETED
    assert result.size_bytes == 4096
    assert result.file_path.startswith(f"{tmp_path}/files-")
    assert result.completed_at is not None


@pytest.mark.asyncio
async def test_run_backup_failure_is_recorded(jobs, runner, tmp_path):
    runner.on(r"tar -czf", exit_code=2, stderr="tar: /var/www: Cannot open")
    service = BackupService(FakeBackupRepository(), jobs)
    backup, _ = await service.create_backup(BackupType.FILES)

    result = await service.run_backup(backup.id, BackupRunner(runner, str(tmp_path), "/var/www"))

    assert result.status == BackupStatus.FAILED
    assert "Cannot open" in result.error_message


@pytest.mark.asyncio
async def test_download_and_delete_backup(jobs, tmp_path):
    service = BackupService(FakeBackupRepository(), jobs)
    backup, _ = await service.create_backup(BackupType.FULL)

    with pytest.raises(EntityNotFoundError):
        await service.get_download_path(backup.id)

    archive = tmp_path / "full.tar.gz"
    archive.write_bytes(b"\x1f\x8b")
    backup.mark_completed(str(archive), 2)

    assert await service.get_download_path(backup.id) == archive
    assert await service.delete_backup(backup.id) is True
    assert not archive.exists()


# ── Certificates ─────────────────────────────────────────────────────


@pytest.fixture
def domain_repository() -> FakeDomainRepository:
    return FakeDomainRepository()


@pytest.fixture
def certificates(jobs, domain_repository) -> CertificateService:
    return CertificateService(FakeCertificateRepository(), jobs, domain_repository)


@pytest.mark.asyncio
async def test_request_certificate(certificates: CertificateService):
    certificate, job = await certificates.request_certificate("Example.com", CertificateMethod.LETSENCRYPT)

    assert certificate.domain == "example.com"
    assert certificate.issuer == "Let's Encrypt"
    assert certificate.auto_renew is True
    assert certificate.status == CertificateStatus.PENDING
    assert job.job_type == JobType.CERTIFICATE
    assert job.payload == {"domain": "example.com", "method": "letsencrypt"}

    with pytest.raises(ValidationError):
        await certificates.request_certificate("bad domain", CertificateMethod.SELF_SIGNED)


@pytest.mark.asyncio
async def test_issue_letsencrypt_enables_ssl_on_domain(certificates, domain_repository, runner):
    domain = await domain_repository.create(HostedDomain(name="example.com", document_root="/var/www/example.com"))
    certificate, _ = await certificates.request_certificate("example.com", CertificateMethod.LETSENCRYPT)

    issued = await certificates.issue(certificate.id, await connected_vps(runner))

    assert issued.status == CertificateStatus.VALID
    assert timedelta(days=89) < issued.expires_at - datetime.now(timezone.utc) <= timedelta(days=90)
    assert runner.commands[-1].startswith("certbot --nginx -d example.com")
    assert domain.ssl_enabled is True


@pytest.mark.asyncio
async def test_issue_self_signed(certificates, runner):
    certificate, _ = await certificates.request_certificate("example.org", CertificateMethod.SELF_SIGNED)

    issued = await certificates.issue(certificate.id, await connected_vps(runner))

    assert issued.issuer == "Self-Signed"
    assert issued.auto_renew is False
    assert "-days 365" in runner.commands[-1]


@pytest.mark.asyncio
async def test_issue_failures(certificates, runner):
    certificate, _ = await certificates.request_certificate("example.com", CertificateMethod.LETSENCRYPT)

    disconnected = VPSManager(runner_factory=lambda c: runner)
    failed = await certificates.issue(certificate.id, disconnected)
    assert failed.status == CertificateStatus.FAILED
    assert failed.error_message == "Not connected to VPS"

    runner.on(r"^certbot", exit_code=1)
    failed = await certificates.issue(certificate.id, await connected_vps(runner))
    assert failed.status == CertificateStatus.FAILED


def test_effective_status_reports_expiry():
    certificate = Certificate(domain="example.com", method=CertificateMethod.LETSENCRYPT)
    certificate.issue(now=datetime.now(timezone.utc) - timedelta(days=91))

    assert certificate.status == CertificateStatus.VALID
    assert certificate.effective_status() == CertificateStatus.EXPIRED


@pytest.mark.asyncio
async def test_revoke_certificate(certificates):
    certificate, _ = await certificates.request_certificate("example.com", CertificateMethod.LETSENCRYPT)

    revoked = await certificates.revoke_certificate(certificate.id)

    assert revoked.status == CertificateStatus.REVOKED
    assert revoked.auto_renew is False


# ── Cron jobs ────────────────────────────────────────────────────────


@pytest.fixture
def cron() -> CronJobService:
    return CronJobService(FakeCronJobRepository())


@pytest.mark.asyncio
async def test_create_cron_job_normalises_schedule(cron: CronJobService):
    job = await cron.create_job(CronJobCreate(name="Nightly", command=" /usr/local/bin/backup.sh ", schedule="0  2 * * *"))

    assert job.schedule == "0 2 * * *"
    assert job.command == "/usr/local/bin/backup.sh"
    assert job.status == CronStatus.ACTIVE


@pytest.mark.asyncio
async def test_cron_job_validation(cron: CronJobService):
    with pytest.raises(ValidationError):
        await cron.create_job(CronJobCreate(name="x", command="true", schedule="61 * * * *"))
    with pytest.raises(ValidationError):
        await cron.create_job(CronJobCreate(name="x", command="true\nrm -rf /", schedule="@daily"))


@pytest.mark.asyncio
async def test_render_crontab_skips_paused_jobs(cron: CronJobService):
    assert await cron.render_crontab() == ""

    nightly = await cron.create_job(CronJobCreate(name="Nightly", command="backup.sh", schedule="0 2 * * *"))
    hourly = await cron.create_job(CronJobCreate(name="Hourly", command="sync.sh", schedule="@hourly"))
    await cron.pause_job(hourly.id)

    assert await cron.render_crontab() == "# Nightly\n0 2 * * * backup.sh\n"

    await cron.resume_job(hourly.id)
    await cron.update_job(nightly.id, CronJobUpdate(schedule="30 3 * * 1-5"))
    assert await cron.render_crontab() == "# Nightly\n30 3 * * 1-5 backup.sh\n# Hourly\n@hourly sync.sh\n"


# ── API tokens ───────────────────────────────────────────────────────


@pytest.fixture
def tokens() -> ApiTokenService:
    return ApiTokenService(FakeApiTokenRepository())


@pytest.mark.asyncio
async def test_create_token_stores_only_hash(tokens: ApiTokenService):
    token, plaintext = await tokens.create_token(ApiTokenCreate(name="CI", permissions=["stats", "backup", "stats"]))

    assert plaintext.startswith("hp_api_")
    assert token.token_hash == hash_token(plaintext)
    assert plaintext not in token.token_hint
    assert token.token_hint == "hp_api_" + "*" * 15 + plaintext[-3:]
    assert token.permissions == ["backup", "stats"]


@pytest.mark.asyncio
async def test_token_validation(tokens: ApiTokenService):
    with pytest.raises(ValidationError):
        await tokens.create_token(ApiTokenCreate(name="   "))
    with pytest.raises(ValidationError):
        await tokens.create_token(ApiTokenCreate(name="x", permissions=["root"]))


@pytest.mark.asyncio
async def test_verify_token(tokens: ApiTokenService):
    token, plaintext = await tokens.create_token(ApiTokenCreate(name="CI", permissions=["backup"]))

    verified = await tokens.verify(plaintext, "backup")
    assert verified.id == token.id
    assert verified.last_used is not None

    with pytest.raises(ValidationError):
        await tokens.verify(plaintext, "system")
    with pytest.raises(EntityNotFoundError):
        await tokens.verify("hp_api_wrong")


@pytest.mark.asyncio
async def test_delete_token(tokens: ApiTokenService):
    token, _ = await tokens.create_token(ApiTokenCreate(name="CI"))

    assert await tokens.delete_token(token.id) is True
    with pytest.raises(EntityNotFoundError):
        await tokens.delete_token(token.id)
