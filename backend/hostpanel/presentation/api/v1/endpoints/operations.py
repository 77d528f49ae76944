"""Backup, certificate, cron job and API token endpoints."""

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import FileResponse, PlainTextResponse

from hostpanel.application.schemas.jobs import PanelJobResponse
from hostpanel.application.schemas.operations import (
    ApiTokenCreate,
    ApiTokenCreatedResponse,
    ApiTokenResponse,
    ApiTokenVerifyRequest,
    BackupCreate,
    BackupQueuedResponse,
    BackupResponse,
    CertificateCreate,
    CertificateQueuedResponse,
    CertificateResponse,
    CronJobCreate,
    CronJobResponse,
    CronJobUpdate,
)
from hostpanel.application.services import (
    ApiTokenService,
    BackupService,
    CertificateService,
    CronJobService,
)
from hostpanel.domain.entities import Certificate
from hostpanel.infrastructure.dependencies import (
    get_api_token_service,
    get_backup_service,
    get_certificate_service,
    get_cron_job_service,
)
from hostpanel.presentation.api.v1.errors import PANEL_ERRORS, to_http

backups_router = APIRouter(prefix="/backups", tags=["Backups"])
certificates_router = APIRouter(prefix="/certificates", tags=["Certificates"])
cron_router = APIRouter(prefix="/cron-jobs", tags=["Cron Jobs"])
tokens_router = APIRouter(prefix="/api-tokens", tags=["API Tokens"])


# ── Backups ──────────────────────────────────────────────────────────


@backups_router.get("", response_model=list[BackupResponse])
async def list_backups(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    service: BackupService = Depends(get_backup_service),
) -> list[BackupResponse]:
    """List backups, newest first."""
    backups = await service.list_backups(skip=skip, limit=limit)
    return [BackupResponse.model_validate(b) for b in backups]


@backups_router.post("", response_model=BackupQueuedResponse, status_code=status.HTTP_202_ACCEPTED)
async def create_backup(
    data: BackupCreate,
    service: BackupService = Depends(get_backup_service),
) -> BackupQueuedResponse:
    """Queue a backup. The archive is produced by a background job."""
    backup, job = await service.create_backup(data.backup_type)
    return BackupQueuedResponse(
        backup=BackupResponse.model_validate(backup),
        job=PanelJobResponse.model_validate(job),
    )


@backups_router.get("/{backup_id}", response_model=BackupResponse)
async def get_backup(
    backup_id: str,
    service: BackupService = Depends(get_backup_service),
) -> BackupResponse:
    try:
        backup = await service.get_backup(backup_id)
    except PANEL_ERRORS as e:
        raise to_http(e)
    return BackupResponse.model_validate(backup)


@backups_router.get("/{backup_id}/download")
async def download_backup(
    backup_id: str,
    service: BackupService = Depends(get_backup_service),
) -> FileResponse:
    """Stream a completed archive; 404 while it is pending, running or failed."""
    try:
        path = await service.get_download_path(backup_id)
    except PANEL_ERRORS as e:
        raise to_http(e)
    return FileResponse(path, media_type="application/gzip", filename=path.name)


@backups_router.delete("/{backup_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_backup(
    backup_id: str,
    service: BackupService = Depends(get_backup_service),
) -> None:
    try:
        await service.delete_backup(backup_id)
    except PANEL_ERRORS as e:
        raise to_http(e)


# ── Certificates ─────────────────────────────────────────────────────


def _certificate_response(certificate: Certificate) -> CertificateResponse:
    return CertificateResponse(
        id=certificate.id,
        domain=certificate.domain,
        issuer=certificate.issuer,
        method=certificate.method,
        status=certificate.effective_status(),
        auto_renew=certificate.auto_renew,
        expires_at=certificate.expires_at,
        error_message=certificate.error_message,
        created_at=certificate.created_at,
    )


@certificates_router.get("", response_model=list[CertificateResponse])
async def list_certificates(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    service: CertificateService = Depends(get_certificate_service),
) -> list[CertificateResponse]:
    certificates = await service.list_certificates(skip=skip, limit=limit)
    return [_certificate_response(c) for c in certificates]


@certificates_router.post("", response_model=CertificateQueuedResponse, status_code=status.HTTP_202_ACCEPTED)
async def create_certificate(
    data: CertificateCreate,
    service: CertificateService = Depends(get_certificate_service),
) -> CertificateQueuedResponse:
    """Request a certificate. Issuance runs as a background job."""
    try:
        certificate, job = await service.request_certificate(data.domain, data.method)
    except PANEL_ERRORS as e:
        raise to_http(e)
    return CertificateQueuedResponse(
        certificate=_certificate_response(certificate),
        job=PanelJobResponse.model_validate(job),
    )


@certificates_router.get("/{certificate_id}", response_model=CertificateResponse)
async def get_certificate(
    certificate_id: str,
    service: CertificateService = Depends(get_certificate_service),
) -> CertificateResponse:
    try:
        certificate = await service.get_certificate(certificate_id)
    except PANEL_ERRORS as e:
        raise to_http(e)
    return _certificate_response(certificate)


@certificates_router.post("/{certificate_id}/revoke", response_model=CertificateResponse)
async def revoke_certificate(
    certificate_id: str,
    service: CertificateService = Depends(get_certificate_service),
) -> CertificateResponse:
    try:
        certificate = await service.revoke_certificate(certificate_id)
    except PANEL_ERRORS as e:
        raise to_http(e)
    return _certificate_response(certificate)


@certificates_router.delete("/{certificate_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_certificate(
    certificate_id: str,
    service: CertificateService = Depends(get_certificate_service),
) -> None:
    try:
        await service.delete_certificate(certificate_id)
    except PANEL_ERRORS as e:
        raise to_http(e)


# ── Cron jobs ────────────────────────────────────────────────────────


@cron_router.get("", response_model=list[CronJobResponse])
async def list_cron_jobs(
    service: CronJobService = Depends(get_cron_job_service),
) -> list[CronJobResponse]:
    jobs = await service.list_jobs()
    return [CronJobResponse.model_validate(j) for j in jobs]


@cron_router.get("/crontab", response_class=PlainTextResponse)
async def render_crontab(
    service: CronJobService = Depends(get_cron_job_service),
) -> str:
    """Active jobs rendered as crontab text."""
    return await service.render_crontab()


@cron_router.post("", response_model=CronJobResponse, status_code=status.HTTP_201_CREATED)
async def create_cron_job(
    data: CronJobCreate,
    service: CronJobService = Depends(get_cron_job_service),
) -> CronJobResponse:
    try:
        job = await service.create_job(data)
    except PANEL_ERRORS as e:
        raise to_http(e)
    return CronJobResponse.model_validate(job)


@cron_router.get("/{job_id}", response_model=CronJobResponse)
async def get_cron_job(
    job_id: str,
    service: CronJobService = Depends(get_cron_job_service),
) -> CronJobResponse:
    try:
        job = await service.get_job(job_id)
    except PANEL_ERRORS as e:
        raise to_http(e)
    return CronJobResponse.model_validate(job)


@cron_router.put("/{job_id}", response_model=CronJobResponse)
async def update_cron_job(
    job_id: str,
    data: CronJobUpdate,
    service: CronJobService = Depends(get_cron_job_service),
) -> CronJobResponse:
    try:
        job = await service.update_job(job_id, data)
    except PANEL_ERRORS as e:
        raise to_http(e)
    return CronJobResponse.model_validate(job)


@cron_router.post("/{job_id}/pause", response_model=CronJobResponse)
async def pause_cron_job(
    job_id: str,
    service: CronJobService = Depends(get_cron_job_service),
) -> CronJobResponse:
    try:
        job = await service.pause_job(job_id)
    except PANEL_ERRORS as e:
        raise to_http(e)
    return CronJobResponse.model_validate(job)


@cron_router.post("/{job_id}/resume", response_model=CronJobResponse)
async def resume_cron_job(
    job_id: str,
    service: CronJobService = Depends(get_cron_job_service),
) -> CronJobResponse:
    try:
        job = await service.resume_job(job_id)
    except PANEL_ERRORS as e:
        raise to_http(e)
    return CronJobResponse.model_validate(job)


@cron_router.delete("/{job_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_cron_job(
    job_id: str,
    service: CronJobService = Depends(get_cron_job_service),
) -> None:
    try:
        await service.delete_job(job_id)
    except PANEL_ERRORS as e:
        raise to_http(e)


# ── API tokens ───────────────────────────────────────────────────────


@tokens_router.get("", response_model=list[ApiTokenResponse])
async def list_api_tokens(
    service: ApiTokenService = Depends(get_api_token_service),
) -> list[ApiTokenResponse]:
    tokens = await service.list_tokens()
    return [ApiTokenResponse.model_validate(t) for t in tokens]


@tokens_router.post("", response_model=ApiTokenCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_api_token(
    data: ApiTokenCreate,
    service: ApiTokenService = Depends(get_api_token_service),
) -> ApiTokenCreatedResponse:
    """Create a token. The plaintext is returned here and never again."""
    try:
        token, plaintext = await service.create_token(data)
    except PANEL_ERRORS as e:
        raise to_http(e)
    return ApiTokenCreatedResponse(
        **ApiTokenResponse.model_validate(token).model_dump(),
        token=plaintext,
    )


@tokens_router.post("/verify", response_model=ApiTokenResponse)
async def verify_api_token(
    data: ApiTokenVerifyRequest,
    service: ApiTokenService = Depends(get_api_token_service),
) -> ApiTokenResponse:
    try:
        token = await service.verify(data.token, data.permission)
    except PANEL_ERRORS as e:
        raise to_http(e)
    return ApiTokenResponse.model_validate(token)


@tokens_router.delete("/{token_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_api_token(
    token_id: str,
    service: ApiTokenService = Depends(get_api_token_service),
) -> None:
    try:
        await service.delete_token(token_id)
    except PANEL_ERRORS as e:
        raise to_http(e)
