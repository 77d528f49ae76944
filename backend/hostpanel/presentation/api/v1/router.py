"""V1 API router: aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from hostpanel.presentation.api.v1.endpoints.health import router as health_router
from hostpanel.presentation.api.v1.endpoints.domains import router as domains_router
from hostpanel.presentation.api.v1.endpoints.databases import router as databases_router
from hostpanel.presentation.api.v1.endpoints.accounts import email_router, ftp_router
from hostpanel.presentation.api.v1.endpoints.operations import (
    backups_router,
    certificates_router,
    cron_router,
    tokens_router,
)
from hostpanel.presentation.api.v1.endpoints.jobs import router as jobs_router
from hostpanel.presentation.api.v1.endpoints.preferences import router as preferences_router
from hostpanel.presentation.api.v1.endpoints.server import (
    installation_router,
    monitoring_router,
    vps_router,
    wordpress_router,
)

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(domains_router)
router.include_router(databases_router)
router.include_router(email_router)
router.include_router(ftp_router)
router.include_router(backups_router)
router.include_router(certificates_router)
router.include_router(cron_router)
router.include_router(tokens_router)
router.include_router(jobs_router)
router.include_router(preferences_router)
router.include_router(vps_router)
router.include_router(monitoring_router)
router.include_router(installation_router)
router.include_router(wordpress_router)
