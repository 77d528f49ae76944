"""Health check endpoint: no database dependency, always available."""

from fastapi import APIRouter, Depends

from hostpanel.application.services import VPSManager
from hostpanel.config import get_settings
from hostpanel.infrastructure.dependencies import get_vps_manager

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(vps_manager: VPSManager = Depends(get_vps_manager)) -> dict:
    """Returns the current application health status."""
    settings = get_settings()
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.app_env,
        "vps_connected": vps_manager.is_connected,
    }
