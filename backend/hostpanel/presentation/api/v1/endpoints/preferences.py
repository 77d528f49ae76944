"""Panel preference endpoints backed by a JSON file."""

from typing import Any

from fastapi import APIRouter, Body, Depends

from hostpanel.application.schemas.preferences import PreferencesResponse
from hostpanel.application.services import PreferencesService
from hostpanel.infrastructure.dependencies import get_preferences_service
from hostpanel.presentation.api.v1.errors import PANEL_ERRORS, to_http

router = APIRouter(prefix="/preferences", tags=["Preferences"])


@router.get("", response_model=PreferencesResponse)
async def get_preferences(
    service: PreferencesService = Depends(get_preferences_service),
) -> PreferencesResponse:
    return PreferencesResponse(**service.get_all())


@router.get("/{section}")
async def get_preference_section(
    section: str,
    service: PreferencesService = Depends(get_preferences_service),
) -> dict[str, Any]:
    try:
        return service.get_section(section)
    except PANEL_ERRORS as e:
        raise to_http(e)


@router.put("/{section}")
async def update_preference_section(
    section: str,
    updates: dict[str, Any] = Body(...),
    service: PreferencesService = Depends(get_preferences_service),
) -> dict[str, Any]:
    """Merge ``updates`` into one section. Unknown keys are rejected."""
    try:
        return service.update_section(section, updates)
    except PANEL_ERRORS as e:
        raise to_http(e)
