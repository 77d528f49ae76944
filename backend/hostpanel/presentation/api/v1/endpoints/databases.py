"""Managed database endpoints."""

from fastapi import APIRouter, Depends, Query, status

from hostpanel.application.schemas.hosting import DatabaseCreate, DatabaseResponse
from hostpanel.application.services import DatabaseService
from hostpanel.infrastructure.dependencies import get_database_service
from hostpanel.presentation.api.v1.errors import PANEL_ERRORS, to_http

router = APIRouter(prefix="/databases", tags=["Databases"])


@router.get("", response_model=list[DatabaseResponse])
async def list_databases(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    service: DatabaseService = Depends(get_database_service),
) -> list[DatabaseResponse]:
    databases = await service.list_databases(skip=skip, limit=limit)
    return [DatabaseResponse.model_validate(d) for d in databases]


@router.get("/{database_id}", response_model=DatabaseResponse)
async def get_database(
    database_id: str,
    service: DatabaseService = Depends(get_database_service),
) -> DatabaseResponse:
    try:
        database = await service.get_database(database_id)
    except PANEL_ERRORS as e:
        raise to_http(e)
    return DatabaseResponse.model_validate(database)


@router.post("", response_model=DatabaseResponse, status_code=status.HTTP_201_CREATED)
async def create_database(
    data: DatabaseCreate,
    service: DatabaseService = Depends(get_database_service),
) -> DatabaseResponse:
    """Create a database record, provisioning it on the server when connected.

    A provisioning failure returns 502 and nothing is stored.
    """
    try:
        database = await service.create_database(data)
    except PANEL_ERRORS as e:
        raise to_http(e)
    return DatabaseResponse.model_validate(database)


@router.delete("/{database_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_database(
    database_id: str,
    service: DatabaseService = Depends(get_database_service),
) -> None:
    try:
        await service.delete_database(database_id)
    except PANEL_ERRORS as e:
        raise to_http(e)
