"""Hosted domain CRUD endpoints."""

from fastapi import APIRouter, Depends, Query, status

from hostpanel.application.schemas.hosting import DomainCreate, DomainResponse, DomainUpdate
from hostpanel.application.services import DomainService
from hostpanel.infrastructure.dependencies import get_domain_service
from hostpanel.presentation.api.v1.errors import PANEL_ERRORS, to_http

router = APIRouter(prefix="/domains", tags=["Domains"])


@router.get("", response_model=list[DomainResponse])
async def list_domains(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    service: DomainService = Depends(get_domain_service),
) -> list[DomainResponse]:
    domains = await service.list_domains(skip=skip, limit=limit)
    return [DomainResponse.model_validate(d) for d in domains]


@router.get("/{domain_id}", response_model=DomainResponse)
async def get_domain(
    domain_id: str,
    service: DomainService = Depends(get_domain_service),
) -> DomainResponse:
    try:
        domain = await service.get_domain(domain_id)
    except PANEL_ERRORS as e:
        raise to_http(e)
    return DomainResponse.model_validate(domain)


@router.post("", response_model=DomainResponse, status_code=status.HTTP_201_CREATED)
async def create_domain(
    data: DomainCreate,
    service: DomainService = Depends(get_domain_service),
) -> DomainResponse:
    """Add a hosted domain. The name must be a valid, unused hostname."""
    try:
        domain = await service.create_domain(data)
    except PANEL_ERRORS as e:
        raise to_http(e)
    return DomainResponse.model_validate(domain)


@router.put("/{domain_id}", response_model=DomainResponse)
async def update_domain(
    domain_id: str,
    data: DomainUpdate,
    service: DomainService = Depends(get_domain_service),
) -> DomainResponse:
    try:
        domain = await service.update_domain(domain_id, data)
    except PANEL_ERRORS as e:
        raise to_http(e)
    return DomainResponse.model_validate(domain)


@router.post("/{domain_id}/suspend", response_model=DomainResponse)
async def suspend_domain(
    domain_id: str,
    service: DomainService = Depends(get_domain_service),
) -> DomainResponse:
    try:
        domain = await service.suspend_domain(domain_id)
    except PANEL_ERRORS as e:
        raise to_http(e)
    return DomainResponse.model_validate(domain)


@router.post("/{domain_id}/activate", response_model=DomainResponse)
async def activate_domain(
    domain_id: str,
    service: DomainService = Depends(get_domain_service),
) -> DomainResponse:
    try:
        domain = await service.activate_domain(domain_id)
    except PANEL_ERRORS as e:
        raise to_http(e)
    return DomainResponse.model_validate(domain)


@router.delete("/{domain_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_domain(
    domain_id: str,
    service: DomainService = Depends(get_domain_service),
) -> None:
    try:
        await service.delete_domain(domain_id)
    except PANEL_ERRORS as e:
        raise to_http(e)
