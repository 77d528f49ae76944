"""Email and FTP account endpoints. Passwords are accepted but never returned."""

from fastapi import APIRouter, Depends, Query, status

from hostpanel.application.schemas.accounts import (
    EmailAccountCreate,
    EmailAccountResponse,
    EmailAccountUpdate,
    FTPAccountCreate,
    FTPAccountResponse,
    FTPAccountUpdate,
)
from hostpanel.application.services import EmailAccountService, FTPAccountService
from hostpanel.infrastructure.dependencies import get_email_account_service, get_ftp_account_service
from hostpanel.presentation.api.v1.errors import PANEL_ERRORS, to_http

email_router = APIRouter(prefix="/email-accounts", tags=["Email Accounts"])
ftp_router = APIRouter(prefix="/ftp-accounts", tags=["FTP Accounts"])


# ── Email ────────────────────────────────────────────────────────────


@email_router.get("", response_model=list[EmailAccountResponse])
async def list_email_accounts(
    domain: str | None = Query(None, description="Filter by domain"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    service: EmailAccountService = Depends(get_email_account_service),
) -> list[EmailAccountResponse]:
    accounts = await service.list_accounts(domain=domain, skip=skip, limit=limit)
    return [EmailAccountResponse.model_validate(a) for a in accounts]


@email_router.get("/{account_id}", response_model=EmailAccountResponse)
async def get_email_account(
    account_id: str,
    service: EmailAccountService = Depends(get_email_account_service),
) -> EmailAccountResponse:
    try:
        account = await service.get_account(account_id)
    except PANEL_ERRORS as e:
        raise to_http(e)
    return EmailAccountResponse.model_validate(account)


@email_router.post("", response_model=EmailAccountResponse, status_code=status.HTTP_201_CREATED)
async def create_email_account(
    data: EmailAccountCreate,
    service: EmailAccountService = Depends(get_email_account_service),
) -> EmailAccountResponse:
    try:
        account = await service.create_account(data)
    except PANEL_ERRORS as e:
        raise to_http(e)
    return EmailAccountResponse.model_validate(account)


@email_router.put("/{account_id}", response_model=EmailAccountResponse)
async def update_email_account(
    account_id: str,
    data: EmailAccountUpdate,
    service: EmailAccountService = Depends(get_email_account_service),
) -> EmailAccountResponse:
    try:
        account = await service.update_account(account_id, data)
    except PANEL_ERRORS as e:
        raise to_http(e)
    return EmailAccountResponse.model_validate(account)


@email_router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_email_account(
    account_id: str,
    service: EmailAccountService = Depends(get_email_account_service),
) -> None:
    try:
        await service.delete_account(account_id)
    except PANEL_ERRORS as e:
        raise to_http(e)


# ── FTP ──────────────────────────────────────────────────────────────


@ftp_router.get("", response_model=list[FTPAccountResponse])
async def list_ftp_accounts(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    service: FTPAccountService = Depends(get_ftp_account_service),
) -> list[FTPAccountResponse]:
    accounts = await service.list_accounts(skip=skip, limit=limit)
    return [FTPAccountResponse.model_validate(a) for a in accounts]


@ftp_router.get("/{account_id}", response_model=FTPAccountResponse)
async def get_ftp_account(
    account_id: str,
    service: FTPAccountService = Depends(get_ftp_account_service),
) -> FTPAccountResponse:
    try:
        account = await service.get_account(account_id)
    except PANEL_ERRORS as e:
        raise to_http(e)
    return FTPAccountResponse.model_validate(account)


@ftp_router.post("", response_model=FTPAccountResponse, status_code=status.HTTP_201_CREATED)
async def create_ftp_account(
    data: FTPAccountCreate,
    service: FTPAccountService = Depends(get_ftp_account_service),
) -> FTPAccountResponse:
    try:
        account = await service.create_account(data)
    except PANEL_ERRORS as e:
        raise to_http(e)
    return FTPAccountResponse.model_validate(account)


@ftp_router.put("/{account_id}", response_model=FTPAccountResponse)
async def update_ftp_account(
    account_id: str,
    data: FTPAccountUpdate,
    service: FTPAccountService = Depends(get_ftp_account_service),
) -> FTPAccountResponse:
    try:
        account = await service.update_account(account_id, data)
    except PANEL_ERRORS as e:
        raise to_http(e)
    return FTPAccountResponse.model_validate(account)


@ftp_router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_ftp_account(
    account_id: str,
    service: FTPAccountService = Depends(get_ftp_account_service),
) -> None:
    try:
        await service.delete_account(account_id)
    except PANEL_ERRORS as e:
        raise to_http(e)
