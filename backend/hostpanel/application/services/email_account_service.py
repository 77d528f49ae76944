"""Application service (use case) for mailbox accounts."""

from typing import Any

from hostpanel.application.interfaces import EmailAccountRepository, PasswordHasher
from hostpanel.application.schemas.accounts import EmailAccountCreate, EmailAccountUpdate
from hostpanel.domain.entities import EmailAccount
from hostpanel.domain.exceptions import DuplicateEntityError, EntityNotFoundError, ValidationError
from hostpanel.domain.validators import ensure_email


class EmailAccountService:

    def __init__(self, repository: EmailAccountRepository, hasher: PasswordHasher):
        self._repository = repository
        self._hasher = hasher

    async def get_account(self, account_id: str) -> EmailAccount:
        account = await self._repository.get_by_id(account_id)
        if account is None:
            raise EntityNotFoundError("EmailAccount", account_id)
        return account

    async def list_accounts(
        self, *, domain: str | None = None, skip: int = 0, limit: int = 100
    ) -> list[EmailAccount]:
        return await self._repository.get_all(
            domain=domain.lower() if domain else None, skip=skip, limit=limit
        )

    async def create_account(self, data: EmailAccountCreate) -> EmailAccount:
        username = data.username.strip().lower()
        domain = data.domain.strip().lower()
        if not username:
            raise ValidationError("username", "Username is required")
        if not data.password:
            raise ValidationError("password", "Password is required")
        ensure_email(f"{username}@{domain}", "username")

        if await self._repository.get_by_address(username, domain) is not None:
            raise DuplicateEntityError("EmailAccount", "address", f"{username}@{domain}")

        account = EmailAccount(
            username=username,
            domain=domain,
            password_hash=self._hasher.hash(data.password),
            quota_mb=data.quota_mb,
        )
        return await self._repository.create(account)

    async def update_account(self, account_id: str, data: EmailAccountUpdate) -> EmailAccount:
        account = await self.get_account(account_id)

        # Only fields present in the request are applied; an explicit null
        # for forwarding_to clears it.
        kwargs: dict[str, Any] = {}
        if data.quota_mb is not None:
            kwargs["quota_mb"] = data.quota_mb
        if data.status is not None:
            kwargs["status"] = data.status
        if "forwarding_to" in data.model_fields_set:
            if data.forwarding_to:
                ensure_email(data.forwarding_to, "forwarding_to")
            kwargs["forwarding_to"] = data.forwarding_to or None

        account.update(**kwargs)
        return await self._repository.update(account)

    async def delete_account(self, account_id: str) -> bool:
        await self.get_account(account_id)
        return await self._repository.delete(account_id)
