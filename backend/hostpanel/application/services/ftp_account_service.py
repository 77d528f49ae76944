"""Application service (use case) for FTP accounts."""

from hostpanel.application.interfaces import FTPAccountRepository, PasswordHasher
from hostpanel.application.schemas.accounts import FTPAccountCreate, FTPAccountUpdate
from hostpanel.domain.entities import FTPAccount
from hostpanel.domain.exceptions import DuplicateEntityError, EntityNotFoundError, ValidationError
from hostpanel.domain.validators import ensure_safe_directory


class FTPAccountService:

    def __init__(self, repository: FTPAccountRepository, hasher: PasswordHasher):
        self._repository = repository
        self._hasher = hasher

    async def get_account(self, account_id: str) -> FTPAccount:
        account = await self._repository.get_by_id(account_id)
        if account is None:
            raise EntityNotFoundError("FTPAccount", account_id)
        return account

    async def list_accounts(self, skip: int = 0, limit: int = 100) -> list[FTPAccount]:
        return await self._repository.get_all(skip=skip, limit=limit)

    async def create_account(self, data: FTPAccountCreate) -> FTPAccount:
        username = data.username.strip()
        if not username:
            raise ValidationError("username", "Username is required")
        if not data.password:
            raise ValidationError("password", "Password is required")
        directory = ensure_safe_directory(data.directory)

        if await self._repository.get_by_username(username) is not None:
            raise DuplicateEntityError("FTPAccount", "username", username)

        account = FTPAccount(
            username=username,
            password_hash=self._hasher.hash(data.password),
            directory=directory,
            quota_mb=data.quota_mb,
        )
        return await self._repository.create(account)

    async def update_account(self, account_id: str, data: FTPAccountUpdate) -> FTPAccount:
        account = await self.get_account(account_id)
        account.update(
            directory=ensure_safe_directory(data.directory) if data.directory is not None else None,
            quota_mb=data.quota_mb,
            status=data.status,
            password_hash=self._hasher.hash(data.password) if data.password else None,
        )
        return await self._repository.update(account)

    async def delete_account(self, account_id: str) -> bool:
        await self.get_account(account_id)
        return await self._repository.delete(account_id)
