"""SQLAlchemy implementations of the email and FTP account repositories."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hostpanel.application.interfaces import EmailAccountRepository, FTPAccountRepository
from hostpanel.domain.entities import AccountStatus, EmailAccount, FTPAccount
from hostpanel.infrastructure.database.models import EmailAccountModel, FTPAccountModel


class SQLAlchemyEmailAccountRepository(EmailAccountRepository):
    """Implements the EmailAccountRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    @staticmethod
    def _to_entity(model: EmailAccountModel) -> EmailAccount:
        return EmailAccount(
            id=model.id,
            username=model.username,
            domain=model.domain,
            password_hash=model.password_hash,
            quota_mb=model.quota_mb,
            used_mb=model.used_mb,
            status=AccountStatus(model.status),
            forwarding_to=model.forwarding_to,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    async def get_by_id(self, account_id: str) -> EmailAccount | None:
        model = await self._session.get(EmailAccountModel, account_id)
        return self._to_entity(model) if model else None

    async def get_by_address(self, username: str, domain: str) -> EmailAccount | None:
        result = await self._session.execute(
            select(EmailAccountModel).where(
                EmailAccountModel.username == username,
                EmailAccountModel.domain == domain,
            )
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_all(
        self, *, domain: str | None = None, skip: int = 0, limit: int = 100
    ) -> list[EmailAccount]:
        stmt = select(EmailAccountModel)
        if domain is not None:
            stmt = stmt.where(EmailAccountModel.domain == domain)
        stmt = stmt.order_by(
            EmailAccountModel.domain.asc(), EmailAccountModel.username.asc()
        ).offset(skip).limit(limit)
        result = await self._session.execute(stmt)
        return [self._to_entity(m) for m in result.scalars().all()]

    async def create(self, account: EmailAccount) -> EmailAccount:
        model = EmailAccountModel(
            id=account.id,
            username=account.username,
            domain=account.domain,
            password_hash=account.password_hash,
            quota_mb=account.quota_mb,
            used_mb=account.used_mb,
            status=account.status.value,
            forwarding_to=account.forwarding_to,
            created_at=account.created_at,
            updated_at=account.updated_at,
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def update(self, account: EmailAccount) -> EmailAccount:
        model = await self._session.get(EmailAccountModel, account.id)
        if model is None:
            raise ValueError(f"EmailAccount {account.id} not found in database")
        model.quota_mb = account.quota_mb
        model.status = account.status.value
        model.forwarding_to = account.forwarding_to
        model.updated_at = account.updated_at
        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, account_id: str) -> bool:
        model = await self._session.get(EmailAccountModel, account_id)
        if model is None:
            return False
        await self._session.delete(model)
        await self._session.flush()
        return True


class SQLAlchemyFTPAccountRepository(FTPAccountRepository):
    """Implements the FTPAccountRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    @staticmethod
    def _to_entity(model: FTPAccountModel) -> FTPAccount:
        return FTPAccount(
            id=model.id,
            username=model.username,
            password_hash=model.password_hash,
            directory=model.directory,
            quota_mb=model.quota_mb,
            used_mb=model.used_mb,
            status=AccountStatus(model.status),
            last_login=model.last_login,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    async def get_by_id(self, account_id: str) -> FTPAccount | None:
        model = await self._session.get(FTPAccountModel, account_id)
        return self._to_entity(model) if model else None

    async def get_by_username(self, username: str) -> FTPAccount | None:
        result = await self._session.execute(
            select(FTPAccountModel).where(FTPAccountModel.username == username)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_all(self, skip: int = 0, limit: int = 100) -> list[FTPAccount]:
        result = await self._session.execute(
            select(FTPAccountModel)
            .order_by(FTPAccountModel.username.asc())
            .offset(skip)
            .limit(limit)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    async def create(self, account: FTPAccount) -> FTPAccount:
        model = FTPAccountModel(
            id=account.id,
            username=account.username,
            password_hash=account.password_hash,
            directory=account.directory,
            quota_mb=account.quota_mb,
            used_mb=account.used_mb,
            status=account.status.value,
            last_login=account.last_login,
            created_at=account.created_at,
            updated_at=account.updated_at,
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def update(self, account: FTPAccount) -> FTPAccount:
        model = await self._session.get(FTPAccountModel, account.id)
        if model is None:
            raise ValueError(f"FTPAccount {account.id} not found in database")
        model.password_hash = account.password_hash
        model.directory = account.directory
        model.quota_mb = account.quota_mb
        model.status = account.status.value
        model.updated_at = account.updated_at
        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, account_id: str) -> bool:
        model = await self._session.get(FTPAccountModel, account_id)
        if model is None:
            return False
        await self._session.delete(model)
        await self._session.flush()
        return True
