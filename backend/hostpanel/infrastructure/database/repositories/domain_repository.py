"""Concrete repository implementation for HostedDomain backed by SQLAlchemy."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hostpanel.application.interfaces import DomainRepository
from hostpanel.domain.entities import DomainStatus, HostedDomain
from hostpanel.infrastructure.database.models import HostedDomainModel


class SQLAlchemyDomainRepository(DomainRepository):
    """Implements the DomainRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: HostedDomainModel) -> HostedDomain:
        """Map ORM model → domain entity."""
        return HostedDomain(
            id=model.id,
            name=model.name,
            status=DomainStatus(model.status),
            document_root=model.document_root,
            php_version=model.php_version,
            ssl_enabled=model.ssl_enabled,
            subdomains=list(model.subdomains or []),
            expires_at=model.expires_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    async def get_by_id(self, domain_id: str) -> HostedDomain | None:
        result = await self._session.get(HostedDomainModel, domain_id)
        return self._to_entity(result) if result else None

    async def get_by_name(self, name: str) -> HostedDomain | None:
        result = await self._session.execute(
            select(HostedDomainModel).where(HostedDomainModel.name == name)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_all(self, skip: int = 0, limit: int = 100) -> list[HostedDomain]:
        stmt = (
            select(HostedDomainModel)
            .order_by(HostedDomainModel.name.asc())
            .offset(skip)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(row) for row in result.scalars().all()]

    async def create(self, domain: HostedDomain) -> HostedDomain:
        model = HostedDomainModel(
            id=domain.id,
            name=domain.name,
            status=domain.status.value,
            document_root=domain.document_root,
            php_version=domain.php_version,
            ssl_enabled=domain.ssl_enabled,
            subdomains=list(domain.subdomains),
            expires_at=domain.expires_at,
            created_at=domain.created_at,
            updated_at=domain.updated_at,
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def update(self, domain: HostedDomain) -> HostedDomain:
        model = await self._session.get(HostedDomainModel, domain.id)
        if model is None:
            raise ValueError(f"HostedDomain {domain.id} not found in database")
        model.status = domain.status.value
        model.php_version = domain.php_version
        model.ssl_enabled = domain.ssl_enabled
        model.subdomains = list(domain.subdomains)
        model.updated_at = domain.updated_at
        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, domain_id: str) -> bool:
        model = await self._session.get(HostedDomainModel, domain_id)
        if model is None:
            return False
        await self._session.delete(model)
        await self._session.flush()
        return True
