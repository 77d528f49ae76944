"""Application service (use case) for hosted domains."""

from pathlib import PurePosixPath

from hostpanel.application.interfaces import DomainRepository
from hostpanel.application.schemas.hosting import DomainCreate, DomainUpdate
from hostpanel.domain.entities import HostedDomain
from hostpanel.domain.entities.hosted_domain import DEFAULT_PHP_VERSION
from hostpanel.domain.exceptions import DuplicateEntityError, EntityNotFoundError
from hostpanel.domain.validators import ensure_domain, ensure_safe_directory


class DomainService:
    """Orchestrates domain CRUD logic. Depends on the repository port (DI)."""

    def __init__(self, repository: DomainRepository, web_root: str = "/var/www/html"):
        self._repository = repository
        self._web_root = web_root

    async def get_domain(self, domain_id: str) -> HostedDomain:
        domain = await self._repository.get_by_id(domain_id)
        if domain is None:
            raise EntityNotFoundError("Domain", domain_id)
        return domain

    async def list_domains(self, skip: int = 0, limit: int = 100) -> list[HostedDomain]:
        return await self._repository.get_all(skip=skip, limit=limit)

    async def create_domain(self, data: DomainCreate) -> HostedDomain:
        name = ensure_domain(data.name.strip(), "name")
        if await self._repository.get_by_name(name) is not None:
            raise DuplicateEntityError("Domain", "name", name)

        document_root = data.document_root or str(PurePosixPath(self._web_root) / name)
        ensure_safe_directory(document_root, "document_root")

        domain = HostedDomain(
            name=name,
            document_root=document_root,
            php_version=data.php_version or DEFAULT_PHP_VERSION,
        )
        return await self._repository.create(domain)

    async def update_domain(self, domain_id: str, data: DomainUpdate) -> HostedDomain:
        domain = await self.get_domain(domain_id)
        subdomains = None
        if data.subdomains is not None:
            subdomains = [s.strip().lower() for s in data.subdomains if s.strip()]
        domain.update(status=data.status, php_version=data.php_version, subdomains=subdomains)
        return await self._repository.update(domain)

    async def suspend_domain(self, domain_id: str) -> HostedDomain:
        domain = await self.get_domain(domain_id)
        domain.suspend()
        return await self._repository.update(domain)

    async def activate_domain(self, domain_id: str) -> HostedDomain:
        domain = await self.get_domain(domain_id)
        domain.activate()
        return await self._repository.update(domain)

    async def delete_domain(self, domain_id: str) -> bool:
        await self.get_domain(domain_id)
        return await self._repository.delete(domain_id)
