"""Abstract repository interface (port) for HostedDomain persistence."""

from abc import ABC, abstractmethod

from hostpanel.domain.entities import HostedDomain


class DomainRepository(ABC):
    """Port for hosted domain persistence: implemented in the infrastructure layer."""

    @abstractmethod
    async def get_by_id(self, domain_id: str) -> HostedDomain | None:
        ...

    @abstractmethod
    async def get_by_name(self, name: str) -> HostedDomain | None:
        ...

    @abstractmethod
    async def get_all(self, skip: int = 0, limit: int = 100) -> list[HostedDomain]:
        ...

    @abstractmethod
    async def create(self, domain: HostedDomain) -> HostedDomain:
        ...

    @abstractmethod
    async def update(self, domain: HostedDomain) -> HostedDomain:
        ...

    @abstractmethod
    async def delete(self, domain_id: str) -> bool:
        """Delete a domain. Returns True if deleted, False if not found."""
        ...
