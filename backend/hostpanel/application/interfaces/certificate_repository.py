"""Abstract repository interface (port) for Certificate persistence."""

from abc import ABC, abstractmethod

from hostpanel.domain.entities import Certificate


class CertificateRepository(ABC):

    @abstractmethod
    async def get_by_id(self, certificate_id: str) -> Certificate | None:
        ...

    @abstractmethod
    async def get_all(self, skip: int = 0, limit: int = 100) -> list[Certificate]:
        ...

    @abstractmethod
    async def create(self, certificate: Certificate) -> Certificate:
        ...

    @abstractmethod
    async def update(self, certificate: Certificate) -> Certificate:
        ...

    @abstractmethod
    async def delete(self, certificate_id: str) -> bool:
        ...
