"""Abstract repository interface (port) for ApiToken persistence."""

from abc import ABC, abstractmethod

from hostpanel.domain.entities import ApiToken


class ApiTokenRepository(ABC):

    @abstractmethod
    async def get_by_id(self, token_id: str) -> ApiToken | None:
        ...

    @abstractmethod
    async def get_by_hash(self, token_hash: str) -> ApiToken | None:
        ...

    @abstractmethod
    async def get_all(self) -> list[ApiToken]:
        ...

    @abstractmethod
    async def create(self, token: ApiToken) -> ApiToken:
        ...

    @abstractmethod
    async def update(self, token: ApiToken) -> ApiToken:
        ...

    @abstractmethod
    async def delete(self, token_id: str) -> bool:
        ...
