"""Abstract interface (port) for administrative statements on the MySQL server."""

from abc import ABC, abstractmethod


class DatabaseAdmin(ABC):
    """Port used by the WordPress installer to provision schemas and users."""

    @abstractmethod
    async def connect(self) -> None:
        """Open the administrative connection. Raises on failure."""
        ...

    @abstractmethod
    async def database_exists(self, name: str) -> bool:
        ...

    @abstractmethod
    async def user_exists(self, user: str, host: str = "localhost") -> bool:
        ...

    @abstractmethod
    async def create_database(self, name: str, charset: str, collation: str) -> None:
        ...

    @abstractmethod
    async def create_user(self, user: str, password: str, host: str = "localhost") -> None:
        ...

    @abstractmethod
    async def grant_all(self, database: str, user: str, host: str = "localhost") -> None:
        """Grant all privileges on ``database`` and flush privileges."""
        ...

    @abstractmethod
    async def drop_database(self, name: str) -> None:
        ...

    @abstractmethod
    async def drop_user(self, user: str, host: str = "localhost") -> None:
        ...

    @abstractmethod
    async def close(self) -> None:
        ...
