"""Abstract repository interfaces (ports) for mailbox and FTP accounts."""

from abc import ABC, abstractmethod

from hostpanel.domain.entities import EmailAccount, FTPAccount


class EmailAccountRepository(ABC):
    """Port for email account persistence."""

    @abstractmethod
    async def get_by_id(self, account_id: str) -> EmailAccount | None:
        ...

    @abstractmethod
    async def get_by_address(self, username: str, domain: str) -> EmailAccount | None:
        ...

    @abstractmethod
    async def get_all(
        self, *, domain: str | None = None, skip: int = 0, limit: int = 100
    ) -> list[EmailAccount]:
        ...

    @abstractmethod
    async def create(self, account: EmailAccount) -> EmailAccount:
        ...

    @abstractmethod
    async def update(self, account: EmailAccount) -> EmailAccount:
        ...

    @abstractmethod
    async def delete(self, account_id: str) -> bool:
        ...


class FTPAccountRepository(ABC):
    """Port for FTP account persistence."""

    @abstractmethod
    async def get_by_id(self, account_id: str) -> FTPAccount | None:
        ...

    @abstractmethod
    async def get_by_username(self, username: str) -> FTPAccount | None:
        ...

    @abstractmethod
    async def get_all(self, skip: int = 0, limit: int = 100) -> list[FTPAccount]:
        ...

    @abstractmethod
    async def create(self, account: FTPAccount) -> FTPAccount:
        ...

    @abstractmethod
    async def update(self, account: FTPAccount) -> FTPAccount:
        ...

    @abstractmethod
    async def delete(self, account_id: str) -> bool:
        ...
