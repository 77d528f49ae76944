"""Application service (use case) for managed databases."""

import logging

from hostpanel.application.interfaces import DatabaseRepository
from hostpanel.application.schemas.hosting import DatabaseCreate
from hostpanel.application.services.vps_manager import VPSManager
from hostpanel.domain.entities import DatabaseEngine, ManagedDatabase
from hostpanel.domain.exceptions import DuplicateEntityError, EntityNotFoundError, ValidationError
from hostpanel.domain.validators import ensure_identifier

logger = logging.getLogger(__name__)


class DatabaseService:
    """Database records, provisioned on the server when a VPS is connected."""

    def __init__(self, repository: DatabaseRepository, vps_manager: VPSManager | None = None):
        self._repository = repository
        self._vps = vps_manager

    async def get_database(self, database_id: str) -> ManagedDatabase:
        database = await self._repository.get_by_id(database_id)
        if database is None:
            raise EntityNotFoundError("Database", database_id)
        return database

    async def list_databases(self, skip: int = 0, limit: int = 100) -> list[ManagedDatabase]:
        return await self._repository.get_all(skip=skip, limit=limit)

    async def create_database(self, data: DatabaseCreate) -> ManagedDatabase:
        name = ensure_identifier(data.name, "name")
        if await self._repository.get_by_name(name) is not None:
            raise DuplicateEntityError("Database", "name", name)
        users = [ensure_identifier(u, "users", max_length=32) for u in data.users]

        if self._vps is not None and self._vps.is_connected and data.engine == DatabaseEngine.MYSQL:
            if not data.password:
                raise ValidationError("password", "A password is required to provision the database user")
            user = users[0] if users else name[:32]
            # Raises on failure, before anything is stored
            await self._vps.create_database(name, user, data.password)
            users = users or [user]
            logger.info("Provisioned database %s on the server", name)

        database = ManagedDatabase(
            name=name,
            engine=data.engine,
            charset=data.charset,
            collation=data.collation,
            users=users,
        )
        return await self._repository.create(database)

    async def delete_database(self, database_id: str) -> bool:
        await self.get_database(database_id)
        return await self._repository.delete(database_id)
