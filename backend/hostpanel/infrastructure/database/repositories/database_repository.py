"""Concrete repository implementation for ManagedDatabase backed by SQLAlchemy."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hostpanel.application.interfaces import DatabaseRepository
from hostpanel.domain.entities import DatabaseEngine, DatabaseStatus, ManagedDatabase
from hostpanel.infrastructure.database.models import ManagedDatabaseModel


class SQLAlchemyDatabaseRepository(DatabaseRepository):

    def __init__(self, session: AsyncSession):
        self._session = session

    @staticmethod
    def _to_entity(model: ManagedDatabaseModel) -> ManagedDatabase:
        return ManagedDatabase(
            id=model.id,
            name=model.name,
            engine=DatabaseEngine(model.engine),
            charset=model.charset,
            collation=model.collation,
            size_mb=model.size_mb,
            table_count=model.table_count,
            users=list(model.users or []),
            status=DatabaseStatus(model.status),
            created_at=model.created_at,
        )

    async def get_by_id(self, database_id: str) -> ManagedDatabase | None:
        model = await self._session.get(ManagedDatabaseModel, database_id)
        return self._to_entity(model) if model else None

    async def get_by_name(self, name: str) -> ManagedDatabase | None:
        result = await self._session.execute(
            select(ManagedDatabaseModel).where(ManagedDatabaseModel.name == name)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_all(self, skip: int = 0, limit: int = 100) -> list[ManagedDatabase]:
        result = await self._session.execute(
            select(ManagedDatabaseModel)
            .order_by(ManagedDatabaseModel.name.asc())
            .offset(skip)
            .limit(limit)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    async def create(self, database: ManagedDatabase) -> ManagedDatabase:
        model = ManagedDatabaseModel(
            id=database.id,
            name=database.name,
            engine=database.engine.value,
            charset=database.charset,
            collation=database.collation,
            size_mb=database.size_mb,
            table_count=database.table_count,
            users=list(database.users),
            status=database.status.value,
            created_at=database.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, database_id: str) -> bool:
        model = await self._session.get(ManagedDatabaseModel, database_id)
        if model is None:
            return False
        await self._session.delete(model)
        await self._session.flush()
        return True
