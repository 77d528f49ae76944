"""MySQL administration over SQLAlchemy async + aiomysql.

DDL cannot be parameterised for identifiers, so database and user names are
validated as plain identifiers before being backtick-quoted. Passwords and
account names go through bound parameters.
"""

import logging

from sqlalchemy import text
from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from hostpanel.application.interfaces.database_admin import DatabaseAdmin
from hostpanel.domain.validators import ensure_identifier

logger = logging.getLogger(__name__)


def _quote_identifier(name: str) -> str:
    return f"`{ensure_identifier(name, 'identifier')}`"


class MySQLDatabaseAdmin(DatabaseAdmin):
    """Concrete DatabaseAdmin talking to the server's MySQL as an admin user."""

    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        connect_timeout: float = 10,
    ) -> None:
        self._url = URL.create(
            "mysql+aiomysql",
            username=user,
            password=password or None,
            host=host,
            port=port,
        )
        self._connect_timeout = connect_timeout
        self._engine: AsyncEngine | None = None

    def _require_engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("MySQL admin connection is not open")
        return self._engine

    async def _execute(self, sql: str, **params) -> None:
        async with self._require_engine().connect() as conn:
            await conn.execute(text(sql), params)

    async def _scalar(self, sql: str, **params):
        async with self._require_engine().connect() as conn:
            result = await conn.execute(text(sql), params)
            return result.scalar()

    async def connect(self) -> None:
        self._engine = create_async_engine(
            self._url,
            isolation_level="AUTOCOMMIT",
            pool_pre_ping=True,
            connect_args={"connect_timeout": int(self._connect_timeout)},
        )
        try:
            await self._scalar("SELECT 1")
        except Exception:
            await self.close()
            raise
        logger.info("Connected to MySQL at %s:%s", self._url.host, self._url.port)

    async def database_exists(self, name: str) -> bool:
        found = await self._scalar(
            "SELECT SCHEMA_NAME FROM information_schema.SCHEMATA WHERE SCHEMA_NAME = :name",
            name=name,
        )
        return found is not None

    async def user_exists(self, user: str, host: str = "localhost") -> bool:
        found = await self._scalar(
            "SELECT User FROM mysql.user WHERE User = :user AND Host = :host",
            user=user,
            host=host,
        )
        return found is not None

    async def create_database(self, name: str, charset: str, collation: str) -> None:
        ensure_identifier(charset, "charset")
        ensure_identifier(collation, "collation")
        await self._execute(
            f"CREATE DATABASE IF NOT EXISTS {_quote_identifier(name)} "
            f"CHARACTER SET {charset} COLLATE {collation}"
        )
        logger.info("Database '%s' created", name)

    async def create_user(self, user: str, password: str, host: str = "localhost") -> None:
        ensure_identifier(user, "db_user", max_length=32)
        await self._execute(
            "CREATE USER IF NOT EXISTS :user@:host IDENTIFIED BY :password",
            user=user,
            host=host,
            password=password,
        )
        logger.info("MySQL user '%s'@'%s' created", user, host)

    async def grant_all(self, database: str, user: str, host: str = "localhost") -> None:
        await self._execute(
            f"GRANT ALL PRIVILEGES ON {_quote_identifier(database)}.* TO :user@:host",
            user=user,
            host=host,
        )
        await self._execute("FLUSH PRIVILEGES")

    async def drop_database(self, name: str) -> None:
        await self._execute(f"DROP DATABASE IF EXISTS {_quote_identifier(name)}")
        logger.info("Database '%s' dropped", name)

    async def drop_user(self, user: str, host: str = "localhost") -> None:
        await self._execute("DROP USER IF EXISTS :user@:host", user=user, host=host)
        logger.info("MySQL user '%s'@'%s' dropped", user, host)

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
