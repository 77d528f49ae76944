"""Domain entity: a database provisioned for a hosted site."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4


class DatabaseEngine(str, Enum):
    MYSQL = "mysql"
    POSTGRESQL = "postgresql"
    MONGODB = "mongodb"


class DatabaseStatus(str, Enum):
    ONLINE = "online"
    OFFLINE = "offline"


@dataclass
class ManagedDatabase:
    name: str
    engine: DatabaseEngine = DatabaseEngine.MYSQL
    charset: str = "utf8mb4"
    collation: str = "utf8mb4_unicode_ci"
    size_mb: float = 0.0
    table_count: int = 0
    users: list[str] = field(default_factory=list)
    status: DatabaseStatus = DatabaseStatus.ONLINE
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
