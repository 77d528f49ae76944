"""Domain entity for API tokens used by external tools to call the panel."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import uuid4

TOKEN_PREFIX = "hp_api_"

TOKEN_PERMISSIONS = frozenset({
    "backup",
    "files",
    "stats",
    "system",
    "domains",
    "databases",
    "email",
    "ssl",
})


@dataclass
class ApiToken:
    """A named token; only its SHA-256 hash and a short display hint are stored."""

    name: str
    token_hash: str
    token_hint: str
    permissions: list[str] = field(default_factory=list)
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    last_used: datetime | None = None

    def touch(self) -> None:
        self.last_used = datetime.now(timezone.utc)

    def allows(self, permission: str) -> bool:
        return permission in self.permissions
