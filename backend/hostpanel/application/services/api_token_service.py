"""Application service (use case) for API tokens.

Tokens are shown in plaintext exactly once, at creation. Only the SHA-256
hash is stored, alongside a hint that keeps the last three characters.
"""

import hashlib
import secrets

from hostpanel.application.interfaces import ApiTokenRepository
from hostpanel.application.schemas.operations import ApiTokenCreate
from hostpanel.domain.entities import ApiToken
from hostpanel.domain.entities.api_token import TOKEN_PERMISSIONS, TOKEN_PREFIX
from hostpanel.domain.exceptions import EntityNotFoundError, ValidationError

HINT_MASK = "*" * 15


def hash_token(plaintext: str) -> str:
    return hashlib.sha256(plaintext.encode("utf-8")).hexdigest()


def token_hint(plaintext: str) -> str:
    return f"{TOKEN_PREFIX}{HINT_MASK}{plaintext[-3:]}"


class ApiTokenService:

    def __init__(self, repository: ApiTokenRepository):
        self._repository = repository

    async def list_tokens(self) -> list[ApiToken]:
        return await self._repository.get_all()

    async def create_token(self, data: ApiTokenCreate) -> tuple[ApiToken, str]:
        """Create a token; returns the stored entity and the one-time plaintext."""
        name = data.name.strip()
        if not name:
            raise ValidationError("name", "Token name is required")
        unknown = sorted(set(data.permissions) - TOKEN_PERMISSIONS)
        if unknown:
            raise ValidationError("permissions", f"Unknown permissions: {', '.join(unknown)}")

        plaintext = TOKEN_PREFIX + secrets.token_urlsafe(32)
        token = ApiToken(
            name=name,
            token_hash=hash_token(plaintext),
            token_hint=token_hint(plaintext),
            permissions=sorted(set(data.permissions)),
        )
        return await self._repository.create(token), plaintext

    async def verify(self, plaintext: str, permission: str | None = None) -> ApiToken:
        token = await self._repository.get_by_hash(hash_token(plaintext))
        if token is None:
            raise EntityNotFoundError("ApiToken", token_hint(plaintext))
        if permission is not None and not token.allows(permission):
            raise ValidationError("permission", f"Token lacks the '{permission}' permission")
        token.touch()
        return await self._repository.update(token)

    async def delete_token(self, token_id: str) -> bool:
        if await self._repository.get_by_id(token_id) is None:
            raise EntityNotFoundError("ApiToken", token_id)
        return await self._repository.delete(token_id)
