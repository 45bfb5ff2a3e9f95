import logging
from typing import Any

from app.auth.models.user import User
from app.core import redis as redis_module
from app.core import security

logger = logging.getLogger(__name__)


class TokenService:
    """Issues JWT pairs and tracks refresh tokens in Redis"""

    def issue_pair(self, user: User) -> tuple[str, str]:
        token_data = {"sub": str(user.id), "email": user.email, "role": user.role.value}
        return security.create_access_token(token_data), security.create_refresh_token(token_data)

    async def store_refresh_token(self, token: str, user_id: str) -> None:
        """Store refresh token hash in Redis with TTL"""
        await redis_module.store_refresh_token(
            security.hash_token(token), user_id, security.refresh_token_ttl_seconds()
        )

    async def validate_refresh_token(self, token: str) -> dict[str, Any] | None:
        """Check if refresh token exists in Redis and is not revoked"""
        return await redis_module.get_refresh_token(security.hash_token(token))

    async def revoke_refresh_token(self, token: str) -> None:
        await redis_module.revoke_refresh_token(security.hash_token(token))

    async def revoke_all(self, user_id: str) -> int:
        return await redis_module.revoke_all_user_tokens(user_id)


token_service = TokenService()
