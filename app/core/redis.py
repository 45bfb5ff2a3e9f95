import json
from typing import Any

from redis.asyncio import Redis

from app.core.datetime_utils import utcnow

REFRESH_TOKEN_PREFIX = "refresh_token:"

# Global Redis client instance, set by the application lifespan
redis_client: Redis | None = None


def _client() -> Redis:
    if redis_client is None:
        raise RuntimeError("Redis client is not initialized")
    return redis_client


async def store_refresh_token(token_hash: str, user_id: str, ttl_seconds: int) -> None:
    """
    Store a refresh token hash with the owning user and a TTL.

    Example:
        await store_refresh_token("abc123...", "user-uuid", 604800)
    """
    value = json.dumps({"user_id": user_id, "created_at": utcnow().isoformat()})
    await _client().setex(f"{REFRESH_TOKEN_PREFIX}{token_hash}", ttl_seconds, value)


async def get_refresh_token(token_hash: str) -> dict[str, Any] | None:
    """
    Look up a stored refresh token.

    Returns:
        {"user_id": ..., "created_at": ...} or None when unknown or expired
    """
    data = await _client().get(f"{REFRESH_TOKEN_PREFIX}{token_hash}")
    if data:
        result: dict[str, Any] = json.loads(data)
        return result
    return None


async def revoke_refresh_token(token_hash: str) -> None:
    await _client().delete(f"{REFRESH_TOKEN_PREFIX}{token_hash}")


async def revoke_all_user_tokens(user_id: str) -> int:
    """
    Revoke every refresh token of one user (logout from all devices).

    Returns:
        Number of tokens revoked
    """
    client = _client()
    cursor = 0
    revoked_count = 0

    while True:
        cursor, keys = await client.scan(cursor, match=f"{REFRESH_TOKEN_PREFIX}*", count=100)

        for key in keys:
            data = await client.get(key)
            if data and json.loads(data).get("user_id") == user_id:
                await client.delete(key)
                revoked_count += 1

        if cursor == 0:
            break

    return revoked_count
