from __future__ import annotations

import secrets
from typing import Optional

from redis.asyncio import Redis

from app.domain.entities import normalize_email
from app.domain.ports.reset_tokens import ResetTokenStorePort


class RedisResetTokens(ResetTokenStorePort):
    """Single-use password-reset tokens, each a Redis key with its own TTL."""

    def __init__(
        self, redis: Redis, *, key_prefix: str = "reset:", ttl_seconds: int = 900
    ) -> None:
        self._redis = redis
        self._prefix = key_prefix
        self._ttl = ttl_seconds

    def _key(self, token: str) -> str:
        return f"{self._prefix}{token}"

    async def create(self, email: str) -> str:
        token = secrets.token_urlsafe(32)
        await self._redis.set(self._key(token), normalize_email(email), ex=self._ttl)
        return token

    async def consume(self, token: str) -> Optional[str]:
        # GETDEL: two concurrent resets with the same token cannot both win
        return await self._redis.getdel(self._key(token))
