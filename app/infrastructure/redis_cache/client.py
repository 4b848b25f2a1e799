from __future__ import annotations

from typing import Optional

from redis.asyncio import Redis

from app.settings import get_settings

_client: Optional[Redis] = None


def get_redis() -> Redis:
    """
    Lazily built shared client for REDIS_URL.
    decode_responses=True, so values come back as str.
    """
    global _client
    if _client is None:
        _client = Redis.from_url(
            get_settings().redis_url, encoding="utf-8", decode_responses=True
        )
    return _client


async def close_redis() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
