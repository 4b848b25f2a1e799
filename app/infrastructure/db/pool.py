from __future__ import annotations

from typing import Optional

from psycopg_pool import AsyncConnectionPool

from app.domain.errors import ConfigurationMissing
from app.settings import get_settings

_pool: Optional[AsyncConnectionPool] = None


def get_pool() -> AsyncConnectionPool:
    """
    Create (if needed) and return the global pool WITHOUT opening it.
    The lifespan opens it; nothing connects until then.
    """
    global _pool
    if _pool is None:
        dsn = get_settings().database_url
        if not dsn:
            raise ConfigurationMissing("DATABASE_URL is not set")
        _pool = AsyncConnectionPool(
            dsn,
            min_size=1,
            max_size=10,
            timeout=5,
            open=False,
        )
    return _pool


async def close_pool() -> None:
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None
