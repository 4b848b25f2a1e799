import asyncio
import time
from contextlib import asynccontextmanager

import pytest_asyncio
from psycopg_pool import AsyncConnectionPool

from app.infrastructure.db.pool import close_pool, get_pool


class _MiniPool:
    """Borrows connections with a generous timeout; exposes the real pool too."""

    def __init__(self, p: AsyncConnectionPool):
        self.raw = p

    @asynccontextmanager
    async def connection(self):
        conn = await self.raw.getconn(timeout=30)
        try:
            yield conn
        finally:
            await self.raw.putconn(conn)


async def _wait_pool_ready(p: AsyncConnectionPool, timeout: float = 30.0) -> None:
    """Retry SELECT 1 until Postgres accepts connections."""
    deadline = time.monotonic() + timeout
    last_exc: Exception | None = None
    while time.monotonic() < deadline:
        try:
            conn = await p.getconn(timeout=1)
            try:
                async with conn.cursor() as cur:
                    await cur.execute("SELECT 1;")
                    await cur.fetchone()
                return
            finally:
                await p.putconn(conn)
        except Exception as e:
            last_exc = e
            await asyncio.sleep(0.5)
    if last_exc:
        raise last_exc
    raise TimeoutError("database not ready")


@pytest_asyncio.fixture
async def pool() -> _MiniPool:
    p = get_pool()
    await p.open()
    await _wait_pool_ready(p, timeout=30)
    try:
        yield _MiniPool(p)
    finally:
        await close_pool()


@pytest_asyncio.fixture
async def truncate_passcodes(pool: _MiniPool):
    async with pool.connection() as conn:
        async with conn.transaction():
            async with conn.cursor() as cur:
                await cur.execute("TRUNCATE passcodes;")
    yield
    async with pool.connection() as conn:
        async with conn.transaction():
            async with conn.cursor() as cur:
                await cur.execute("TRUNCATE passcodes;")
