from __future__ import annotations

from typing import Optional

import psycopg

from app.domain.entities import User
from app.domain.ports.user_repository import UserRepositoryPort


class PgUserRepository(UserRepositoryPort):
    """
    Postgres implementation of UserRepositoryPort.

    Bound to the connection of the enclosing PgUnitOfWork; never commits.
    """

    def __init__(self, conn: psycopg.AsyncConnection) -> None:
        self._conn = conn

    async def get_by_email(self, email: str) -> Optional[User]:
        sql = """
        SELECT id, email, username
        FROM users
        WHERE email = LOWER(TRIM(%s))
        """
        async with self._conn.cursor() as cur:
            await cur.execute(sql, (email,))
            row = await cur.fetchone()
        if not row:
            return None
        id_, db_email, db_username = row
        return User(id=str(id_), email=str(db_email), username=db_username)

    async def set_password_hash(self, user_id: str, password_hash: str) -> None:
        sql = """
        UPDATE users
        SET password_hash = %s,
            updated_at = now()
        WHERE id = %s
        """
        async with self._conn.cursor() as cur:
            await cur.execute(sql, (password_hash, user_id))
            if cur.rowcount != 1:
                raise RuntimeError(f"set_password_hash updated {cur.rowcount} rows")
