from __future__ import annotations

from datetime import datetime
from typing import Any

from psycopg_pool import AsyncConnectionPool

from app.domain.entities import PasscodePurpose, PasscodeRecord, PurposeStats
from app.domain.ports.passcode_repository import PasscodeRepositoryPort

_COLUMNS = (
    "id, email, purpose, code_salt, code_digest, attempts, used, expires_at, created_at"
)


def _to_record(row: tuple[Any, ...]) -> PasscodeRecord:
    (
        id_,
        email,
        purpose,
        code_salt,
        code_digest,
        attempts,
        used,
        expires_at,
        created_at,
    ) = row
    return PasscodeRecord(
        id=str(id_),
        email=str(email),
        purpose=PasscodePurpose(purpose),
        code_salt=code_salt,
        code_digest=code_digest,
        attempts=int(attempts or 0),
        used=bool(used),
        expires_at=expires_at,
        created_at=created_at,
    )


class PgPasscodeRepository(PasscodeRepositoryPort):
    """
    Postgres-backed passcode storage (see migrations/0002_create_passcodes.sql).

    Each call runs in its own transaction. replace_active serializes issuers of
    the same slot with a transaction-scoped advisory lock, so two concurrent
    issues can never both leave a live code behind.
    """

    def __init__(self, pool: AsyncConnectionPool) -> None:
        self._pool = pool

    async def replace_active(self, record: PasscodeRecord) -> PasscodeRecord:
        lock_sql = "SELECT pg_advisory_xact_lock(hashtext(%s));"
        invalidate_sql = """
        UPDATE passcodes
        SET used = TRUE
        WHERE email = %s AND purpose = %s AND used = FALSE;
        """
        insert_sql = f"""
        INSERT INTO passcodes (email, purpose, code_salt, code_digest, expires_at, created_at)
        VALUES (%s, %s, %s, %s, %s, %s)
        RETURNING {_COLUMNS};
        """
        slot = f"{record.email}|{record.purpose.value}"
        async with self._pool.connection() as conn:
            async with conn.transaction():
                async with conn.cursor() as cur:
                    await cur.execute(lock_sql, (slot,))
                    await cur.execute(
                        invalidate_sql, (record.email, record.purpose.value)
                    )
                    await cur.execute(
                        insert_sql,
                        (
                            record.email,
                            record.purpose.value,
                            record.code_salt,
                            record.code_digest,
                            record.expires_at,
                            record.created_at,
                        ),
                    )
                    row = await cur.fetchone()
        if not row:
            raise RuntimeError("replace_active returned no row")
        return _to_record(row)

    async def find_active(
        self, email: str, purpose: PasscodePurpose
    ) -> PasscodeRecord | None:
        sql = f"""
        SELECT {_COLUMNS}
        FROM passcodes
        WHERE email = %s AND purpose = %s AND used = FALSE
        ORDER BY created_at DESC
        LIMIT 1;
        """
        async with self._pool.connection() as conn:
            async with conn.cursor() as cur:
                await cur.execute(sql, (email, PasscodePurpose(purpose).value))
                row = await cur.fetchone()
        return _to_record(row) if row else None

    async def register_attempt(
        self, record_id: str, *, consume: bool, max_attempts: int
    ) -> PasscodeRecord | None:
        sql = f"""
        UPDATE passcodes
        SET attempts = attempts + 1,
            used = used OR %s
        WHERE id = %s AND used = FALSE AND attempts < %s
        RETURNING {_COLUMNS};
        """
        async with self._pool.connection() as conn:
            async with conn.transaction():
                async with conn.cursor() as cur:
                    await cur.execute(sql, (consume, record_id, max_attempts))
                    row = await cur.fetchone()
        return _to_record(row) if row else None

    async def delete_expired(self, now: datetime) -> int:
        sql = "DELETE FROM passcodes WHERE expires_at <= %s;"
        async with self._pool.connection() as conn:
            async with conn.transaction():
                async with conn.cursor() as cur:
                    await cur.execute(sql, (now,))
                    return cur.rowcount

    async def stats(self, now: datetime) -> list[PurposeStats]:
        sql = """
        SELECT purpose,
               COUNT(*) AS total,
               COUNT(*) FILTER (WHERE used) AS used,
               COUNT(*) FILTER (WHERE expires_at <= %s) AS expired
        FROM passcodes
        GROUP BY purpose
        ORDER BY purpose;
        """
        async with self._pool.connection() as conn:
            async with conn.cursor() as cur:
                await cur.execute(sql, (now,))
                rows = await cur.fetchall()
        return [
            PurposeStats(
                purpose=PasscodePurpose(purpose),
                total=int(total),
                used=int(used),
                expired=int(expired),
            )
            for purpose, total, used, expired in rows or ()
        ]
