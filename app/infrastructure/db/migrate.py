from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path

import psycopg

from app.logging import setup_logging
from app.settings import get_settings

logger = logging.getLogger("app.infrastructure.db.migrate")

MIGRATIONS_DIR = Path(os.environ.get("MIGRATIONS_DIR", "migrations"))
SCHEMA_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS schema_migrations (
  version    text PRIMARY KEY,
  applied_at timestamptz NOT NULL DEFAULT now()
);
"""


class MigrationError(RuntimeError):
    pass


def list_migrations(directory: Path = MIGRATIONS_DIR) -> list[Path]:
    if not directory.exists():
        raise MigrationError(f"migrations dir not found: {directory}")
    return sorted(directory.glob("*.sql"))


def applied_versions(conn: psycopg.Connection) -> set[str]:
    with conn.cursor() as cur:
        cur.execute(SCHEMA_TABLE_SQL)
        cur.execute("SELECT version FROM schema_migrations ORDER BY version;")
        rows = cur.fetchall()
    return {r[0] for r in rows}


def pending(all_paths: list[Path], done: set[str]) -> list[Path]:
    return [p for p in all_paths if p.stem not in done]


def apply_one(conn: psycopg.Connection, path: Path) -> None:
    version = path.stem
    logger.info("applying migration", extra={"version": version})
    with conn.cursor() as cur:
        cur.execute(path.read_text(encoding="utf-8"))
        cur.execute(
            "INSERT INTO schema_migrations (version, applied_at) VALUES (%s, now());",
            (version,),
        )
    conn.commit()


def cmd_up(dsn: str) -> int:
    with psycopg.connect(dsn, autocommit=False) as conn:
        to_run = pending(list_migrations(), applied_versions(conn))
        if not to_run:
            logger.info("no pending migrations")
            return 0
        for path in to_run:
            try:
                apply_one(conn, path)
            except psycopg.Error:
                conn.rollback()
                logger.exception("migration failed", extra={"version": path.stem})
                return 1
    return 0


def cmd_status(dsn: str) -> int:
    with psycopg.connect(dsn) as conn:
        done = applied_versions(conn)
    for path in list_migrations():
        state = "applied" if path.stem in done else "pending"
        print(f"{state:8} {path.stem}")
    return 0


def cmd_new(name: str) -> int:
    ts = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M")
    path = MIGRATIONS_DIR / f"{ts}_{name}.sql"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("-- write your SQL here\n", encoding="utf-8")
    print(str(path))
    return 0


def main(argv: list[str]) -> int:
    settings = get_settings()
    setup_logging(settings.log_level)
    usage = "usage: python -m app.infrastructure.db.migrate [up|status|new <name>]"
    if len(argv) < 2:
        print(usage, file=sys.stderr)
        return 2
    cmd = argv[1]
    try:
        if cmd == "up":
            return cmd_up(settings.database_url)
        if cmd == "status":
            return cmd_status(settings.database_url)
        if cmd == "new" and len(argv) >= 3:
            return cmd_new(argv[2])
    except MigrationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    print(usage, file=sys.stderr)
    return 2


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
