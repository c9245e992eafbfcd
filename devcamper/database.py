"""PostgreSQL pool and schema migrations for the credential store."""

from pathlib import Path
from typing import Optional

import asyncpg
import structlog

from devcamper.config import get_settings

logger = structlog.get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "migrations"

# Advisory lock key held while migrating so that only one instance applies files
MIGRATION_LOCK_KEY = 7_220_611

MIGRATION_LEDGER_DDL = """
CREATE TABLE IF NOT EXISTS schema_migrations (
    filename VARCHAR(255) PRIMARY KEY,
    applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
)
"""

_pool: Optional[asyncpg.Pool] = None


async def _init_connection(conn: asyncpg.Connection) -> None:
    # Reset expiry is compared against timestamps written in UTC
    await conn.execute("SET TIME ZONE 'UTC'")


async def get_pool() -> asyncpg.Pool:
    """Return the shared pool opened by ``init_database``.

    Raises:
        RuntimeError: If the pool has not been opened
    """
    if _pool is None:
        raise RuntimeError("Database pool not initialized. Call init_database() first.")
    return _pool


async def init_database() -> asyncpg.Pool:
    """Open the connection pool sized from settings.

    Calling it again while a pool is open returns that pool.
    """
    global _pool

    if _pool is not None:
        return _pool

    settings = get_settings()
    try:
        _pool = await asyncpg.create_pool(
            settings.postgres_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            command_timeout=settings.db_command_timeout,
            init=_init_connection,
        )
    except Exception as e:
        logger.error("database_pool_creation_failed", error=str(e))
        raise

    logger.info(
        "database_pool_created",
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
    )
    return _pool


async def close_database() -> None:
    global _pool

    if _pool is None:
        return
    pool, _pool = _pool, None
    await pool.close()
    logger.info("database_pool_closed")


def pending_migrations(applied: set[str], directory: Path = MIGRATIONS_DIR) -> list[Path]:
    """SQL files in ``directory`` not yet recorded in ``applied``, ordered by name."""
    return [path for path in sorted(directory.glob("*.sql")) if path.name not in applied]


async def run_migrations(directory: Path = MIGRATIONS_DIR) -> list[str]:
    """Apply each migration file that this database has not seen yet.

    Every file runs in its own transaction together with the insert that
    records it in ``schema_migrations``, so a failed file leaves no trace
    and is retried on the next start.

    Args:
        directory: Folder holding ``NNN_name.sql`` files

    Returns:
        Names of the files applied by this call, in order
    """
    if not directory.is_dir():
        logger.warning("migrations_directory_not_found", path=str(directory))
        return []

    pool = await get_pool()
    applied_now: list[str] = []

    async with pool.acquire() as conn:
        await conn.execute(MIGRATION_LEDGER_DDL)
        await conn.execute("SELECT pg_advisory_lock($1)", MIGRATION_LOCK_KEY)
        try:
            rows = await conn.fetch("SELECT filename FROM schema_migrations")
            applied = {row["filename"] for row in rows}

            for path in pending_migrations(applied, directory):
                try:
                    async with conn.transaction():
                        await conn.execute(path.read_text())
                        await conn.execute(
                            "INSERT INTO schema_migrations (filename) VALUES ($1)",
                            path.name,
                        )
                except asyncpg.PostgresError as e:
                    logger.error("migration_failed", file=path.name, error=str(e))
                    raise
                logger.info("migration_applied", file=path.name)
                applied_now.append(path.name)
        finally:
            await conn.execute("SELECT pg_advisory_unlock($1)", MIGRATION_LOCK_KEY)

    if not applied_now:
        logger.info("migrations_up_to_date", known=len(applied))
    return applied_now


async def health_check() -> bool:
    """True when a pooled connection answers a trivial query."""
    try:
        pool = await get_pool()
        async with pool.acquire() as conn:
            return await conn.fetchval("SELECT 1") == 1
    except Exception as e:
        logger.error("database_health_check_failed", error=str(e))
        return False
