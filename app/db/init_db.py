"""
Create missing tables and seed the admin user.

Run once per environment (safe to re-run) with env set:
  DATABASE_URL=postgresql+asyncpg://...
  ADMIN_USERNAME=admin
  ADMIN_PASSWORD=YourSecurePassword

Existing tables are left untouched; the admin password is reset to
ADMIN_PASSWORD when it differs.
"""
import asyncio

import structlog
from sqlalchemy.ext.asyncio import AsyncEngine

import app.auth.models  # noqa: F401  registers users / auth_sessions on Base.metadata
import app.core.models  # noqa: F401
from app.auth.services import ensure_admin_user
from app.core.config import settings
from app.core.logging_config import configure_logging
from app.db.session import AsyncSessionLocal, Base, engine

logger = structlog.get_logger(__name__)


async def create_tables(db_engine: AsyncEngine) -> None:
    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("tables_ready", tables=sorted(Base.metadata.tables))


async def main() -> None:
    configure_logging()
    await create_tables(engine)
    async with AsyncSessionLocal() as db:
        try:
            await ensure_admin_user(db, settings.admin_username, settings.admin_password)
        except Exception:
            await db.rollback()
            logger.exception("admin_seed_failed")
            raise
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
