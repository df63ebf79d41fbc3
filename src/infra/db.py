"""PostgreSQL connectivity for the store adapters.

Each Pg*Store opens one short-lived session per lookup from the factory
built here. Nothing in the RBAC core holds a session across calls.
"""

from __future__ import annotations

import logging

import sqlalchemy as sa
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.shared.errors import ServiceUnavailableError

logger = logging.getLogger(__name__)


def create_db_engine(
    url: str,
    *,
    pool_size: int = 10,
    max_overflow: int = 20,
    echo: bool = False,
) -> AsyncEngine:
    """Build the asyncpg-backed engine; connections are pinged on checkout."""
    return create_async_engine(
        url,
        pool_size=pool_size,
        max_overflow=max_overflow,
        echo=echo,
        pool_pre_ping=True,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Rows are converted to domain values after commit without a re-fetch.
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


async def ping_database(engine: AsyncEngine) -> None:
    """Round-trip ``SELECT 1``; raises ServiceUnavailableError when unreachable."""
    try:
        async with engine.connect() as conn:
            await conn.execute(sa.text("SELECT 1"))
    except (SQLAlchemyError, OSError) as exc:
        logger.warning("Database ping failed: %s", exc)
        raise ServiceUnavailableError("database") from exc
