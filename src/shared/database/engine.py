from __future__ import annotations

from typing import Any, Dict, Optional

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool
import structlog

from src.config import Settings

logger = structlog.get_logger(__name__)


def _connect_args(settings: Settings, search_path: Optional[str]) -> Dict[str, Any]:
    server_settings = {
        "application_name": f"{settings.PROJECT_NAME}-{settings.ENVIRONMENT}",
        "statement_timeout": str(settings.DB_STATEMENT_TIMEOUT_MS),
    }
    if search_path:
        server_settings["search_path"] = search_path
    args: Dict[str, Any] = {
        "server_settings": server_settings,
        "timeout": settings.DB_CONNECT_TIMEOUT,
    }
    if settings.database_ssl:
        args["ssl"] = "require"
    return args


def create_database_engine(
    settings: Settings,
    *,
    search_path: Optional[str] = None,
    pool_size: Optional[int] = None,
    max_overflow: Optional[int] = None,
) -> AsyncEngine:
    """
    Build an async engine (one connection pool) with sane pooling defaults.

    ``search_path`` pins every pooled connection to one schema; the master
    engine leaves it unset and works in the default schema.
    """
    pool_kwargs: Dict[str, Any]
    if settings.TESTING:
        pool_kwargs = {"poolclass": NullPool}
    else:
        pool_kwargs = {
            "pool_size": pool_size if pool_size is not None else settings.DB_POOL_SIZE,
            "max_overflow": max_overflow if max_overflow is not None else settings.DB_MAX_OVERFLOW,
            "pool_timeout": settings.DB_POOL_TIMEOUT,
            "pool_recycle": settings.DB_POOL_RECYCLE,
        }

    return create_async_engine(
        settings.effective_database_url,
        echo=False,
        pool_pre_ping=True,
        connect_args=_connect_args(settings, search_path),
        **pool_kwargs,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,  # Explicit flush control
    )


async def ping(engine: AsyncEngine) -> None:
    """Smoke test: raises if the database is unreachable."""
    async with engine.connect() as conn:
        await conn.execute(sa.text("SELECT 1"))
