# src/tenancy/infrastructure/tenant_pool.py
from __future__ import annotations

from dataclasses import dataclass

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
import structlog

from src.config import Settings
from src.shared.database.engine import create_database_engine, create_session_factory

logger = structlog.get_logger(__name__)


class SchemaMismatchError(RuntimeError):
    """A freshly built tenant pool does not land in the tenant schema."""


@dataclass(frozen=True)
class TenantPool:
    """
    Runtime handle for one tenant: an engine (connection pool) whose
    connections all use the tenant schema as search_path.
    """
    tenant_id: str
    schema_name: str
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]

    def session(self) -> AsyncSession:
        return self.session_factory()

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("tenant_pool_disposed", tenant_id=self.tenant_id)


class SqlAlchemyTenantPoolFactory:
    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    async def create(self, tenant_id: str, schema_name: str) -> TenantPool:
        engine = create_database_engine(
            self._settings,
            search_path=schema_name,
            pool_size=self._settings.TENANT_POOL_SIZE,
            max_overflow=self._settings.TENANT_MAX_OVERFLOW,
        )
        try:
            async with engine.connect() as conn:
                current = (await conn.execute(sa.text("SELECT current_schema()"))).scalar()
            if current != schema_name:
                raise SchemaMismatchError(
                    f"tenant pool for {tenant_id} resolved schema {current!r}, expected {schema_name!r}"
                )
        except BaseException:
            await engine.dispose()
            raise

        return TenantPool(
            tenant_id=tenant_id,
            schema_name=schema_name,
            engine=engine,
            session_factory=create_session_factory(engine),
        )
