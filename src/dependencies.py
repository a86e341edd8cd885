# src/dependencies.py
"""
Composition root: builds the long-lived components once per process and
exposes them to routes through FastAPI dependencies.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncEngine
import structlog

from src.config import Settings
from src.shared.database import (
    DatabaseHealthCheck,
    create_database_engine,
    create_session_factory,
    ping,
)
from src.tenancy.application.services import TenantPoolResolver, TenantService
from src.tenancy.infrastructure import (
    SqlAlchemyTenantPoolFactory,
    SqlAlchemyTenantRepository,
    TenantSchemaProvisioner,
)

logger = structlog.get_logger(__name__)


class HealthCheck(Protocol):
    async def check_connection(self) -> Dict[str, Any]: ...


@dataclass
class AppContainer:
    settings: Settings
    tenant_service: TenantService
    pool_resolver: TenantPoolResolver[Any]
    health_check: HealthCheck
    master_engine: Optional[AsyncEngine] = None

    async def close(self) -> None:
        """Tenant pools first, then the shared master pool."""
        await self.pool_resolver.close()
        if self.master_engine is not None:
            await self.master_engine.dispose()
            logger.info("Database engine disposed")


async def build_container(settings: Settings) -> AppContainer:
    engine = create_database_engine(settings)
    try:
        await ping(engine)
    except Exception as e:
        logger.error("Master database connection failed", error=str(e))
        await engine.dispose()
        raise
    logger.info(
        "Master database connection established",
        database=settings.effective_database_url.render_as_string(hide_password=True),
    )

    resolver: TenantPoolResolver[Any] = TenantPoolResolver(
        TenantSchemaProvisioner(engine),
        SqlAlchemyTenantPoolFactory(settings),
    )
    repository = SqlAlchemyTenantRepository(create_session_factory(engine))
    return AppContainer(
        settings=settings,
        tenant_service=TenantService(repository=repository, pool_resolver=resolver),
        pool_resolver=resolver,
        health_check=DatabaseHealthCheck(engine),
        master_engine=engine,
    )


# --- FastAPI dependencies ----------------------------------------------------
def get_container(request: Request) -> AppContainer:
    container = getattr(request.app.state, "container", None)
    if container is None:
        raise RuntimeError("Application container not initialized")
    return container


def get_tenant_service(container: AppContainer = Depends(get_container)) -> TenantService:
    return container.tenant_service


def get_pool_resolver(container: AppContainer = Depends(get_container)) -> TenantPoolResolver[Any]:
    return container.pool_resolver
