# src/tenancy/infrastructure/tenant_repository.py
from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional
from uuid import UUID

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
import structlog

from src.shared.exceptions import ConflictError, DatabaseError
from src.tenancy.domain.entities import Tenant
from src.tenancy.infrastructure.models import TenantModel

logger = structlog.get_logger(__name__)


def to_domain(model: TenantModel) -> Tenant:
    return Tenant(
        id=model.id,
        name=model.name,
        domain=model.domain,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


class SqlAlchemyTenantRepository:
    """
    Registry repository over the master pool.

    Each call runs in its own short session; the registry has no multi-step
    use-cases that need a shared unit of work.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        async with self._session_factory() as session:
            try:
                yield session
            except IntegrityError as e:
                await session.rollback()
                if "uq_tenants_domain" in str(e.orig) or "domain" in str(e.orig):
                    raise ConflictError("Tenant domain already exists", code="domain_taken") from e
                raise ConflictError(code="conflict") from e
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error("tenant_registry_query_failed", error=str(e))
                raise DatabaseError() from e
            except (OSError, asyncio.TimeoutError) as e:
                logger.error("tenant_registry_unreachable", error=str(e))
                raise DatabaseError() from e

    # ---- Create -------------------------------------------------------------
    async def add(self, name: str, domain: str) -> Tenant:
        async with self._session() as session:
            model = TenantModel(name=name, domain=domain)
            session.add(model)
            await session.flush()
            await session.refresh(model)
            tenant = to_domain(model)
            await session.commit()
            return tenant

    # ---- Reads --------------------------------------------------------------
    async def get(self, tenant_id: UUID) -> Optional[Tenant]:
        async with self._session() as session:
            model = await session.get(TenantModel, tenant_id)
            return to_domain(model) if model else None

    async def get_by_domain(self, domain: str) -> Optional[Tenant]:
        async with self._session() as session:
            result = await session.execute(select(TenantModel).where(TenantModel.domain == domain))
            model = result.scalar_one_or_none()
            return to_domain(model) if model else None

    async def exists(self, tenant_id: UUID) -> bool:
        async with self._session() as session:
            result = await session.execute(select(exists().where(TenantModel.id == tenant_id)))
            return bool(result.scalar())

    async def list_all(self) -> List[Tenant]:
        async with self._session() as session:
            result = await session.execute(
                select(TenantModel).order_by(TenantModel.created_at.desc())
            )
            return [to_domain(m) for m in result.scalars().all()]
