# src/tenancy/application/services/tenant_pool_resolver.py
"""
Tenant pool resolution with single-flight creation.

``resolve(tenant_id)`` returns the pool cached for the tenant or, on first
access, provisions the tenant schema, builds a pool scoped to it and caches
the result. Concurrent first-time callers for one tenant id share a single
in-flight build, so provisioning and pool construction run exactly once.

The cache is written only after the whole build succeeded; a failed build
leaves no entry behind and the next call starts from scratch.
"""

from __future__ import annotations

import asyncio
from typing import Dict, Generic, List, Optional, TypeVar, Union
from uuid import UUID

import structlog

from src.shared.logging import time_block
from src.tenancy.domain.protocols import DisposablePool, PoolFactory, SchemaProvisioner
from src.tenancy.domain.value_objects import normalize_tenant_id, tenant_schema_name

logger = structlog.get_logger(__name__)

PoolT = TypeVar("PoolT", bound=DisposablePool)


class ResolverClosedError(RuntimeError):
    """Raised when resolving through a resolver that has been shut down."""


class TenantPoolResolver(Generic[PoolT]):
    def __init__(self, provisioner: SchemaProvisioner, pool_factory: PoolFactory[PoolT]) -> None:
        self._provisioner = provisioner
        self._pool_factory = pool_factory
        self._pools: Dict[str, PoolT] = {}
        self._inflight: Dict[str, "asyncio.Task[PoolT]"] = {}
        self._closed = False

    # ---- Introspection -------------------------------------------------------
    def __len__(self) -> int:
        return len(self._pools)

    def cached_tenant_ids(self) -> List[str]:
        return sorted(self._pools)

    def get_cached(self, tenant_id: Union[str, UUID]) -> Optional[PoolT]:
        return self._pools.get(normalize_tenant_id(tenant_id))

    @property
    def closed(self) -> bool:
        return self._closed

    # ---- Resolution ----------------------------------------------------------
    async def resolve(self, tenant_id: Union[str, UUID]) -> PoolT:
        if self._closed:
            raise ResolverClosedError("tenant pool resolver is closed")

        key = normalize_tenant_id(tenant_id)
        pool = self._pools.get(key)
        if pool is not None:
            return pool

        task = self._inflight.get(key)
        if task is None:
            task = asyncio.get_running_loop().create_task(self._build(key))
            self._inflight[key] = task
            task.add_done_callback(lambda t, k=key: self._forget(k, t))

        # shield: a cancelled caller must not cancel the build other callers wait on
        return await asyncio.shield(task)

    def _forget(self, key: str, task: "asyncio.Task[PoolT]") -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
        if not task.cancelled():
            # mark retrieved; every waiter already receives it through shield()
            task.exception()

    async def _build(self, key: str) -> PoolT:
        schema_name = tenant_schema_name(key)
        try:
            with time_block("tenant.provision", logger=logger, labels={"schema": schema_name}):
                await self._provisioner.provision(schema_name)
            pool = await self._pool_factory.create(key, schema_name)
        except Exception as exc:
            logger.error(
                "tenant_pool_creation_failed",
                tenant_id=key,
                schema=schema_name,
                error=str(exc),
            )
            raise

        if self._closed:
            await pool.dispose()
            raise ResolverClosedError("tenant pool resolver closed during creation")

        self._pools[key] = pool
        logger.info("tenant_pool_created", tenant_id=key, schema=schema_name)
        return pool

    # ---- Shutdown ------------------------------------------------------------
    async def close(self) -> None:
        """Dispose every cached pool. Pending builds are cancelled."""
        self._closed = True

        pending = list(self._inflight.values())
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        pools = list(self._pools.items())
        self._pools.clear()
        results = await asyncio.gather(*(pool.dispose() for _, pool in pools), return_exceptions=True)
        for (key, _), result in zip(pools, results):
            if isinstance(result, Exception):
                logger.warning("tenant_pool_dispose_failed", tenant_id=key, error=str(result))
        logger.info("tenant_pools_closed", count=len(pools))
