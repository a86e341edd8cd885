# src/tenancy/domain/protocols.py
from __future__ import annotations

from typing import Protocol, TypeVar


class DisposablePool(Protocol):
    async def dispose(self) -> None: ...


PoolT_co = TypeVar("PoolT_co", bound=DisposablePool, covariant=True)


class SchemaProvisioner(Protocol):
    """Idempotent migration of one tenant schema (schema, tables, indexes)."""

    async def provision(self, schema_name: str) -> None: ...


class PoolFactory(Protocol[PoolT_co]):
    """Builds a verified connection pool scoped to one tenant schema."""

    async def create(self, tenant_id: str, schema_name: str) -> PoolT_co: ...
