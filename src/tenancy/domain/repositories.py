# src/tenancy/domain/repositories.py
from __future__ import annotations

from typing import List, Optional, Protocol
from uuid import UUID

from src.tenancy.domain.entities import Tenant


class TenantRepository(Protocol):
    """Registry persistence port. Implementations own their sessions."""

    async def add(self, name: str, domain: str) -> Tenant:
        """Insert a tenant; raises ConflictError when the domain is taken."""
        ...

    async def get(self, tenant_id: UUID) -> Optional[Tenant]: ...

    async def get_by_domain(self, domain: str) -> Optional[Tenant]: ...

    async def exists(self, tenant_id: UUID) -> bool: ...

    async def list_all(self) -> List[Tenant]:
        """All tenants, newest first."""
        ...
