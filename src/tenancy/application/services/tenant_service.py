# src/tenancy/application/services/tenant_service.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional

import structlog

from src.shared.exceptions import ConflictError, NotFoundError, TenantProvisioningError, ValidationError
from src.tenancy.application.services.tenant_pool_resolver import TenantPoolResolver
from src.tenancy.domain.entities import Tenant
from src.tenancy.domain.repositories import TenantRepository
from src.tenancy.domain.value_objects import parse_tenant_id

logger = structlog.get_logger(__name__)


def _required(value: Optional[str], field: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(
            "Name and domain are required",
            details={"field": field},
        )
    return cleaned


@dataclass
class TenantService:
    """
    Application service for the tenant registry.

    Registry reads and writes go through the repository (master pool);
    onboarding also provisions the tenant schema through the resolver.
    """
    repository: TenantRepository
    pool_resolver: TenantPoolResolver[Any]

    # ------------ Queries -----------------------------------------------------
    async def validate_tenant(self, tenant_id: Optional[str]) -> bool:
        """True when the id names a registered tenant. Malformed ids never match."""
        parsed = parse_tenant_id(tenant_id)
        if parsed is None:
            return False
        return await self.repository.exists(parsed)

    async def get_tenant(self, tenant_id: Optional[str]) -> Tenant:
        parsed = parse_tenant_id(tenant_id)
        tenant = await self.repository.get(parsed) if parsed is not None else None
        if tenant is None:
            raise NotFoundError("Tenant not found", code="tenant_not_found")
        return tenant

    async def list_tenants(self) -> List[Tenant]:
        return await self.repository.list_all()

    # ------------ Commands ----------------------------------------------------
    async def create_tenant(self, *, name: Optional[str], domain: Optional[str]) -> Tenant:
        """
        Register a tenant and provision its schema.

        - name/domain are trimmed; domain is lower-cased (domains are case-insensitive).
        - Domain uniqueness is checked up front and again by the DB constraint.
        - The registry row is committed before provisioning; a provisioning
          failure surfaces to the caller and the next access retries it.
        """
        clean_name = _required(name, "name")
        clean_domain = _required(domain, "domain").lower()

        if await self.repository.get_by_domain(clean_domain):
            raise ConflictError(
                f"Tenant domain '{clean_domain}' already exists",
                code="domain_taken",
            )

        tenant = await self.repository.add(clean_name, clean_domain)
        logger.info("tenant_registered", tenant_id=str(tenant.id), domain=tenant.domain)

        try:
            await self.pool_resolver.resolve(tenant.id)
        except Exception as exc:
            logger.error("tenant_onboarding_provisioning_failed", tenant_id=str(tenant.id), error=str(exc))
            raise TenantProvisioningError() from exc
        return tenant
