# src/tenancy/api/dependencies.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from fastapi import Depends, Header, Request
import structlog

from src.dependencies import get_pool_resolver, get_tenant_service
from src.shared.exceptions import DomainError, NotFoundError, TenantProvisioningError, ValidationError
from src.shared.logging import bind_request_context
from src.tenancy.application.services import TenantPoolResolver, TenantService
from src.tenancy.domain.value_objects import parse_tenant_id

logger = structlog.get_logger(__name__)

TENANT_ID_HEADER = "x-tenant-id"


@dataclass(frozen=True)
class TenantRequestContext:
    tenant_id: str
    pool: Any


async def require_tenant(
    request: Request,
    x_tenant_id: Optional[str] = Header(default=None, alias=TENANT_ID_HEADER),
    tenant_service: TenantService = Depends(get_tenant_service),
    pool_resolver: TenantPoolResolver[Any] = Depends(get_pool_resolver),
) -> TenantRequestContext:
    """
    Tenant-scoped request gate:
      1) x-tenant-id must be present (400)
      2) the id must be a UUID in the registry (404), checked before any pool work;
         it is canonicalised so every spelling shares one pool
      3) the tenant pool is resolved (provisioned on first access)
    """
    raw = (x_tenant_id or "").strip()
    if not raw:
        raise ValidationError(code="tenant_header_missing")

    # one spelling per tenant: the pool cache and schema name key off it
    parsed = parse_tenant_id(raw)
    if parsed is None or not await tenant_service.validate_tenant(str(parsed)):
        raise NotFoundError("Tenant not found", code="tenant_not_found")
    tenant_id = str(parsed)

    try:
        pool = await pool_resolver.resolve(tenant_id)
    except DomainError:
        raise
    except Exception as exc:
        logger.error("tenant_pool_resolution_failed", tenant_id=tenant_id, error=str(exc))
        raise TenantProvisioningError() from exc

    bind_request_context(tenant_id=tenant_id)
    request.state.tenant_id = tenant_id
    request.state.tenant_pool = pool
    return TenantRequestContext(tenant_id=tenant_id, pool=pool)
