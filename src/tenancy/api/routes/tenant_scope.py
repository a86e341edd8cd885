# src/tenancy/api/routes/tenant_scope.py
from __future__ import annotations

from fastapi import APIRouter, Depends

from src.tenancy.api.dependencies import TenantRequestContext, require_tenant
from src.tenancy.api.schemas import TenantScopeResponse

router = APIRouter(prefix="/api/tenant", tags=["Tenant scope"])


@router.api_route(
    "/{path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    response_model=TenantScopeResponse,
)
async def tenant_scope(path: str, tenant: TenantRequestContext = Depends(require_tenant)):
    """Placeholder for tenant-scoped CRM resources; echoes the resolved tenant."""
    return TenantScopeResponse(tenantId=tenant.tenant_id)
