# src/tenancy/api/routes/tenants.py
from __future__ import annotations

from fastapi import APIRouter, Depends, status

from src.dependencies import get_tenant_service
from src.shared.http.responses import created, ok
from src.tenancy.api.schemas import TenantCreate, TenantRead
from src.tenancy.application.services import TenantService

router = APIRouter(prefix="/api/tenants", tags=["Tenants"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_tenant(
    payload: TenantCreate,
    tenant_service: TenantService = Depends(get_tenant_service),
):
    """Register a tenant and provision its schema."""
    tenant = await tenant_service.create_tenant(name=payload.name, domain=payload.domain)
    return created(
        TenantRead.from_entity(tenant).model_dump(mode="json"),
        message="Tenant created successfully",
        location=f"/api/tenants/{tenant.id}",
    )


@router.get("/{tenant_id}")
async def get_tenant(
    tenant_id: str,
    tenant_service: TenantService = Depends(get_tenant_service),
):
    tenant = await tenant_service.get_tenant(tenant_id)
    return ok(TenantRead.from_entity(tenant).model_dump(mode="json"))


@router.get("")
async def list_tenants(tenant_service: TenantService = Depends(get_tenant_service)):
    """All tenants, newest first."""
    tenants = await tenant_service.list_tenants()
    return ok([TenantRead.from_entity(t).model_dump(mode="json") for t in tenants])
