# src/tenancy/api/schemas.py
from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.tenancy.domain.entities import Tenant


class TenantCreate(BaseModel):
    """Tenant onboarding payload. Emptiness is checked by the service."""

    name: Optional[str] = Field(None, description="Display name", examples=["Acme"])
    domain: Optional[str] = Field(None, description="Unique tenant domain", examples=["acme.test"])

    model_config = {"str_strip_whitespace": True}


class TenantRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    domain: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, tenant: Tenant) -> "TenantRead":
        return cls.model_validate(tenant)


class TenantScopeResponse(BaseModel):
    success: bool = True
    tenantId: str
