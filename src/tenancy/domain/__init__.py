from .entities import Tenant
from .repositories import TenantRepository
from .value_objects import (
    CommunicationType,
    InvoiceStatus,
    LeadStatus,
    TaskStatus,
    UserRole,
    normalize_tenant_id,
    parse_tenant_id,
    tenant_schema_name,
)

__all__ = [
    "Tenant",
    "TenantRepository",
    "CommunicationType",
    "InvoiceStatus",
    "LeadStatus",
    "TaskStatus",
    "UserRole",
    "normalize_tenant_id",
    "parse_tenant_id",
    "tenant_schema_name",
]
