from .tenant_scope import router as tenant_scope_router
from .tenants import router as tenants_router

__all__ = ["tenant_scope_router", "tenants_router"]
