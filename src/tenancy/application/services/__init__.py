from .tenant_pool_resolver import ResolverClosedError, TenantPoolResolver
from .tenant_service import TenantService

__all__ = ["ResolverClosedError", "TenantPoolResolver", "TenantService"]
