from .models import TenantModel
from .provisioner import TenantSchemaProvisioner, build_ddl
from .tenant_pool import SqlAlchemyTenantPoolFactory, TenantPool
from .tenant_repository import SqlAlchemyTenantRepository
from .tenant_schema import TENANT_TABLE_NAMES, tenant_metadata

__all__ = [
    "TenantModel",
    "TenantSchemaProvisioner",
    "build_ddl",
    "SqlAlchemyTenantPoolFactory",
    "TenantPool",
    "SqlAlchemyTenantRepository",
    "TENANT_TABLE_NAMES",
    "tenant_metadata",
]
