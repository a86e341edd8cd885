"""
Tenancy bounded context: tenant registry, per-tenant schema provisioning and
tenant-scoped connection pools.
"""
