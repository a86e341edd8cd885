# src/tenancy/domain/entities.py

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class Tenant:
    """
    An isolated customer organization, as recorded in the shared registry.

    The registry row is the only cross-tenant record; everything else a tenant
    owns lives in its own schema (see ``tenant_schema_name``).
    """
    id: UUID
    name: str
    domain: str
    created_at: datetime
    updated_at: datetime

    def __post_init__(self) -> None:
        """Validate tenant invariants."""
        if not self.name or not self.name.strip():
            raise ValueError("Tenant name cannot be empty")
        if not self.domain or not self.domain.strip():
            raise ValueError("Tenant domain cannot be empty")
