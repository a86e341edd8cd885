# src/tenancy/domain/value_objects.py
from __future__ import annotations

import re
from enum import Enum
from typing import Optional, Union
from uuid import UUID

SCHEMA_PREFIX = "tenant_"
_TENANT_ID_RE = re.compile(r"^[a-z0-9_-]+$")
# Postgres truncates identifiers beyond 63 bytes
_MAX_IDENTIFIER_LEN = 63


def normalize_tenant_id(tenant_id: Union[str, UUID]) -> str:
    """Canonical cache/schema key for a tenant id (lower-case, stripped)."""
    value = str(tenant_id).strip().lower()
    if not value:
        raise ValueError("tenant id must be non-empty")
    if not _TENANT_ID_RE.match(value):
        raise ValueError(f"tenant id contains unsupported characters: {tenant_id!r}")
    return value


def tenant_schema_name(tenant_id: Union[str, UUID]) -> str:
    """
    Schema holding one tenant's tables: ``tenant_<id>`` with dashes turned
    into underscores. The result is always a bare, safe SQL identifier.
    """
    name = SCHEMA_PREFIX + normalize_tenant_id(tenant_id).replace("-", "_")
    if len(name) > _MAX_IDENTIFIER_LEN:
        raise ValueError(f"schema name too long for tenant id {tenant_id!r}")
    return name


def parse_tenant_id(raw: Optional[str]) -> Optional[UUID]:
    """Registry ids are UUIDs; anything else can never match a row."""
    if raw is None:
        return None
    try:
        return UUID(str(raw).strip())
    except ValueError:
        return None


# ───────────────────────── CRM enumerations ─────────────────────────
# Stored as text in the tenant schema and pinned by CHECK constraints.

class UserRole(str, Enum):
    ADMIN = "admin"
    SALES_REP = "sales_rep"
    MANAGER = "manager"
    USER = "user"


class LeadStatus(str, Enum):
    NEW = "new"
    CONTACTED = "contacted"
    QUALIFIED = "qualified"
    PROPOSAL = "proposal"
    NEGOTIATION = "negotiation"
    CLOSED_WON = "closed_won"
    CLOSED_LOST = "closed_lost"


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class InvoiceStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class CommunicationType(str, Enum):
    EMAIL = "email"
    PHONE = "phone"
    SMS = "sms"
    WHATSAPP = "whatsapp"
    IN_PERSON = "in_person"
