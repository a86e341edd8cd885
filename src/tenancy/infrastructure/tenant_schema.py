# src/tenancy/infrastructure/tenant_schema.py
"""
Fixed table set provisioned into every tenant schema.

Tables are declared without a schema; the provisioner renders them into
``tenant_<id>`` through ``schema_translate_map``. All foreign keys stay
inside the same tenant schema.
"""

from __future__ import annotations

from enum import Enum
from typing import Type

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from src.tenancy.domain.value_objects import (
    CommunicationType,
    InvoiceStatus,
    LeadStatus,
    TaskStatus,
    UserRole,
)

tenant_metadata = sa.MetaData()


def _id() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        primary_key=True,
        server_default=sa.text("gen_random_uuid()"),
    )


def _timestamps() -> tuple[sa.Column, sa.Column]:
    return (
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text("NOW()")),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text("NOW()")),
    )


def _one_of(column: str, enum: Type[Enum], name: str) -> sa.CheckConstraint:
    values = ", ".join(f"'{member.value}'" for member in enum)
    return sa.CheckConstraint(f"{column} IN ({values})", name=name)


def _fk(column: str, target: str, *, nullable: bool = False, ondelete: str = "CASCADE") -> sa.Column:
    return sa.Column(
        column,
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey(f"{target}.id", ondelete=ondelete),
        nullable=nullable,
    )


users = sa.Table(
    "users",
    tenant_metadata,
    _id(),
    sa.Column("first_name", sa.Text, nullable=False),
    sa.Column("last_name", sa.Text, nullable=False),
    sa.Column("email", sa.Text, nullable=False, unique=True),
    sa.Column("password", sa.Text, nullable=False),
    sa.Column("role", sa.Text, nullable=False, server_default=UserRole.USER.value),
    *_timestamps(),
    _one_of("role", UserRole, "ck_users_role"),
)

organizations = sa.Table(
    "organizations",
    tenant_metadata,
    _id(),
    sa.Column("name", sa.Text, nullable=False),
    sa.Column("industry", sa.Text),
    sa.Column("address", sa.Text),
    *_timestamps(),
)

contacts = sa.Table(
    "contacts",
    tenant_metadata,
    _id(),
    _fk("user_id", "users"),
    _fk("organization_id", "organizations", nullable=True, ondelete="SET NULL"),
    sa.Column("first_name", sa.Text, nullable=False),
    sa.Column("last_name", sa.Text, nullable=False),
    sa.Column("email", sa.Text),
    sa.Column("phone", sa.Text),
    *_timestamps(),
)

pipelines = sa.Table(
    "pipelines",
    tenant_metadata,
    _id(),
    sa.Column("name", sa.Text, nullable=False),
    sa.Column("description", sa.Text),
    *_timestamps(),
)

leads = sa.Table(
    "leads",
    tenant_metadata,
    _id(),
    _fk("organization_id", "organizations", nullable=True, ondelete="SET NULL"),
    _fk("pipeline_id", "pipelines", nullable=True, ondelete="SET NULL"),
    sa.Column("first_name", sa.Text, nullable=False),
    sa.Column("last_name", sa.Text, nullable=False),
    sa.Column("email", sa.Text),
    sa.Column("phone", sa.Text),
    sa.Column("status", sa.Text, nullable=False, server_default=LeadStatus.NEW.value),
    sa.Column("source", sa.Text),
    *_timestamps(),
    _one_of("status", LeadStatus, "ck_leads_status"),
)

tasks = sa.Table(
    "tasks",
    tenant_metadata,
    _id(),
    _fk("user_id", "users"),
    sa.Column("title", sa.Text, nullable=False),
    sa.Column("description", sa.Text),
    sa.Column("status", sa.Text, nullable=False, server_default=TaskStatus.TODO.value),
    sa.Column("due_date", sa.TIMESTAMP(timezone=True)),
    *_timestamps(),
    _one_of("status", TaskStatus, "ck_tasks_status"),
)

invoices = sa.Table(
    "invoices",
    tenant_metadata,
    _id(),
    _fk("contact_id", "contacts", ondelete="RESTRICT"),
    sa.Column("invoice_number", sa.Text, nullable=False, unique=True),
    sa.Column("issue_date", sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text("NOW()")),
    sa.Column("due_date", sa.TIMESTAMP(timezone=True)),
    sa.Column("amount", sa.Numeric(12, 2), nullable=False, server_default="0"),
    sa.Column("status", sa.Text, nullable=False, server_default=InvoiceStatus.DRAFT.value),
    *_timestamps(),
    _one_of("status", InvoiceStatus, "ck_invoices_status"),
)

communications = sa.Table(
    "communications",
    tenant_metadata,
    _id(),
    _fk("user_id", "users"),
    _fk("contact_id", "contacts"),
    sa.Column("type", sa.Text, nullable=False),
    sa.Column("subject", sa.Text),
    sa.Column("body", sa.Text),
    sa.Column("sent_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("NOW()")),
    *_timestamps(),
    _one_of("type", CommunicationType, "ck_communications_type"),
)

dashboard_widgets = sa.Table(
    "dashboard_widgets",
    tenant_metadata,
    _id(),
    _fk("user_id", "users"),
    sa.Column("title", sa.Text, nullable=False),
    sa.Column("type", sa.Text, nullable=False),
    sa.Column("config", postgresql.JSONB, nullable=False, server_default=sa.text("'{}'::jsonb")),
    *_timestamps(),
)

sa.Index("idx_contacts_email", contacts.c.email)
sa.Index("idx_contacts_organization", contacts.c.organization_id)
sa.Index("idx_leads_status", leads.c.status)
sa.Index("idx_leads_organization", leads.c.organization_id)
sa.Index("idx_tasks_user", tasks.c.user_id)
sa.Index("idx_tasks_status", tasks.c.status)
sa.Index("idx_invoices_contact", invoices.c.contact_id)
sa.Index("idx_invoices_status", invoices.c.status)
sa.Index("idx_communications_contact", communications.c.contact_id)
sa.Index("idx_communications_user", communications.c.user_id)
sa.Index("idx_dashboard_widgets_user", dashboard_widgets.c.user_id)

TENANT_TABLE_NAMES = tuple(t.name for t in tenant_metadata.sorted_tables)
