# src/tenancy/infrastructure/models.py

from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, Index, Text, UUID as SQLAlchemy_UUID, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.shared.database.base_model import BaseModel


class TenantModel(BaseModel):
    """SQLAlchemy model for the shared tenants registry table."""

    __tablename__ = "tenants"

    id: Mapped[UUID] = mapped_column(
        SQLAlchemy_UUID(as_uuid=True),
        primary_key=True,
        server_default=func.gen_random_uuid(),
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    domain: Mapped[str] = mapped_column(Text, nullable=False)

    # use server_default to mirror DDL
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    __table_args__ = (
        UniqueConstraint("domain", name="uq_tenants_domain"),
        Index("idx_tenants_domain", "domain"),
        Index("idx_tenants_created", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<TenantModel(id={self.id}, domain='{self.domain}')>"
