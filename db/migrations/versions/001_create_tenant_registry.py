"""Create the shared tenant registry.

Revision ID: 001_create_tenant_registry
Revises:
Create Date: 2026-10-16 00:00:00.000000

- tenants table in the master schema (id, name, unique domain, timestamps)
- pgcrypto for gen_random_uuid() on servers older than PG13
- updated_at touch trigger
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "001_create_tenant_registry"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute("CREATE EXTENSION IF NOT EXISTS pgcrypto")

    op.create_table(
        "tenants",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("domain", sa.Text(), nullable=False),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text("NOW()")),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text("NOW()")),
        sa.UniqueConstraint("domain", name="uq_tenants_domain"),
    )
    op.create_index("idx_tenants_domain", "tenants", ["domain"])
    op.create_index("idx_tenants_created", "tenants", ["created_at"])

    # set_updated_at(): generic touch trigger
    op.execute("""
    CREATE OR REPLACE FUNCTION set_updated_at() RETURNS trigger
    LANGUAGE plpgsql AS $$
    BEGIN
      NEW.updated_at := NOW();
      RETURN NEW;
    END;
    $$;
    """)
    op.execute("""
    CREATE TRIGGER tenants_set_updated_at
    BEFORE UPDATE ON tenants
    FOR EACH ROW EXECUTE FUNCTION set_updated_at();
    """)


def downgrade() -> None:
    # tenant_<id> schemas are left in place; they are never dropped from here
    op.execute("DROP TRIGGER IF EXISTS tenants_set_updated_at ON tenants")
    op.execute("DROP FUNCTION IF EXISTS set_updated_at()")
    op.drop_index("idx_tenants_created", table_name="tenants")
    op.drop_index("idx_tenants_domain", table_name="tenants")
    op.drop_table("tenants")
