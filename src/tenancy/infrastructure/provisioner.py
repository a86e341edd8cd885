# src/tenancy/infrastructure/provisioner.py
"""
Idempotent migration of one tenant schema.

Runs as a single transaction on the master engine:
  1) advisory lock keyed by schema name (serializes other processes)
  2) CREATE SCHEMA IF NOT EXISTS
  3) CREATE TABLE IF NOT EXISTS for each tenant table, FK order
  4) CREATE INDEX IF NOT EXISTS for each tenant index

Postgres DDL is transactional, so a crash mid-way leaves nothing behind.
"""

from __future__ import annotations

from typing import List

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.schema import CreateIndex, CreateSchema, CreateTable, DDLElement, MetaData
import structlog

from src.tenancy.infrastructure.tenant_schema import tenant_metadata

logger = structlog.get_logger(__name__)


def build_ddl(metadata: MetaData = tenant_metadata) -> List[DDLElement]:
    """Table and index DDL, unqualified; the schema is applied at execution."""
    statements: List[DDLElement] = []
    for table in metadata.sorted_tables:
        statements.append(CreateTable(table, if_not_exists=True))
    for table in metadata.sorted_tables:
        for index in sorted(table.indexes, key=lambda i: i.name or ""):
            statements.append(CreateIndex(index, if_not_exists=True))
    return statements


class TenantSchemaProvisioner:
    def __init__(self, engine: AsyncEngine, metadata: MetaData = tenant_metadata) -> None:
        self._engine = engine
        self._metadata = metadata

    async def provision(self, schema_name: str) -> None:
        async with self._engine.begin() as conn:
            await conn.execute(
                sa.text("SELECT pg_advisory_xact_lock(hashtext(:schema))"),
                {"schema": schema_name},
            )
            await conn.execute(CreateSchema(schema_name, if_not_exists=True))

            scoped = await conn.execution_options(schema_translate_map={None: schema_name})
            for statement in build_ddl(self._metadata):
                await scoped.execute(statement)

        logger.info("tenant_schema_provisioned", schema=schema_name)
