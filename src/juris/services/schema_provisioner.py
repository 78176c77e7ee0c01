"""Tenant namespace provisioning and drift healing.

Provisioning is idempotent and self-healing:

1. The namespace is looked up through a parameterized catalog query.
2. A missing namespace is created, then every catalog table is created in its
   own transaction together with its indexes.
3. An existing namespace is compared with the catalog. Missing tables are
   created; missing columns on existing tables are added when that is possible
   without rewriting data.

All DDL uses IF NOT EXISTS. No lock is taken: a concurrent provisioner that
wins a race surfaces as a duplicate-object or unique-violation SQLSTATE, which
is accepted once a re-check confirms the object now exists.
"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from sqlalchemy import Column, text
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.schema import CreateColumn, CreateIndex, CreateSchema, CreateTable, DropSchema
from sqlalchemy.sql.base import Executable

from src.juris.core.cache import (
    invalidate_namespace,
    is_namespace_provisioned,
    mark_namespace_provisioned,
)
from src.juris.core.config import get_settings
from src.juris.core.db import get_engine, get_session, is_already_exists
from src.juris.core.exceptions import SchemaProvisioningFailure
from src.juris.core.logging import get_logger
from src.juris.core.security.validators import quote_identifier, validate_schema_name
from src.juris.models.tenant import REQUIRED_TABLES, catalog_fingerprint, get_table
from src.juris.services.namespace_registry import NamespaceRegistry

logger = get_logger(__name__)

_NAMESPACE_EXISTS = text(
    """
    SELECT EXISTS(
        SELECT 1 FROM information_schema.schemata
        WHERE schema_name = :schema
    )
    """
)

_TABLE_EXISTS = text(
    """
    SELECT EXISTS(
        SELECT 1 FROM information_schema.tables
        WHERE table_schema = :schema AND table_name = :table
    )
    """
)

_EXISTING_COLUMNS = text(
    """
    SELECT c.table_name, c.column_name
    FROM information_schema.columns c
    JOIN information_schema.tables t
      ON t.table_schema = c.table_schema AND t.table_name = c.table_name
    WHERE c.table_schema = :schema AND t.table_type = 'BASE TABLE'
    """
)


@dataclass
class ProvisioningReport:
    """What a provisioning pass did to one namespace."""

    schema_name: str
    created_namespace: bool = False
    created_tables: list[str] = field(default_factory=list)
    added_columns: list[str] = field(default_factory=list)
    skipped_columns: list[str] = field(default_factory=list)
    from_cache: bool = False

    @property
    def ran_ddl(self) -> bool:
        return bool(self.created_namespace or self.created_tables or self.added_columns)


def can_add_to_existing_table(column: Column[Any]) -> bool:
    """A NOT NULL column without a server default cannot be added to a populated table."""
    return column.nullable or column.server_default is not None


class SchemaProvisioner:
    """Creates and heals tenant namespaces from the table catalog."""

    def __init__(
        self,
        engine: AsyncEngine | None = None,
        registry: NamespaceRegistry | None = None,
        timeout_seconds: float | None = None,
    ):
        self._engine = engine
        self._registry = registry
        self._timeout = timeout_seconds or get_settings().database_statement_timeout_seconds

    @property
    def engine(self) -> AsyncEngine:
        return self._engine or get_engine()

    async def ensure_namespace(
        self, tenant_id: UUID | str | None, schema_name: str | None = None
    ) -> str:
        """Make sure the tenant's namespace exists with the full table set.

        Args:
            tenant_id: Tenant to provision
            schema_name: Pre-resolved namespace, skips the registry lookup

        Returns:
            The namespace name

        Raises:
            TenantNotFound, TenantInactive: When resolving through the registry
            InvalidNamespaceName: If the namespace name is unsafe
            SchemaProvisioningFailure: If any DDL step fails
        """
        if schema_name is None:
            schema_name = await self._resolve_schema_name(tenant_id)
        await self.provision(schema_name)
        return schema_name

    async def _resolve_schema_name(self, tenant_id: UUID | str | None) -> str:
        if tenant_id is None:
            raise ValueError("tenant_id or schema_name is required")
        if self._registry is not None:
            return (await self._registry.resolve(tenant_id)).schema_name
        async with get_session(self._engine) as session:
            return (await NamespaceRegistry(session).resolve(tenant_id)).schema_name

    async def provision(self, schema_name: str) -> ProvisioningReport:
        """Create or heal one namespace, short-circuiting on a fresh cache entry."""
        schema_name = validate_schema_name(schema_name)
        fingerprint = catalog_fingerprint()
        if await is_namespace_provisioned(schema_name, fingerprint):
            return ProvisioningReport(schema_name, from_cache=True)

        if await self.namespace_exists(schema_name):
            report = await self.heal_namespace(schema_name)
        else:
            report = await self.create_namespace(schema_name)

        await mark_namespace_provisioned(schema_name, fingerprint)
        return report

    async def create_namespace(self, schema_name: str) -> ProvisioningReport:
        """Create the namespace and every catalog table, one table per transaction."""
        schema_name = validate_schema_name(schema_name)
        report = ProvisioningReport(schema_name)

        report.created_namespace = await self._apply(
            schema_name,
            "create_schema",
            [CreateSchema(schema_name, if_not_exists=True)],
            exists=lambda: self.namespace_exists(schema_name),
        )
        if report.created_namespace:
            logger.info("namespace_created", schema_name=schema_name)

        for table_name in REQUIRED_TABLES:
            if await self._create_table(schema_name, table_name):
                report.created_tables.append(table_name)

        return report

    async def heal_namespace(self, schema_name: str) -> ProvisioningReport:
        """Bring an existing namespace up to the catalog without touching data."""
        schema_name = validate_schema_name(schema_name)
        report = ProvisioningReport(schema_name)
        existing = await self.existing_columns(schema_name)

        missing_tables = [name for name in REQUIRED_TABLES if name not in existing]
        for table_name in missing_tables:
            if await self._create_table(schema_name, table_name):
                report.created_tables.append(table_name)
        if report.created_tables:
            logger.info("tables_healed", schema_name=schema_name, tables=report.created_tables)

        for table_name in REQUIRED_TABLES:
            if table_name in missing_tables:
                continue
            for column in get_table(table_name).columns:
                if column.name in existing[table_name]:
                    continue
                qualified = f"{table_name}.{column.name}"
                if not can_add_to_existing_table(column):
                    report.skipped_columns.append(qualified)
                    logger.warning(
                        "Column not healed: NOT NULL without server default",
                        schema_name=schema_name,
                        column=qualified,
                    )
                    continue
                await self._add_column(schema_name, table_name, column)
                report.added_columns.append(qualified)
        if report.added_columns:
            logger.info("columns_healed", schema_name=schema_name, columns=report.added_columns)

        return report

    async def drop_namespace(self, schema_name: str) -> bool:
        """Drop the namespace and everything in it.

        The name is validated again here even though it came from the registry.

        Returns:
            True if the namespace existed, False if it was already gone
        """
        schema_name = validate_schema_name(schema_name)
        existed = await self.namespace_exists(schema_name)
        if existed:
            await self._apply(
                schema_name,
                "drop_schema",
                [DropSchema(schema_name, cascade=True, if_exists=True)],
            )
        await invalidate_namespace(schema_name)
        logger.info("namespace_dropped", schema_name=schema_name, existed=existed)
        return existed

    async def namespace_exists(self, schema_name: str) -> bool:
        rows = await self._query(
            schema_name, "check_schema", _NAMESPACE_EXISTS, {"schema": schema_name}
        )
        return bool(rows[0][0])

    async def table_exists(self, schema_name: str, table_name: str) -> bool:
        rows = await self._query(
            schema_name, "check_table", _TABLE_EXISTS, {"schema": schema_name, "table": table_name}
        )
        return bool(rows[0][0])

    async def existing_columns(self, schema_name: str) -> dict[str, set[str]]:
        """Map of table name to column names currently in the namespace."""
        rows = await self._query(
            schema_name, "inspect_columns", _EXISTING_COLUMNS, {"schema": schema_name}
        )
        columns: dict[str, set[str]] = {}
        for table_name, column_name in rows:
            columns.setdefault(table_name, set()).add(column_name)
        return columns

    async def _create_table(self, schema_name: str, table_name: str) -> bool:
        table = get_table(table_name)
        statements: list[Executable] = [CreateTable(table, if_not_exists=True)]
        statements.extend(
            CreateIndex(index, if_not_exists=True)
            for index in sorted(table.indexes, key=lambda index: str(index.name))
        )
        created = await self._apply(
            schema_name,
            f"create_table:{table_name}",
            statements,
            exists=lambda: self.table_exists(schema_name, table_name),
        )
        if created:
            logger.info("table_created", schema_name=schema_name, table=table_name)
        return created

    async def _add_column(self, schema_name: str, table_name: str, column: Column[Any]) -> None:
        column_ddl = CreateColumn(column).compile(dialect=postgresql.dialect())
        statement = text(
            f"ALTER TABLE {quote_identifier(schema_name)}.{quote_identifier(table_name)} "
            f"ADD COLUMN IF NOT EXISTS {column_ddl}"
        )
        await self._apply(schema_name, f"add_column:{table_name}.{column.name}", [statement])

    async def _query(
        self, schema_name: str, step: str, statement: Executable, params: dict[str, Any]
    ) -> list[Any]:
        try:
            async with asyncio.timeout(self._timeout):
                async with self.engine.connect() as connection:
                    result = await connection.execute(statement, params)
                    return list(result.all())
        except (SQLAlchemyError, OSError) as e:
            raise SchemaProvisioningFailure(schema_name, step, e) from e

    async def _apply(
        self,
        schema_name: str,
        step: str,
        statements: Sequence[Executable],
        exists: Callable[[], Awaitable[bool]] | None = None,
    ) -> bool:
        """Run statements in one transaction against the namespace.

        Returns:
            True if applied, False if a concurrent provisioner got there first

        Raises:
            SchemaProvisioningFailure: On any other error or timeout
        """
        options = {"schema_translate_map": {None: schema_name}}
        try:
            async with asyncio.timeout(self._timeout):
                async with self.engine.begin() as connection:
                    for statement in statements:
                        await connection.execute(statement, execution_options=options)
        except DBAPIError as e:
            if exists is not None and is_already_exists(e) and await exists():
                logger.info(
                    "Provisioning step raced, object exists", schema_name=schema_name, step=step
                )
                return False
            raise SchemaProvisioningFailure(schema_name, step, e) from e
        except (SQLAlchemyError, OSError) as e:
            raise SchemaProvisioningFailure(schema_name, step, e) from e
        return True
