"""Tenant-scoped query execution.

TenantQueryGateway is the only place where a namespace name is substituted
into SQL text. Templates reference the namespace through SCHEMA_PLACEHOLDER and
carry every other value as a named bind parameter.

    gateway = TenantQueryGateway(schema_name, tenant_id, provisioner=provisioner)
    rows = await gateway.execute(
        "SELECT * FROM {schema}.clients WHERE status = :status",
        {"status": "active"},
    )
"""

import asyncio
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from src.juris.core.config import get_settings
from src.juris.core.db import sqlstate_of, tenant_transaction
from src.juris.core.exceptions import QueryExecutionFailure
from src.juris.core.logging import get_logger
from src.juris.core.security.validators import quote_identifier, validate_schema_name

if TYPE_CHECKING:
    from src.juris.services.namespace_registry import NamespaceRegistry
    from src.juris.services.schema_provisioner import SchemaProvisioner

logger = get_logger(__name__)

SCHEMA_PLACEHOLDER = "{schema}"


def render_template(template: str, schema_name: str) -> str:
    """Substitute the quoted namespace for every placeholder.

    Plain replacement keeps literal braces elsewhere in the template (JSON
    literals, for instance) untouched.

    Raises:
        InvalidNamespaceName: If schema_name fails validation
    """
    quoted = quote_identifier(validate_schema_name(schema_name))
    return template.replace(SCHEMA_PLACEHOLDER, quoted)


class TenantQueryGateway:
    """Executes templated SQL inside one tenant namespace.

    Each call runs in its own transaction with search_path set to the tenant
    schema alone. When a provisioner is supplied the namespace is ensured once,
    before the first statement; without one the caller vouches that the
    namespace already exists.
    """

    def __init__(
        self,
        schema_name: str,
        tenant_id: UUID | str | None = None,
        provisioner: "SchemaProvisioner | None" = None,
        engine: AsyncEngine | None = None,
        timeout_seconds: float | None = None,
    ):
        self.schema_name = validate_schema_name(schema_name)
        self.tenant_id = tenant_id
        self._provisioner = provisioner
        self._engine = engine
        self._timeout = timeout_seconds or get_settings().database_statement_timeout_seconds
        self._ready = provisioner is None
        self._ready_lock = asyncio.Lock()

    @classmethod
    async def for_tenant(
        cls,
        registry: "NamespaceRegistry",
        tenant_id: UUID | str,
        provisioner: "SchemaProvisioner | None" = None,
        engine: AsyncEngine | None = None,
    ) -> "TenantQueryGateway":
        """Resolve a tenant through the registry and bind a gateway to its namespace.

        Raises:
            TenantNotFound, TenantInactive: If the tenant cannot be served
        """
        resolved = await registry.resolve(tenant_id)
        return cls(resolved.schema_name, resolved.tenant_id, provisioner=provisioner, engine=engine)

    @property
    def is_ready(self) -> bool:
        return self._ready

    async def ensure_ready(self) -> None:
        """Provision the namespace on first use. Later calls return immediately."""
        if self._ready:
            return
        async with self._ready_lock:
            if self._ready:
                return
            if self._provisioner is not None:
                await self._provisioner.ensure_namespace(self.tenant_id, self.schema_name)
            self._ready = True

    def _failure(self, reason: str, sqlstate: str | None = None) -> QueryExecutionFailure:
        logger.error(
            "Tenant query failed",
            tenant_id=str(self.tenant_id) if self.tenant_id else None,
            schema_name=self.schema_name,
            reason=reason,
            sqlstate=sqlstate,
        )
        return QueryExecutionFailure(
            self.schema_name, tenant_id=self.tenant_id, reason=reason, sqlstate=sqlstate
        )

    async def execute(
        self, template: str, params: Mapping[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        """Run one templated statement and return its rows as dicts.

        Statements that return no rows yield an empty list.

        Raises:
            QueryExecutionFailure: On any driver error or when the round trip
                exceeds the statement timeout
        """
        await self.ensure_ready()
        sql = render_template(template, self.schema_name)

        try:
            async with asyncio.timeout(self._timeout):
                async with tenant_transaction(self.schema_name, self._engine) as connection:
                    result = await connection.execute(text(sql), dict(params or {}))
                    if not result.returns_rows:
                        return []
                    return [dict(row) for row in result.mappings().all()]
        except TimeoutError as e:
            raise self._failure(f"timed out after {self._timeout}s") from e
        except DBAPIError as e:
            raise self._failure(type(e.orig).__name__, sqlstate_of(e)) from e
        except (SQLAlchemyError, OSError) as e:
            raise self._failure(type(e).__name__) from e

    async def fetch_one(
        self, template: str, params: Mapping[str, Any] | None = None
    ) -> dict[str, Any] | None:
        rows = await self.execute(template, params)
        return rows[0] if rows else None
