"""Tenant to namespace resolution over the public registry."""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.juris.core.exceptions import TenantInactive, TenantNotFound
from src.juris.core.logging import get_logger
from src.juris.models.base import utc_now
from src.juris.models.public import Tenant
from src.juris.repositories.public import TenantRepository

logger = get_logger(__name__)


@dataclass(frozen=True)
class ResolvedNamespace:
    tenant_id: UUID
    schema_name: str
    is_active: bool


def _as_uuid(tenant_id: UUID | str) -> UUID | None:
    if isinstance(tenant_id, UUID):
        return tenant_id
    try:
        return UUID(str(tenant_id))
    except ValueError:
        return None


class NamespaceRegistry:
    """Reads and maintains the tenant registry in the public schema.

    resolve() is read-only. The mutating methods flush but never commit;
    the administrative service owns the transaction.
    """

    def __init__(self, session: AsyncSession, tenant_repo: TenantRepository | None = None):
        self.session = session
        self.tenant_repo = tenant_repo or TenantRepository(session)

    async def get(self, tenant_id: UUID | str) -> Tenant | None:
        tenant_uuid = _as_uuid(tenant_id)
        if tenant_uuid is None:
            return None
        return await self.tenant_repo.get_by_id(tenant_uuid)

    async def resolve(self, tenant_id: UUID | str) -> ResolvedNamespace:
        """Resolve a tenant to its validated namespace.

        Raises:
            TenantNotFound: No registry row for this id (malformed ids included)
            TenantInactive: The tenant exists but is deactivated
            InvalidNamespaceName: The stored schema name fails validation
        """
        tenant = await self.get(tenant_id)
        if tenant is None:
            raise TenantNotFound(tenant_id)
        if not tenant.is_active:
            raise TenantInactive(tenant_id)
        return ResolvedNamespace(
            tenant_id=tenant.id,
            schema_name=tenant.validated_schema_name,
            is_active=True,
        )

    async def register(self, tenant: Tenant) -> Tenant:
        """Insert a registry row. The schema name is validated first.

        Raises:
            InvalidNamespaceName: If the generated schema name is unsafe
        """
        tenant.schema_name = tenant.validated_schema_name
        self.tenant_repo.add(tenant)
        await self.session.flush()
        logger.info("Tenant registered", tenant_id=str(tenant.id), schema_name=tenant.schema_name)
        return tenant

    async def set_active(self, tenant_id: UUID | str, active: bool) -> Tenant:
        """Flip the active flag.

        Raises:
            TenantNotFound: If the tenant does not exist
        """
        tenant = await self.get(tenant_id)
        if tenant is None:
            raise TenantNotFound(tenant_id)
        tenant.is_active = active
        tenant.updated_at = utc_now()
        await self.session.flush()
        return tenant

    async def remove(self, tenant: Tenant) -> None:
        await self.tenant_repo.delete(tenant)
        await self.session.flush()
