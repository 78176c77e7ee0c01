"""Request-boundary tenant gate.

Turns a verified principal into a TenantContext. Regular principals leave with
a TenantQueryGateway bound to their own namespace, which is the only way
request handlers reach tenant data. Administrative principals get a global
context without a gateway.

Every tenant failure becomes AccessDenied with the original kind chained as
the cause, so logs keep the distinction while responses cannot.
"""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncEngine

from src.juris.core.exceptions import AccessDenied, TenantInactive, TenantNotFound
from src.juris.core.logging import bind_tenant_context, get_logger
from src.juris.core.security.tokens import Principal
from src.juris.repositories.tenant import TenantQueryGateway
from src.juris.services.namespace_registry import NamespaceRegistry
from src.juris.services.schema_provisioner import SchemaProvisioner

logger = get_logger(__name__)


@dataclass(frozen=True)
class TenantContext:
    principal: Principal
    tenant_id: UUID | None = None
    schema_name: str | None = None
    gateway: TenantQueryGateway | None = None

    @property
    def is_global(self) -> bool:
        return self.gateway is None


class TenantContextGate:
    def __init__(
        self,
        registry: NamespaceRegistry,
        provisioner: SchemaProvisioner,
        engine: AsyncEngine | None = None,
    ):
        self.registry = registry
        self.provisioner = provisioner
        self._engine = engine

    async def open(self, principal: Principal) -> TenantContext:
        """Resolve the principal's tenant and hand back a scoped gateway.

        Raises:
            AccessDenied: Missing tenant association, unknown tenant or
                inactive tenant
        """
        if principal.is_admin:
            return TenantContext(principal=principal)

        if not principal.tenant_id:
            logger.warning("Principal without tenant", user_id=principal.user_id)
            raise AccessDenied("missing tenant")

        try:
            gateway = await TenantQueryGateway.for_tenant(
                self.registry,
                principal.tenant_id,
                provisioner=self.provisioner,
                engine=self._engine,
            )
        except (TenantNotFound, TenantInactive) as e:
            logger.warning(
                "Tenant gate refused principal",
                user_id=principal.user_id,
                tenant_id=principal.tenant_id,
                cause=type(e).__name__,
            )
            raise AccessDenied("tenant unavailable") from e

        bind_tenant_context(str(gateway.tenant_id), gateway.schema_name, principal.user_id)
        return TenantContext(
            principal=principal,
            tenant_id=gateway.tenant_id,
            schema_name=gateway.schema_name,
            gateway=gateway,
        )
