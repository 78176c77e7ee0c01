"""Tenant administration - onboarding, updates, deletion."""

from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from src.juris.core.cache import invalidate_namespace
from src.juris.core.config import get_settings
from src.juris.core.exceptions import SchemaProvisioningFailure, TenantNotFound
from src.juris.core.logging import get_logger
from src.juris.core.security.validators import schema_name_for_tenant
from src.juris.models.base import utc_now
from src.juris.models.enums import PlanType
from src.juris.models.public import Tenant
from src.juris.repositories.public import TenantRepository
from src.juris.services.namespace_registry import NamespaceRegistry
from src.juris.services.schema_provisioner import ProvisioningReport, SchemaProvisioner

logger = get_logger(__name__)


class TenantService:
    """Administrative tenant lifecycle.

    Owns the public-schema transaction. Provisioning runs on its own
    connections, so a registry row is only committed once its namespace is
    complete.
    """

    def __init__(
        self,
        tenant_repo: TenantRepository,
        session: AsyncSession,
        provisioner: SchemaProvisioner,
    ):
        self.tenant_repo = tenant_repo
        self.session = session
        self.provisioner = provisioner
        self.registry = NamespaceRegistry(session, tenant_repo)

    async def get_tenant(self, tenant_id: UUID) -> Tenant:
        """Raises TenantNotFound if missing."""
        tenant = await self.tenant_repo.get_by_id(tenant_id)
        if tenant is None:
            raise TenantNotFound(tenant_id)
        return tenant

    async def list_tenants(
        self, cursor: str | None, limit: int, active_only: bool = False
    ) -> tuple[list[Tenant], str | None, bool]:
        return await self.tenant_repo.list_all_paginated(cursor, limit, active_only=active_only)

    async def create_tenant(
        self,
        name: str,
        plan_type: PlanType | None = None,
        max_users: int | None = None,
        max_storage: int | None = None,
    ) -> Tenant:
        """Register a tenant and provision its namespace synchronously.

        The schema name is derived from the new id, never from input. If
        provisioning fails the partial namespace is dropped, the row is rolled
        back and the failure is re-raised.

        Raises:
            SchemaProvisioningFailure: If the namespace could not be built
        """
        settings = get_settings()
        tenant_id = uuid4()
        tenant = Tenant(
            id=tenant_id,
            name=name,
            schema_name=schema_name_for_tenant(tenant_id),
            plan_type=(plan_type or PlanType(settings.default_plan_type)).value,
            max_users=max_users if max_users is not None else settings.default_max_users,
            max_storage=(
                max_storage if max_storage is not None else settings.default_max_storage_bytes
            ),
        )
        await self.registry.register(tenant)

        try:
            await self.provisioner.ensure_namespace(tenant.id, tenant.schema_name)
        except SchemaProvisioningFailure as e:
            logger.error(
                "Tenant provisioning failed, rolling back",
                tenant_id=str(tenant.id),
                schema_name=tenant.schema_name,
                step=e.step,
            )
            await self._rollback_creation(tenant)
            raise

        await self.session.commit()
        await self.session.refresh(tenant)
        logger.info("Tenant created", tenant_id=str(tenant.id), schema_name=tenant.schema_name)
        return tenant

    async def _rollback_creation(self, tenant: Tenant) -> None:
        tenant_id, schema_name = str(tenant.id), tenant.schema_name
        await self.session.rollback()
        try:
            await self.provisioner.drop_namespace(schema_name)
        except SchemaProvisioningFailure:
            # Orphaned: no registry row points at this namespace any more
            logger.exception(
                "Could not drop partial namespace", tenant_id=tenant_id, schema_name=schema_name
            )

    async def update_tenant(
        self,
        tenant_id: UUID,
        *,
        name: str | None = None,
        plan_type: PlanType | None = None,
        max_users: int | None = None,
        max_storage: int | None = None,
        is_active: bool | None = None,
    ) -> Tenant:
        """Apply the given changes. None leaves a field untouched.

        Raises:
            TenantNotFound: If the tenant does not exist
        """
        tenant = await self.get_tenant(tenant_id)
        if name is not None:
            tenant.name = name
        if plan_type is not None:
            tenant.plan_type = plan_type.value
        if max_users is not None:
            tenant.max_users = max_users
        if max_storage is not None:
            tenant.max_storage = max_storage
        if is_active is not None:
            tenant.is_active = is_active
        tenant.updated_at = utc_now()

        await self.session.commit()
        await self.session.refresh(tenant)

        if is_active is False:
            await invalidate_namespace(tenant.schema_name)
            logger.info("Tenant deactivated", tenant_id=str(tenant.id))
        return tenant

    async def deactivate_tenant(self, tenant_id: UUID) -> Tenant:
        return await self.update_tenant(tenant_id, is_active=False)

    async def delete_tenant(self, tenant_id: UUID) -> None:
        """Drop the namespace (CASCADE), then remove the registry row.

        Raises:
            TenantNotFound: If the tenant does not exist
            InvalidNamespaceName: If the stored schema name fails validation
            SchemaProvisioningFailure: If the drop fails; the row is kept so
                deletion can be retried
        """
        tenant = await self.get_tenant(tenant_id)
        schema_name = tenant.validated_schema_name
        await self.provisioner.drop_namespace(schema_name)
        await self.registry.remove(tenant)
        await self.session.commit()
        logger.info("Tenant deleted", tenant_id=str(tenant_id), schema_name=schema_name)

    async def reprovision_tenant(self, tenant_id: UUID) -> ProvisioningReport:
        """Re-run provisioning for a tenant, bypassing the provisioned cache."""
        tenant = await self.get_tenant(tenant_id)
        schema_name = tenant.validated_schema_name
        await invalidate_namespace(schema_name)
        report = await self.provisioner.provision(schema_name)
        logger.info(
            "Tenant reprovisioned",
            tenant_id=str(tenant_id),
            created_tables=report.created_tables,
            added_columns=report.added_columns,
        )
        return report
