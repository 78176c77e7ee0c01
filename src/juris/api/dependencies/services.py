"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.juris.api.dependencies.db import DBSession
from src.juris.repositories.public import TenantRepository
from src.juris.services.schema_provisioner import SchemaProvisioner
from src.juris.services.tenant_service import TenantService


def get_tenant_repository(session: DBSession) -> TenantRepository:
    return TenantRepository(session)


def get_provisioner() -> SchemaProvisioner:
    """Provisioner on the shared engine. Overridden in tests."""
    return SchemaProvisioner()


TenantRepo = Annotated[TenantRepository, Depends(get_tenant_repository)]
ProvisionerDep = Annotated[SchemaProvisioner, Depends(get_provisioner)]


def get_tenant_service(
    tenant_repo: TenantRepo,
    session: DBSession,
    provisioner: ProvisionerDep,
) -> TenantService:
    return TenantService(tenant_repo, session, provisioner)


TenantServiceDep = Annotated[TenantService, Depends(get_tenant_service)]
