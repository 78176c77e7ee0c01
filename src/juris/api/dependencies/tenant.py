"""Tenant gate dependencies.

TenantGateway is the only dependency that hands tenant data access to a route.
"""

from typing import Annotated

from fastapi import Depends

from src.juris.api.dependencies.auth import CurrentPrincipal
from src.juris.api.dependencies.db import DBSession
from src.juris.api.dependencies.services import ProvisionerDep
from src.juris.core.exceptions import AccessDenied
from src.juris.repositories.tenant import TenantQueryGateway
from src.juris.services.namespace_registry import NamespaceRegistry
from src.juris.services.tenant_context_gate import TenantContext, TenantContextGate


async def get_tenant_context(
    principal: CurrentPrincipal,
    session: DBSession,
    provisioner: ProvisionerDep,
) -> TenantContext:
    gate = TenantContextGate(NamespaceRegistry(session), provisioner)
    return await gate.open(principal)


TenantContextDep = Annotated[TenantContext, Depends(get_tenant_context)]


async def get_tenant_gateway(context: TenantContextDep) -> TenantQueryGateway:
    """Gateway of the caller's tenant. Global (admin) contexts have none."""
    if context.gateway is None:
        raise AccessDenied("no tenant scope")
    return context.gateway


TenantGateway = Annotated[TenantQueryGateway, Depends(get_tenant_gateway)]
