"""FastAPI dependency injection definitions."""

# Auth
from src.juris.api.dependencies.auth import (
    AdminPrincipal,
    CurrentPrincipal,
    ensure_account_type,
    get_current_principal,
    require_account_types,
    require_admin,
)

# Database
from src.juris.api.dependencies.db import DBSession, get_db_session

# Services
from src.juris.api.dependencies.services import (
    ProvisionerDep,
    TenantRepo,
    TenantServiceDep,
    get_provisioner,
    get_tenant_repository,
    get_tenant_service,
)

# Tenant
from src.juris.api.dependencies.tenant import (
    TenantContextDep,
    TenantGateway,
    get_tenant_context,
    get_tenant_gateway,
)

__all__ = [
    # Auth
    "AdminPrincipal",
    "CurrentPrincipal",
    "ensure_account_type",
    "get_current_principal",
    "require_account_types",
    "require_admin",
    # Database
    "DBSession",
    "get_db_session",
    # Services
    "ProvisionerDep",
    "TenantRepo",
    "TenantServiceDep",
    "get_provisioner",
    "get_tenant_repository",
    "get_tenant_service",
    # Tenant
    "TenantContextDep",
    "TenantGateway",
    "get_tenant_context",
    "get_tenant_gateway",
]
