"""Administrative tenant endpoints (admin roles only)."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from src.juris.api.dependencies import AdminPrincipal, TenantServiceDep
from src.juris.core.exceptions import TenantNotFound
from src.juris.models.public import Tenant
from src.juris.schemas.pagination import PaginatedResponse
from src.juris.schemas.tenant import (
    ProvisioningReportRead,
    TenantCreate,
    TenantRead,
    TenantUpdate,
)
from src.juris.services.tenant_service import TenantService

router = APIRouter(prefix="/admin/tenants", tags=["admin"])


async def _get_or_404(tenant_service: TenantService, tenant_id: UUID) -> Tenant:
    try:
        return await tenant_service.get_tenant(tenant_id)
    except TenantNotFound as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"Tenant {tenant_id} not found"
        ) from e


@router.post(
    "",
    response_model=TenantRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a tenant",
    description="Register a tenant and provision its namespace before responding.",
    responses={
        201: {"description": "Tenant created and provisioned"},
        403: {"description": "Not authorized (admin role required)"},
        503: {"description": "Provisioning failed; nothing was kept"},
    },
)
async def create_tenant(
    request: TenantCreate,
    _admin: AdminPrincipal,
    tenant_service: TenantServiceDep,
) -> TenantRead:
    """Create a tenant.

    Provisioning is synchronous. A SchemaProvisioningFailure rolls the tenant
    back and surfaces as 503.
    """
    tenant = await tenant_service.create_tenant(
        request.name,
        plan_type=request.plan_type,
        max_users=request.max_users,
        max_storage=request.max_storage,
    )
    return TenantRead.model_validate(tenant)


@router.get(
    "",
    response_model=PaginatedResponse[TenantRead],
    summary="List tenants",
    responses={
        200: {"description": "Paginated list of tenants, newest first"},
        403: {"description": "Not authorized (admin role required)"},
    },
)
async def list_tenants(
    _admin: AdminPrincipal,
    tenant_service: TenantServiceDep,
    cursor: Annotated[str | None, Query(description="Cursor for pagination")] = None,
    limit: Annotated[int, Query(ge=1, le=100, description="Number of items per page")] = 50,
    active_only: Annotated[bool, Query(description="Hide deactivated tenants")] = False,
) -> PaginatedResponse[TenantRead]:
    tenants, next_cursor, has_more = await tenant_service.list_tenants(
        cursor, limit, active_only=active_only
    )
    return PaginatedResponse(
        items=[TenantRead.model_validate(t) for t in tenants],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.get(
    "/{tenant_id}",
    response_model=TenantRead,
    summary="Get a tenant",
    responses={
        200: {"description": "Tenant details"},
        404: {"description": "Tenant not found"},
    },
)
async def get_tenant(
    tenant_id: UUID,
    _admin: AdminPrincipal,
    tenant_service: TenantServiceDep,
) -> TenantRead:
    tenant = await _get_or_404(tenant_service, tenant_id)
    return TenantRead.model_validate(tenant)


@router.patch(
    "/{tenant_id}",
    response_model=TenantRead,
    summary="Update a tenant",
    description="Change name, plan, quotas or the active flag. Deactivation takes "
    "effect on the next request of any of the tenant's users.",
    responses={
        200: {"description": "Tenant updated"},
        404: {"description": "Tenant not found"},
    },
)
async def update_tenant(
    tenant_id: UUID,
    request: TenantUpdate,
    _admin: AdminPrincipal,
    tenant_service: TenantServiceDep,
) -> TenantRead:
    try:
        tenant = await tenant_service.update_tenant(
            tenant_id,
            name=request.name,
            plan_type=request.plan_type,
            max_users=request.max_users,
            max_storage=request.max_storage,
            is_active=request.is_active,
        )
    except TenantNotFound as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"Tenant {tenant_id} not found"
        ) from e
    return TenantRead.model_validate(tenant)


@router.post(
    "/{tenant_id}/reprovision",
    response_model=ProvisioningReportRead,
    summary="Reprovision a tenant",
    description="Re-run namespace provisioning and drift healing for a tenant.",
    responses={
        200: {"description": "What the provisioning pass created"},
        404: {"description": "Tenant not found"},
        503: {"description": "Provisioning failed"},
    },
)
async def reprovision_tenant(
    tenant_id: UUID,
    _admin: AdminPrincipal,
    tenant_service: TenantServiceDep,
) -> ProvisioningReportRead:
    try:
        report = await tenant_service.reprovision_tenant(tenant_id)
    except TenantNotFound as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"Tenant {tenant_id} not found"
        ) from e
    return ProvisioningReportRead.model_validate(report)


@router.delete(
    "/{tenant_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a tenant",
    description="Drop the tenant namespace (CASCADE) and remove the registry row. "
    "Irreversible.",
    responses={
        204: {"description": "Tenant deleted"},
        404: {"description": "Tenant not found"},
    },
)
async def delete_tenant(
    tenant_id: UUID,
    _admin: AdminPrincipal,
    tenant_service: TenantServiceDep,
) -> None:
    try:
        await tenant_service.delete_tenant(tenant_id)
    except TenantNotFound as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"Tenant {tenant_id} not found"
        ) from e
