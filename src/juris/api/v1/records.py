"""Generic tenant record endpoints.

One set of CRUD routes for every table in the tenant catalog. All access goes
through the caller's TenantGateway; the table name in the path is checked
against the catalog before it reaches any SQL, and billing tables are limited
to the account tiers that may see them.
"""

from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from src.juris.api.dependencies import CurrentPrincipal, TenantGateway, ensure_account_type
from src.juris.models.enums import AccountType
from src.juris.models.tenant import is_tenant_table
from src.juris.repositories.tenant import (
    InvalidRecordField,
    get_record,
    insert_record,
    list_records,
    soft_delete_record,
    update_record,
)
from src.juris.schemas.record import RecordList, RecordWrite

router = APIRouter(prefix="/records", tags=["records"])


# Tables limited to some account tiers; everything else is open to every tier
TABLE_ACCOUNT_TYPES: dict[str, frozenset[AccountType]] = {
    "invoices": frozenset({AccountType.COMPOSTA, AccountType.GERENCIAL}),
}


def catalog_table(
    table: Annotated[str, Path(description="Tenant table name")],
    principal: CurrentPrincipal,
) -> str:
    if not is_tenant_table(table):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown table {table}")
    if table in TABLE_ACCOUNT_TYPES:
        ensure_account_type(principal, TABLE_ACCOUNT_TYPES[table])
    return table


CatalogTable = Annotated[str, Depends(catalog_table)]


def _not_found(table: str, record_id: UUID) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND, detail=f"{table} record {record_id} not found"
    )


def _unprocessable(e: InvalidRecordField) -> HTTPException:
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))


@router.get(
    "/{table}",
    response_model=RecordList,
    summary="List active records",
    responses={404: {"description": "Unknown table"}},
)
async def list_table(
    table: CatalogTable,
    gateway: TenantGateway,
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> RecordList:
    items = await list_records(gateway, table, limit=limit, offset=offset)
    return RecordList(items=items, limit=limit, offset=offset)


@router.get(
    "/{table}/{record_id}",
    summary="Get a record",
    responses={404: {"description": "Unknown table or no active record"}},
)
async def get_table_record(
    table: CatalogTable,
    record_id: UUID,
    gateway: TenantGateway,
) -> dict[str, Any]:
    record = await get_record(gateway, table, record_id)
    if record is None:
        raise _not_found(table, record_id)
    return record


@router.post(
    "/{table}",
    status_code=status.HTTP_201_CREATED,
    summary="Create a record",
    responses={
        404: {"description": "Unknown table"},
        422: {"description": "Unknown or unwritable column"},
    },
)
async def create_table_record(
    table: CatalogTable,
    request: RecordWrite,
    gateway: TenantGateway,
    principal: CurrentPrincipal,
) -> dict[str, Any]:
    """Insert a record. created_by defaults to the caller."""
    fields = {"created_by": principal.user_id, **request.fields}
    try:
        record = await insert_record(gateway, table, fields)
    except InvalidRecordField as e:
        raise _unprocessable(e) from e
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Insert returned no row"
        )
    return record


@router.patch(
    "/{table}/{record_id}",
    summary="Update a record",
    responses={
        404: {"description": "Unknown table or no active record"},
        422: {"description": "Unknown or unwritable column"},
    },
)
async def update_table_record(
    table: CatalogTable,
    record_id: UUID,
    request: RecordWrite,
    gateway: TenantGateway,
) -> dict[str, Any]:
    try:
        record = await update_record(gateway, table, record_id, request.fields)
    except InvalidRecordField as e:
        raise _unprocessable(e) from e
    if record is None:
        raise _not_found(table, record_id)
    return record


@router.delete(
    "/{table}/{record_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Soft-delete a record",
    responses={404: {"description": "Unknown table or no active record"}},
)
async def delete_table_record(
    table: CatalogTable,
    record_id: UUID,
    gateway: TenantGateway,
) -> None:
    record = await soft_delete_record(gateway, table, record_id)
    if record is None:
        raise _not_found(table, record_id)
