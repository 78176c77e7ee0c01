"""Generic insert / update / soft-delete for tenant tables.

Builders are pure: they validate table and column names against the catalog,
pick a cast per column and return the SQL template plus its bind parameters.
The async helpers run a built statement through a TenantQueryGateway.

Update and soft delete only match active rows and return None when nothing
matched. Callers treat None as "not found".
"""

from collections.abc import Mapping
from typing import Any, NamedTuple
from uuid import UUID

from sqlalchemy import Table

from src.juris.core.security.validators import quote_identifier
from src.juris.models.enums import CastKind
from src.juris.models.tenant import AUDIT_COLUMNS, get_table, is_tenant_table
from src.juris.repositories.tenant.casts import bind_value, infer_cast, placeholder
from src.juris.repositories.tenant.gateway import SCHEMA_PLACEHOLDER, TenantQueryGateway

DEFAULT_PAGE_SIZE = 50


class UnknownTableError(LookupError):
    def __init__(self, table: str) -> None:
        super().__init__(f"Unknown tenant table: {table}")
        self.table = table


class InvalidRecordField(ValueError):
    """A written column is not part of the table or cannot be written."""

    def __init__(self, table: str, column: str, reason: str) -> None:
        super().__init__(f"{table}.{column}: {reason}")
        self.table = table
        self.column = column


class BoundStatement(NamedTuple):
    template: str
    params: dict[str, Any]


def _table(table: str) -> Table:
    if not is_tenant_table(table):
        raise UnknownTableError(table)
    return get_table(table)


def _qualified(table: str) -> str:
    return f"{SCHEMA_PLACEHOLDER}.{quote_identifier(table)}"


def _record_id(table: str, record_id: UUID | str) -> UUID:
    if isinstance(record_id, UUID):
        return record_id
    try:
        return UUID(str(record_id))
    except ValueError as e:
        raise InvalidRecordField(table, "id", "not a valid UUID") from e


def _bind_fields(
    table_def: Table, fields: Mapping[str, Any]
) -> tuple[list[tuple[str, str]], dict[str, Any]]:
    """Validate and bind each field.

    Returns:
        ([(quoted_column, placeholder), ...], params)
    """
    pairs: list[tuple[str, str]] = []
    params: dict[str, Any] = {}
    for index, (column, value) in enumerate(fields.items()):
        if column in AUDIT_COLUMNS:
            raise InvalidRecordField(table_def.name, column, "managed by the database")
        if column not in table_def.c:
            raise InvalidRecordField(table_def.name, column, "no such column")
        kind = infer_cast(column, value)
        bind_name = f"p{index}"
        sql_type = table_def.c[column].type if kind is CastKind.NONE else None
        try:
            params[bind_name] = bind_value(kind, value, sql_type)
        except ValueError as e:
            raise InvalidRecordField(table_def.name, column, str(e)) from e
        pairs.append((quote_identifier(column), placeholder(bind_name, kind)))
    return pairs, params


def build_insert(table: str, fields: Mapping[str, Any]) -> BoundStatement:
    """INSERT ... RETURNING * for the given fields.

    Omitted columns take their server defaults.

    Raises:
        UnknownTableError: If table is not in the tenant catalog
        InvalidRecordField: On unknown, audit-managed or unparseable fields
    """
    table_def = _table(table)
    pairs, params = _bind_fields(table_def, fields)
    if not pairs:
        return BoundStatement(f"INSERT INTO {_qualified(table)} DEFAULT VALUES RETURNING *", {})

    columns = ", ".join(column for column, _ in pairs)
    values = ", ".join(value for _, value in pairs)
    return BoundStatement(
        f"INSERT INTO {_qualified(table)} ({columns}) VALUES ({values}) RETURNING *",
        params,
    )


def build_update(table: str, record_id: UUID | str, fields: Mapping[str, Any]) -> BoundStatement:
    """UPDATE of an active row. updated_at is always stamped with now().

    Raises:
        UnknownTableError: If table is not in the tenant catalog
        InvalidRecordField: On unknown, audit-managed or unparseable fields
    """
    table_def = _table(table)
    pairs, params = _bind_fields(table_def, fields)
    assignments = [f"{column} = {value}" for column, value in pairs]
    assignments.append('"updated_at" = now()')
    params["record_id"] = _record_id(table, record_id)
    return BoundStatement(
        f"UPDATE {_qualified(table)} SET {', '.join(assignments)} "
        'WHERE "id" = CAST(:record_id AS UUID) AND "is_active" = true RETURNING *',
        params,
    )


def build_soft_delete(table: str, record_id: UUID | str) -> BoundStatement:
    _table(table)
    return BoundStatement(
        f'UPDATE {_qualified(table)} SET "is_active" = false, "updated_at" = now() '
        'WHERE "id" = CAST(:record_id AS UUID) AND "is_active" = true RETURNING *',
        {"record_id": _record_id(table, record_id)},
    )


def build_get(table: str, record_id: UUID | str) -> BoundStatement:
    _table(table)
    return BoundStatement(
        f"SELECT * FROM {_qualified(table)} "
        'WHERE "id" = CAST(:record_id AS UUID) AND "is_active" = true',
        {"record_id": _record_id(table, record_id)},
    )


def build_list(table: str, limit: int = DEFAULT_PAGE_SIZE, offset: int = 0) -> BoundStatement:
    _table(table)
    return BoundStatement(
        f'SELECT * FROM {_qualified(table)} WHERE "is_active" = true '
        'ORDER BY "created_at" DESC, "id" DESC LIMIT :limit OFFSET :offset',
        {"limit": limit, "offset": offset},
    )


async def insert_record(
    gateway: TenantQueryGateway, table: str, fields: Mapping[str, Any]
) -> dict[str, Any] | None:
    statement = build_insert(table, fields)
    return await gateway.fetch_one(statement.template, statement.params)


async def update_record(
    gateway: TenantQueryGateway, table: str, record_id: UUID | str, fields: Mapping[str, Any]
) -> dict[str, Any] | None:
    """Update an active row. None when no active row has this id."""
    statement = build_update(table, record_id, fields)
    return await gateway.fetch_one(statement.template, statement.params)


async def soft_delete_record(
    gateway: TenantQueryGateway, table: str, record_id: UUID | str
) -> dict[str, Any] | None:
    """Set is_active = false. None when no active row has this id."""
    statement = build_soft_delete(table, record_id)
    return await gateway.fetch_one(statement.template, statement.params)


async def get_record(
    gateway: TenantQueryGateway, table: str, record_id: UUID | str
) -> dict[str, Any] | None:
    statement = build_get(table, record_id)
    return await gateway.fetch_one(statement.template, statement.params)


async def list_records(
    gateway: TenantQueryGateway, table: str, limit: int = DEFAULT_PAGE_SIZE, offset: int = 0
) -> list[dict[str, Any]]:
    statement = build_list(table, limit, offset)
    return await gateway.execute(statement.template, statement.params)
