"""Tenant namespace data access - gateway, cast table and record helpers."""

from src.juris.repositories.tenant.gateway import (
    SCHEMA_PLACEHOLDER,
    TenantQueryGateway,
    render_template,
)
from src.juris.repositories.tenant.records import (
    BoundStatement,
    InvalidRecordField,
    UnknownTableError,
    build_get,
    build_insert,
    build_list,
    build_soft_delete,
    build_update,
    get_record,
    insert_record,
    list_records,
    soft_delete_record,
    update_record,
)

__all__ = [
    # Gateway
    "SCHEMA_PLACEHOLDER",
    "TenantQueryGateway",
    "render_template",
    # Record helpers
    "BoundStatement",
    "InvalidRecordField",
    "UnknownTableError",
    "build_get",
    "build_insert",
    "build_list",
    "build_soft_delete",
    "build_update",
    "get_record",
    "insert_record",
    "list_records",
    "soft_delete_record",
    "update_record",
]
