"""Tenant schema catalog - the table set of every tenant namespace."""

from src.juris.models.tenant.catalog import (
    AUDIT_COLUMNS,
    REQUIRED_TABLES,
    catalog_fingerprint,
    get_table,
    is_tenant_table,
    tenant_metadata,
)

__all__ = [
    "AUDIT_COLUMNS",
    "REQUIRED_TABLES",
    "catalog_fingerprint",
    "get_table",
    "is_tenant_table",
    "tenant_metadata",
]
