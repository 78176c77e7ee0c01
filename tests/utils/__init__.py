from tests.utils.cleanup import cleanup_tenant, delete_tenant_row, drop_tenant_schema

__all__ = ["cleanup_tenant", "delete_tenant_row", "drop_tenant_schema"]
