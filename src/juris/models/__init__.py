"""Model exports.

Import from here: `from src.juris.models import Tenant, REQUIRED_TABLES`
"""

# Enums
from src.juris.models.enums import AccountType, CastKind, PlanType

# Public schema models
from src.juris.models.public import Tenant

# Tenant schema catalog
from src.juris.models.tenant import REQUIRED_TABLES, get_table, tenant_metadata

__all__ = [
    # Enums
    "AccountType",
    "CastKind",
    "PlanType",
    # Public schema models
    "Tenant",
    # Tenant schema catalog
    "REQUIRED_TABLES",
    "get_table",
    "tenant_metadata",
]
