"""Public schema models.

Only the tenant registry lives in public; all domain data lives in the
per-tenant namespaces described by models/tenant.
"""

from src.juris.models.enums import PlanType
from src.juris.models.public.tenant import Tenant

__all__ = [
    "PlanType",
    "Tenant",
]
