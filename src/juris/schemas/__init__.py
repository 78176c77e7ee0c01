"""Request and response schemas."""

from src.juris.schemas.pagination import PaginatedResponse
from src.juris.schemas.record import RecordList, RecordWrite
from src.juris.schemas.tenant import (
    ProvisioningReportRead,
    TenantCreate,
    TenantRead,
    TenantUpdate,
)

__all__ = [
    "PaginatedResponse",
    "ProvisioningReportRead",
    "RecordList",
    "RecordWrite",
    "TenantCreate",
    "TenantRead",
    "TenantUpdate",
]
