from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from src.juris.models.enums import PlanType


class TenantCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    plan_type: PlanType | None = None
    max_users: int | None = Field(default=None, ge=1)
    max_storage: int | None = Field(
        default=None,
        ge=0,
        json_schema_extra={"description": "Storage quota in bytes."},
    )


class TenantUpdate(BaseModel):
    """Partial update. Omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    plan_type: PlanType | None = None
    max_users: int | None = Field(default=None, ge=1)
    max_storage: int | None = Field(default=None, ge=0)
    is_active: bool | None = None


class TenantRead(BaseModel):
    id: UUID
    name: str
    schema_name: str
    plan_type: str
    is_active: bool
    max_users: int
    max_storage: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ProvisioningReportRead(BaseModel):
    """Outcome of an explicit reprovisioning run."""

    schema_name: str
    created_namespace: bool
    created_tables: list[str]
    added_columns: list[str]
    skipped_columns: list[str]

    model_config = {"from_attributes": True}
