"""Tenant model - registry in public schema."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import BigInteger, Column, DateTime
from sqlmodel import Field, SQLModel

from src.juris.core.security.validators import MAX_SCHEMA_LENGTH, validate_schema_name
from src.juris.models.base import utc_now
from src.juris.models.enums import PlanType


class Tenant(SQLModel, table=True):
    """Tenant registry in public schema.

    schema_name is generated from the id when the tenant is onboarded and is
    never supplied by callers.
    """

    __tablename__ = "tenants"
    __table_args__ = {"schema": "public"}

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255, index=True)
    schema_name: str = Field(max_length=MAX_SCHEMA_LENGTH, unique=True)
    plan_type: str = Field(default=PlanType.BASIC.value, max_length=50, index=True)
    is_active: bool = Field(default=True, index=True)
    max_users: int = Field(default=5)
    max_storage: int = Field(default=1_073_741_824, sa_column=Column(BigInteger, nullable=False))
    created_at: datetime = Field(
        default_factory=utc_now, sa_type=DateTime(timezone=True), nullable=False
    )
    updated_at: datetime = Field(
        default_factory=utc_now, sa_type=DateTime(timezone=True), nullable=False
    )

    @property
    def validated_schema_name(self) -> str:
        """Schema name after re-validation.

        Raises:
            InvalidNamespaceName: If the stored value was tampered with
        """
        return validate_schema_name(self.schema_name)
