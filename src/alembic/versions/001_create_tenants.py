"""Create tenant registry

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
import sqlmodel

from alembic import op

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # gen_random_uuid() is built in from PostgreSQL 13 and used by every
    # tenant table; pgcrypto provides it on older servers.
    op.execute("CREATE EXTENSION IF NOT EXISTS pgcrypto")

    op.create_table(
        "tenants",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column("schema_name", sqlmodel.sql.sqltypes.AutoString(length=63), nullable=False),
        sa.Column(
            "plan_type",
            sqlmodel.sql.sqltypes.AutoString(length=50),
            nullable=False,
            server_default="basic",
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("max_users", sa.Integer(), nullable=False, server_default="5"),
        sa.Column("max_storage", sa.BigInteger(), nullable=False, server_default="1073741824"),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("schema_name", name="uq_tenants_schema_name"),
        sa.CheckConstraint(
            "schema_name ~ '^tenant_[a-z0-9]+(_[a-z0-9]+)*$'", name="ck_tenants_schema_name"
        ),
        schema="public",
    )
    op.create_index("ix_public_tenants_name", "tenants", ["name"], schema="public")
    op.create_index("ix_public_tenants_plan_type", "tenants", ["plan_type"], schema="public")
    op.create_index("ix_public_tenants_is_active", "tenants", ["is_active"], schema="public")


def downgrade() -> None:
    op.drop_index("ix_public_tenants_is_active", table_name="tenants", schema="public")
    op.drop_index("ix_public_tenants_plan_type", table_name="tenants", schema="public")
    op.drop_index("ix_public_tenants_name", table_name="tenants", schema="public")
    op.drop_table("tenants", schema="public")
