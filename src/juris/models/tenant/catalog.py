"""Declarative catalog of the tables every tenant namespace must contain.

Tables are defined once, without a schema, on a dedicated MetaData. The
provisioner renders them into a concrete namespace through SQLAlchemy's
schema_translate_map, so nothing here ever sees a tenant name.

Every table shares the same audit shape: a UUID primary key generated by the
database, created_by, an is_active soft-delete flag and created_at/updated_at.
"""

import hashlib
from typing import Final

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Index,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    Uuid,
    func,
    text,
    true,
)
from sqlalchemy.dialects.postgresql import JSONB

tenant_metadata = MetaData()

EMPTY_LIST = text("'[]'::jsonb")
EMPTY_OBJECT = text("'{}'::jsonb")

# Written by the database or by the record helpers themselves
AUDIT_COLUMNS: Final[frozenset[str]] = frozenset({"id", "created_at", "updated_at"})


def _audit_columns() -> list[Column]:
    return [
        Column("id", Uuid, primary_key=True, server_default=text("gen_random_uuid()")),
        Column("created_by", String(255)),
        Column("is_active", Boolean, nullable=False, server_default=true()),
        Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
        Column("updated_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    ]


def _tenant_table(name: str, *columns: Column | Index | CheckConstraint) -> Table:
    return Table(
        name,
        tenant_metadata,
        *_audit_columns(),
        *columns,
        Index(f"ix_{name}_active", "is_active"),
    )


clients = _tenant_table(
    "clients",
    Column("name", String(255), nullable=False),
    Column("email", String(255)),
    Column("phone", String(50)),
    Column("cpf_cnpj", String(20)),
    Column("cpf", String(20)),
    Column("rg", String(20)),
    Column("organization", String(255)),
    Column("professional_title", String(255)),
    Column("marital_status", String(50)),
    Column("birth_date", Date),
    Column("address", JSONB, server_default=EMPTY_OBJECT),
    Column("contacts", JSONB, server_default=EMPTY_LIST),
    Column("budget", Numeric(15, 2)),
    Column("currency", String(3), server_default="BRL"),
    Column("status", String(50), server_default="active"),
    Column("tags", JSONB, server_default=EMPTY_LIST),
    Column("notes", Text),
    Index("ix_clients_email", "email"),
    Index("ix_clients_status", "status"),
)

projects = _tenant_table(
    "projects",
    Column("title", String(255), nullable=False),
    Column("name", String(255)),
    Column("description", Text),
    Column("client_id", Uuid),
    Column("client_name", String(255)),
    Column("status", String(50), server_default="proposal"),
    Column("priority", String(20), server_default="medium"),
    Column("progress", Integer, server_default="0"),
    Column("budget", Numeric(12, 2)),
    Column("estimated_value", Numeric(12, 2)),
    Column("start_date", Date),
    Column("end_date", Date),
    Column("contacts", JSONB, server_default=EMPTY_LIST),
    Column("tags", JSONB, server_default=EMPTY_LIST),
    Column("notes", Text),
    Index("ix_projects_status", "status"),
    Index("ix_projects_client_id", "client_id"),
)

tasks = _tenant_table(
    "tasks",
    Column("title", String(255), nullable=False),
    Column("description", Text),
    Column("project_id", Uuid),
    Column("project_title", String(255)),
    Column("client_id", Uuid),
    Column("client_name", String(255)),
    Column("assigned_to", JSONB, server_default=EMPTY_LIST),
    Column("status", String(50), server_default="not_started"),
    Column("priority", String(20), server_default="medium"),
    Column("progress", Integer, server_default="0"),
    Column("start_date", Date),
    Column("end_date", Date),
    Column("due_date", Date),
    Column("subtasks", JSONB, server_default=EMPTY_LIST),
    Column("tags", JSONB, server_default=EMPTY_LIST),
    Column("notes", Text),
    Index("ix_tasks_status", "status"),
    Index("ix_tasks_project_id", "project_id"),
)

transactions = _tenant_table(
    "transactions",
    Column("description", String(255), nullable=False),
    Column("amount", Numeric(12, 2), nullable=False),
    Column("type", String(20), nullable=False),
    Column("category_id", String(255)),
    Column("category", String(100)),
    Column("date", Date, nullable=False),
    Column("payment_method", String(50)),
    Column("status", String(20), server_default="confirmed"),
    Column("project_id", Uuid),
    Column("project_title", String(255)),
    Column("client_id", Uuid),
    Column("client_name", String(255)),
    Column("tags", JSONB, server_default=EMPTY_LIST),
    Column("notes", Text),
    Column("is_recurring", Boolean, server_default="false"),
    Column("recurring_frequency", String(20)),
    CheckConstraint("type IN ('income', 'expense')", name="ck_transactions_type"),
    Index("ix_transactions_type", "type"),
    Index("ix_transactions_date", "date"),
)

invoices = _tenant_table(
    "invoices",
    Column("number", String(50), nullable=False),
    Column("client_id", Uuid),
    Column("client_name", String(255)),
    Column("project_id", Uuid),
    Column("project_name", String(255)),
    Column("amount", Numeric(12, 2), nullable=False),
    Column("issue_date", Date),
    Column("due_date", Date, nullable=False),
    Column("payment_date", Date),
    Column("status", String(20), server_default="pending"),
    Column("description", Text),
    Column("items", JSONB, server_default=EMPTY_LIST),
    Column("notes", Text),
    Index("ix_invoices_status", "status"),
    Index("ix_invoices_due_date", "due_date"),
)

publications = _tenant_table(
    "publications",
    Column("title", String(255), nullable=False),
    Column("content", Text),
    Column("type", String(50), server_default="notification"),
    Column("status", String(20), server_default="novo"),
    Column("user_id", String(255)),
    Column("metadata", JSONB, server_default=EMPTY_OBJECT),
    Index("ix_publications_status", "status"),
    Index("ix_publications_user_id", "user_id"),
)

categories = _tenant_table(
    "categories",
    Column("name", String(255), nullable=False),
    Column("type", String(20), nullable=False),
    Column("color", String(7), server_default="#000000"),
    Column("description", Text),
    CheckConstraint("type IN ('income', 'expense')", name="ck_categories_type"),
    Index("ix_categories_type", "type"),
)

notifications = _tenant_table(
    "notifications",
    Column("user_id", String(255), nullable=False),
    Column("actor_id", String(255)),
    Column("type", String(20), nullable=False),
    Column("title", String(255), nullable=False),
    Column("message", Text, nullable=False),
    Column("payload", JSONB),
    Column("link", String(500)),
    Column("read", Boolean, server_default="false"),
    CheckConstraint(
        "type IN ('task', 'invoice', 'system', 'client', 'project')",
        name="ck_notifications_type",
    ),
    Index("ix_notifications_user_id", "user_id"),
    Index("ix_notifications_type", "type"),
    Index("ix_notifications_read", "read"),
    Index("ix_notifications_created_at", "created_at"),
)

REQUIRED_TABLES: Final[tuple[str, ...]] = (
    "clients",
    "projects",
    "tasks",
    "transactions",
    "invoices",
    "publications",
    "categories",
    "notifications",
)


def is_tenant_table(name: str) -> bool:
    return name in REQUIRED_TABLES


def get_table(name: str) -> Table:
    """Look up a catalog table.

    Raises:
        KeyError: If the table is not part of the tenant catalog
    """
    if not is_tenant_table(name):
        raise KeyError(f"Unknown tenant table: {name}")
    return tenant_metadata.tables[name]


def catalog_fingerprint() -> str:
    """Stable digest of table and column names, used to version cached state."""
    digest = hashlib.sha256()
    for name in REQUIRED_TABLES:
        columns = ",".join(sorted(c.name for c in tenant_metadata.tables[name].columns))
        digest.update(f"{name}:{columns};".encode())
    return digest.hexdigest()[:16]
