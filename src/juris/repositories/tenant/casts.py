"""Column cast table for tenant record writes.

Every special-cased column name lives here. A column gets its SQL cast from,
in order: the structured-field list, the date-field list (or an ``_date``
suffix), the runtime shape of the value (UUID or canonical UUID text), and
finally container values, which are always stored as JSONB.

    >>> infer_cast("tags", ["vip"])
    <CastKind.JSONB: 'jsonb'>
    >>> infer_cast("due_date", "2024-05-01")
    <CastKind.DATE: 'date'>
    >>> infer_cast("client_id", "0b8f4d7e-8a4b-4c2e-9a55-2f3c1f0d9e11")
    <CastKind.UUID: 'uuid'>
"""

import json
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Final
from uuid import UUID

from sqlalchemy import Boolean, Integer, Numeric, Uuid
from sqlalchemy.types import TypeEngine

from src.juris.models.enums import CastKind

STRUCTURED_FIELDS: Final[frozenset[str]] = frozenset(
    {
        "tags",
        "metadata",
        "address",
        "contacts",
        "items",
        "subtasks",
        "assigned_to",
        "payload",
    }
)

DATE_FIELDS: Final[frozenset[str]] = frozenset(
    {
        "date",
        "birth_date",
        "start_date",
        "end_date",
        "due_date",
        "issue_date",
        "payment_date",
    }
)

DATE_SUFFIX: Final = "_date"

UUID_PATTERN: Final = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)

SQL_TYPES: Final[dict[CastKind, str]] = {
    CastKind.JSONB: "JSONB",
    CastKind.DATE: "DATE",
    CastKind.UUID: "UUID",
}

BOOLEAN_STRINGS: Final[dict[str, bool]] = {"true": True, "false": False}


def is_date_field(column: str) -> bool:
    return column in DATE_FIELDS or column.endswith(DATE_SUFFIX)


def looks_like_uuid(value: Any) -> bool:
    if isinstance(value, UUID):
        return True
    return isinstance(value, str) and UUID_PATTERN.fullmatch(value) is not None


def infer_cast(column: str, value: Any) -> CastKind:
    """Pick the SQL cast for one written column."""
    if column in STRUCTURED_FIELDS:
        return CastKind.JSONB
    if is_date_field(column):
        return CastKind.DATE
    if looks_like_uuid(value):
        return CastKind.UUID
    if isinstance(value, (dict, list)):
        return CastKind.JSONB
    return CastKind.NONE


def placeholder(bind_name: str, kind: CastKind) -> str:
    """Render the bound parameter reference, wrapped in a cast if needed.

    ``CAST(:p AS T)`` is used rather than ``:p::T`` so the bind stays
    parseable by SQLAlchemy's text() construct.
    """
    if kind is CastKind.NONE:
        return f":{bind_name}"
    return f"CAST(:{bind_name} AS {SQL_TYPES[kind]})"


def _to_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError:
            return datetime.fromisoformat(value).date()
    raise ValueError(f"Cannot interpret {type(value).__name__} as a date")


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in BOOLEAN_STRINGS:
        return BOOLEAN_STRINGS[value.lower()]
    raise ValueError(f"Cannot interpret {value!r} as a boolean")


def _to_uuid(value: Any) -> UUID:
    if isinstance(value, UUID):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Cannot interpret {type(value).__name__} as a UUID")
    try:
        return UUID(value)
    except ValueError as e:
        raise ValueError(f"Cannot interpret {value!r} as a UUID") from e


def _coerce_scalar(sql_type: TypeEngine[Any], value: Any) -> Any:
    if isinstance(sql_type, Boolean):
        return _to_bool(value)
    if isinstance(sql_type, Uuid):
        return _to_uuid(value)
    if isinstance(value, bool):
        return value
    try:
        if isinstance(sql_type, Numeric) and isinstance(value, (int, float, str)):
            return Decimal(str(value))
        if isinstance(sql_type, Integer) and isinstance(value, (float, str)):
            return int(value)
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"Cannot interpret {value!r} as {sql_type}") from e
    return value


def bind_value(kind: CastKind, value: Any, sql_type: TypeEngine[Any] | None = None) -> Any:
    """Convert a Python value into what the driver expects for the cast.

    asyncpg binds CAST(:p AS JSONB) as text, so structured values are
    serialised here; dates and UUIDs are parsed into their native types.
    Uncast values are checked against the column type: numbers and numeric
    strings are coerced, UUID columns take only UUID text and boolean columns
    only real booleans or "true" and "false".

    Raises:
        ValueError: If the value cannot be interpreted for its cast or column
    """
    if value is None:
        return None
    if kind is CastKind.JSONB:
        return json.dumps(value, default=str)
    if kind is CastKind.DATE:
        return _to_date(value)
    if kind is CastKind.UUID:
        return value if isinstance(value, UUID) else UUID(str(value))
    if sql_type is not None:
        return _coerce_scalar(sql_type, value)
    return value
