"""Namespace and identifier validators.

A namespace name is the only value ever interpolated into SQL text, so every
code path that builds DDL or DML re-validates it here first.
"""

import re
from typing import Final
from uuid import UUID

from src.juris.core.exceptions import InvalidNamespaceName

MAX_SCHEMA_LENGTH: Final[int] = 63  # PostgreSQL identifier limit
TENANT_SCHEMA_PREFIX: Final[str] = "tenant_"
TENANT_SCHEMA_REGEX: Final[str] = rf"^{TENANT_SCHEMA_PREFIX}[a-z0-9]+(_[a-z0-9]+)*$"
IDENTIFIER_REGEX: Final[str] = r"^[a-z_][a-z0-9_]{0,62}$"

_TENANT_SCHEMA_PATTERN: Final[re.Pattern[str]] = re.compile(TENANT_SCHEMA_REGEX)
_IDENTIFIER_PATTERN: Final[re.Pattern[str]] = re.compile(IDENTIFIER_REGEX)
_FORBIDDEN_PATTERNS: Final[tuple[str, ...]] = (
    "pg_",
    "information_schema",
    "public",
    "--",
    ";",
    "/*",
    "*/",
)


def schema_name_for_tenant(tenant_id: UUID) -> str:
    """Derive the namespace name of a tenant from its identifier.

    The name is system generated and never taken from user input:
    'tenant_' followed by the 32 lowercase hex digits of the tenant UUID.
    """
    schema_name = f"{TENANT_SCHEMA_PREFIX}{tenant_id.hex}"
    validate_schema_name(schema_name)
    return schema_name


def validate_schema_name(schema_name: str) -> str:
    """Validate schema name follows the strict tenant naming convention.

    Schema names must:
    - Start with 'tenant_' prefix
    - Contain only lowercase letters, numbers, and single underscores as separators
    - Not exceed 63 characters (PostgreSQL limit)
    - Not contain forbidden patterns

    Raises:
        InvalidNamespaceName: If schema name is invalid

    Examples:
        >>> validate_schema_name("tenant_0f3c2a")  # Valid
        >>> validate_schema_name("acme")  # Invalid - missing prefix
        >>> validate_schema_name("tenant__acme")  # Invalid - consecutive underscores
    """
    if not isinstance(schema_name, str):
        raise InvalidNamespaceName(repr(schema_name), "Schema name must be a string")

    if len(schema_name) > MAX_SCHEMA_LENGTH:
        raise InvalidNamespaceName(
            schema_name,
            f"Schema name exceeds PostgreSQL limit: {len(schema_name)} > {MAX_SCHEMA_LENGTH}",
        )

    if not _TENANT_SCHEMA_PATTERN.fullmatch(schema_name):
        raise InvalidNamespaceName(
            schema_name,
            f"Invalid schema name format: {schema_name}. "
            "Must be 'tenant_' followed by lowercase alphanumeric "
            "with single underscores as separators.",
        )

    if any(pattern in schema_name.lower() for pattern in _FORBIDDEN_PATTERNS):
        raise InvalidNamespaceName(
            schema_name, f"Schema name contains forbidden pattern: {schema_name}"
        )
    return schema_name


def is_safe_identifier(name: str) -> bool:
    """Check a table or column name against the plain lowercase identifier pattern."""
    return isinstance(name, str) and bool(_IDENTIFIER_PATTERN.fullmatch(name))


def quote_identifier(name: str) -> str:
    """Double-quote an identifier that already passed validation."""
    if not is_safe_identifier(name):
        raise ValueError(f"Unsafe SQL identifier: {name!r}")
    return f'"{name}"'
