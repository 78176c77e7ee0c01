"""Security utilities - namespace validators and token verification.

Re-exports all security-related functions for convenience.
"""

from src.juris.core.security.validators import (
    TENANT_SCHEMA_PREFIX,
    is_safe_identifier,
    quote_identifier,
    schema_name_for_tenant,
    validate_schema_name,
)
from src.juris.core.security.tokens import (  # noqa: I001
    Principal,
    decode_token,
    principal_from_claims,
)

__all__ = [
    # Validators
    "TENANT_SCHEMA_PREFIX",
    "is_safe_identifier",
    "quote_identifier",
    "schema_name_for_tenant",
    "validate_schema_name",
    # Tokens
    "Principal",
    "decode_token",
    "principal_from_claims",
]
