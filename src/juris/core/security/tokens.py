"""Bearer token verification.

Tokens are issued by the authentication service. This side only verifies the
signature and turns the claims into a Principal.
"""

from dataclasses import dataclass
from typing import Any
from uuid import UUID

from jose import JWTError, jwt

from src.juris.core.config import get_settings
from src.juris.models.enums import AccountType


@dataclass(frozen=True)
class Principal:
    """Verified caller identity.

    Attributes:
        user_id: Subject of the token
        tenant_id: Tenant association, absent for administrative accounts
        account_type: Account tier of a regular user
        role: Administrative role, if any
    """

    user_id: str
    tenant_id: str | None = None
    account_type: AccountType | None = None
    role: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role is not None and self.role in get_settings().admin_roles


def decode_token(token: str) -> dict[str, Any] | None:
    """Decode and validate JWT token. Returns None on any error."""
    settings = get_settings()
    try:
        return jwt.decode(  # type: ignore[no-any-return]
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        return None


def principal_from_claims(claims: dict[str, Any]) -> Principal | None:
    """Build a Principal from verified claims. Returns None if they are malformed."""
    if claims.get("type", "access") != "access":
        return None

    user_id = claims.get("sub")
    if not user_id:
        return None

    tenant_id = claims.get("tenant_id")
    if tenant_id is not None:
        try:
            tenant_id = str(UUID(str(tenant_id)))
        except ValueError:
            return None

    account_type = None
    if claims.get("account_type"):
        try:
            account_type = AccountType(claims["account_type"])
        except ValueError:
            return None

    return Principal(
        user_id=str(user_id),
        tenant_id=tenant_id,
        account_type=account_type,
        role=claims.get("role") or None,
    )
