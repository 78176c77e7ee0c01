"""Test helper functions for common data creation patterns."""

from datetime import UTC, datetime, timedelta
from uuid import UUID

from jose import jwt

from src.juris.core.config import get_settings
from src.juris.models.enums import AccountType


def make_access_token(
    user_id: str = "user-1",
    tenant_id: UUID | str | None = None,
    account_type: AccountType | None = AccountType.SIMPLES,
    role: str | None = None,
    expires_in: timedelta = timedelta(minutes=15),
    **extra_claims,
) -> str:
    """Sign an access token the way the authentication service would.

    Args:
        user_id: Token subject
        tenant_id: Tenant association, omitted when None
        account_type: Account tier claim, omitted when None
        role: Administrative role claim, omitted when None
        expires_in: Lifetime; pass a negative delta for an expired token
        **extra_claims: Overrides or additional claims

    Returns:
        Encoded JWT
    """
    settings = get_settings()
    claims: dict = {
        "sub": user_id,
        "type": "access",
        "exp": datetime.now(UTC) + expires_in,
    }
    if tenant_id is not None:
        claims["tenant_id"] = str(tenant_id)
    if account_type is not None:
        claims["account_type"] = account_type.value
    if role is not None:
        claims["role"] = role
    claims.update(extra_claims)
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
