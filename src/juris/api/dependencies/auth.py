"""Bearer token dependencies.

Tokens are issued elsewhere; these dependencies only verify them and build the
Principal the tenant gate consumes.
"""

from collections.abc import Awaitable, Callable, Collection
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from src.juris.core.exceptions import AccessDenied
from src.juris.core.logging import bind_user_context, get_logger
from src.juris.core.security import Principal, decode_token, principal_from_claims
from src.juris.models.enums import AccountType

logger = get_logger(__name__)


async def get_current_principal(
    authorization: Annotated[str | None, Header()] = None,
) -> Principal:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid authorization header",
        )

    claims = decode_token(authorization[7:])
    if claims is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    principal = principal_from_claims(claims)
    if principal is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )

    bind_user_context(principal.user_id)
    return principal


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]


async def require_admin(principal: CurrentPrincipal) -> Principal:
    """Platform-wide administrative endpoints."""
    if not principal.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrative privileges required",
        )
    return principal


AdminPrincipal = Annotated[Principal, Depends(require_admin)]


def ensure_account_type(principal: Principal, allowed: Collection[AccountType]) -> None:
    """Refuse a non-admin principal whose account tier is not in allowed.

    Raises:
        AccessDenied: Rendered as the same generic 403 the tenant gate uses
    """
    if principal.is_admin or principal.account_type in allowed:
        return
    logger.warning(
        "Account type not permitted",
        user_id=principal.user_id,
        account_type=principal.account_type.value if principal.account_type else None,
        required=sorted(account_type.value for account_type in allowed),
    )
    raise AccessDenied("account type not permitted")


def require_account_types(
    *account_types: AccountType,
) -> Callable[[Principal], Awaitable[Principal]]:
    """Dependency factory limiting a route to the given account tiers. Admins bypass it."""
    allowed = frozenset(account_types)

    async def dependency(principal: CurrentPrincipal) -> Principal:
        ensure_account_type(principal, allowed)
        return principal

    return dependency
