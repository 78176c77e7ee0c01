"""Repository for the tenant registry."""

from sqlmodel import select

from src.juris.models.public import Tenant
from src.juris.repositories.base import BaseRepository


class TenantRepository(BaseRepository[Tenant]):
    """Registry rows in public.tenants."""

    model = Tenant

    async def list_all_paginated(
        self, cursor: str | None, limit: int, active_only: bool = True
    ) -> tuple[list[Tenant], str | None, bool]:
        """List tenants newest first.

        Args:
            cursor: Optional cursor for pagination
            limit: Maximum number of results
            active_only: Whether to hide deactivated tenants

        Returns:
            Tuple of (items, next_cursor, has_more)
        """
        query = select(Tenant)
        if active_only:
            query = query.where(Tenant.is_active == True)  # noqa: E712
        return await self.paginate(query, cursor, limit)
