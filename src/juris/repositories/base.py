"""Base repository for public-schema models."""

from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import tuple_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from src.juris.schemas.pagination import decode_cursor, encode_cursor

ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseRepository(Generic[ModelType]):
    """Data access for one public-schema model.

    Models are expected to carry ``id`` and ``created_at`` columns. Repositories
    never commit; the service that owns the unit of work does.
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, id: UUID) -> ModelType | None:
        result = await self.session.execute(
            select(self.model).where(self.model.id == id)  # type: ignore[attr-defined]
        )
        return result.scalar_one_or_none()

    def add(self, entity: ModelType) -> None:
        """Add entity to session (no flush/commit)."""
        self.session.add(entity)

    async def delete(self, entity: ModelType) -> None:
        """Mark entity for deletion (no flush/commit)."""
        await self.session.delete(entity)

    async def paginate(
        self, query: Any, cursor: str | None, limit: int
    ) -> tuple[list[ModelType], str | None, bool]:
        """Keyset pagination on (created_at, id), newest first.

        An unreadable cursor restarts from the first page.

        Returns:
            Tuple of (items, next_cursor, has_more)
        """
        created_at = self.model.created_at  # type: ignore[attr-defined]
        row_id = self.model.id  # type: ignore[attr-defined]

        if cursor:
            try:
                after = decode_cursor(cursor)
            except ValueError:
                after = None
            if after is not None:
                query = query.where(tuple_(created_at, row_id) < tuple_(*after))

        query = query.order_by(created_at.desc(), row_id.desc()).limit(limit + 1)
        result = await self.session.execute(query)
        items = list(result.scalars().all())

        has_more = len(items) > limit
        if has_more:
            items = items[:limit]

        next_cursor = None
        if has_more and items:
            last = items[-1]
            next_cursor = encode_cursor(last.created_at, last.id)  # type: ignore[attr-defined]

        return items, next_cursor, has_more
