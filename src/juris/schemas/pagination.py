"""Keyset cursors for registry listings.

A cursor carries the (created_at, id) pair of the last row on a page, so rows
created in the same instant are neither skipped nor repeated.
"""

import base64
from datetime import datetime
from typing import Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel, Field

T = TypeVar("T")

CURSOR_SEPARATOR = "|"


class PaginatedResponse(BaseModel, Generic[T]):
    """One page of results plus an opaque cursor for the next one."""

    items: list[T]
    next_cursor: str | None = Field(
        default=None,
        description="Opaque cursor for fetching the next page. None if no more pages.",
    )
    has_more: bool = Field(default=False, description="Whether more items follow this page.")


def encode_cursor(created_at: datetime, row_id: UUID) -> str:
    raw = f"{created_at.isoformat()}{CURSOR_SEPARATOR}{row_id}"
    return base64.urlsafe_b64encode(raw.encode()).decode()


def decode_cursor(cursor: str) -> tuple[datetime, UUID]:
    """Decode a cursor produced by encode_cursor.

    Raises:
        ValueError: If the cursor was not produced by encode_cursor
    """
    try:
        raw = base64.urlsafe_b64decode(cursor.encode()).decode()
        created_at, row_id = raw.split(CURSOR_SEPARATOR, 1)
        return datetime.fromisoformat(created_at), UUID(row_id)
    except (ValueError, UnicodeDecodeError) as e:
        raise ValueError("Invalid cursor") from e
