"""Database session management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, AsyncSession, async_sessionmaker

from src.juris.core.db.engine import get_engine
from src.juris.core.security.validators import quote_identifier, validate_schema_name


@asynccontextmanager
async def get_session(
    engine: AsyncEngine | None = None,
) -> AsyncGenerator[AsyncSession]:
    """Create a session for the public schema (tenant registry).

    Args:
        engine: Optional engine override for testing.
    """
    if engine is None:
        engine = get_engine()

    session_factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with session_factory() as session:
        yield session


@asynccontextmanager
async def tenant_transaction(
    schema_name: str,
    engine: AsyncEngine | None = None,
) -> AsyncGenerator[AsyncConnection]:
    """Open a transaction whose search_path is ONLY the tenant schema.

    SET LOCAL scopes the search_path to this transaction, so the pooled
    connection is back on its default path after commit or rollback.
    Public tables are unreachable unless explicitly qualified.

    Args:
        schema_name: Validated tenant schema.
        engine: Optional engine override for testing.

    Yields:
        AsyncConnection inside an open transaction.
    """
    validate_schema_name(schema_name)
    if engine is None:
        engine = get_engine()

    async with engine.begin() as connection:
        await connection.execute(text(f"SET LOCAL search_path TO {quote_identifier(schema_name)}"))
        yield connection
