"""Integration test fixtures for database and HTTP client operations.

These fixtures require external resources (PostgreSQL database). Tests are
skipped when the configured database cannot be reached.
Uses polyfactory for type-safe test data generation.
"""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool

from src.juris.api.dependencies import get_provisioner
from src.juris.core import db
from src.juris.core import redis as redis_core
from src.juris.core.config import get_settings
from src.juris.core.db import run_migrations_async
from src.juris.main import create_app
from src.juris.models.public import Tenant
from src.juris.services.schema_provisioner import SchemaProvisioner
from tests.factories import TenantFactory
from tests.utils.cleanup import cleanup_tenant


@pytest.fixture(autouse=True)
async def _reset_redis_between_tests() -> AsyncGenerator[None]:
    """Reset Redis state between tests to prevent event loop issues.

    Redis clients hold references to their event loop. When pytest creates
    a new event loop for each test, stale Redis clients cause
    'Event loop is closed' errors.
    """
    redis_core.reset_redis_state()
    yield
    await redis_core.close_redis()


@pytest.fixture(scope="function")
async def engine() -> AsyncGenerator[AsyncEngine]:
    """Create test database engine and ensure public schema migrations are applied."""
    await db.dispose_engine()

    settings = get_settings()
    test_engine = create_async_engine(settings.database_url, poolclass=NullPool)
    try:
        async with test_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        await test_engine.dispose()
        pytest.skip(f"PostgreSQL unavailable: {type(e).__name__}")

    # Run public schema migrations to ensure the registry exists
    await run_migrations_async()

    yield test_engine
    await test_engine.dispose()
    await db.dispose_engine()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Provide an async session on the public schema.

    The session never auto-commits; tests call `await session.commit()`.
    """
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
def provisioner(engine: AsyncEngine) -> SchemaProvisioner:
    return SchemaProvisioner(engine=engine)


async def _register(db_session: AsyncSession, **kwargs) -> Tenant:
    tenant = TenantFactory.build(**kwargs)
    db_session.add(tenant)
    await db_session.commit()
    await db_session.refresh(tenant)
    return tenant


@pytest.fixture
async def registered_tenant(
    engine: AsyncEngine, db_session: AsyncSession
) -> AsyncGenerator[Tenant]:
    """Registry row only; the namespace does not exist yet."""
    tenant = await _register(db_session)

    yield tenant

    async with engine.connect() as conn:
        await cleanup_tenant(conn, tenant.id, tenant.schema_name)
        await conn.commit()


@pytest.fixture
async def provisioned_tenant(
    registered_tenant: Tenant, provisioner: SchemaProvisioner
) -> Tenant:
    await provisioner.ensure_namespace(registered_tenant.id, registered_tenant.schema_name)
    return registered_tenant


@pytest.fixture
async def two_tenants(
    engine: AsyncEngine, db_session: AsyncSession, provisioner: SchemaProvisioner
) -> AsyncGenerator[tuple[Tenant, Tenant]]:
    """Two registered and provisioned tenants."""
    tenant_a = await _register(db_session, name="Escritorio A")
    tenant_b = await _register(db_session, name="Escritorio B")
    await provisioner.ensure_namespace(tenant_a.id, tenant_a.schema_name)
    await provisioner.ensure_namespace(tenant_b.id, tenant_b.schema_name)

    yield tenant_a, tenant_b

    async with engine.connect() as conn:
        await cleanup_tenant(conn, tenant_a.id, tenant_a.schema_name)
        await cleanup_tenant(conn, tenant_b.id, tenant_b.schema_name)
        await conn.commit()


@pytest.fixture
async def client(engine: AsyncEngine) -> AsyncGenerator[AsyncClient]:
    """HTTP client on a fresh app whose provisioner uses the test engine."""
    await db.dispose_engine()

    app = create_app()
    app.dependency_overrides[get_provisioner] = lambda: SchemaProvisioner(engine=engine)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    await db.dispose_engine()
