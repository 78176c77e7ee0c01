"""Unit tests for NamespaceRegistry against a mocked repository."""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from src.juris.core.exceptions import InvalidNamespaceName, TenantInactive, TenantNotFound
from src.juris.services.namespace_registry import NamespaceRegistry
from tests.factories import TenantFactory

pytestmark = pytest.mark.unit


@pytest.fixture
def session():
    mock = MagicMock()
    mock.flush = AsyncMock()
    return mock


@pytest.fixture
def tenant_repo():
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=None)
    repo.delete = AsyncMock()
    return repo


@pytest.fixture
def registry(session, tenant_repo) -> NamespaceRegistry:
    return NamespaceRegistry(session, tenant_repo)


class TestResolve:
    async def test_active_tenant(self, registry, tenant_repo):
        tenant = TenantFactory.build()
        tenant_repo.get_by_id.return_value = tenant

        resolved = await registry.resolve(str(tenant.id))

        assert resolved.tenant_id == tenant.id
        assert resolved.schema_name == f"tenant_{tenant.id.hex}"
        assert resolved.is_active
        tenant_repo.get_by_id.assert_awaited_once_with(tenant.id)

    async def test_unknown_tenant(self, registry):
        with pytest.raises(TenantNotFound):
            await registry.resolve(uuid4())

    async def test_malformed_id_is_not_found(self, registry, tenant_repo):
        with pytest.raises(TenantNotFound):
            await registry.resolve("not-a-uuid")
        tenant_repo.get_by_id.assert_not_awaited()

    async def test_inactive_tenant(self, registry, tenant_repo):
        tenant_repo.get_by_id.return_value = TenantFactory.inactive()
        with pytest.raises(TenantInactive):
            await registry.resolve(uuid4())

    async def test_corrupted_schema_name(self, registry, tenant_repo):
        tenant_repo.get_by_id.return_value = TenantFactory.build(schema_name="public")
        with pytest.raises(InvalidNamespaceName):
            await registry.resolve(uuid4())


class TestMutations:
    async def test_register_validates_and_flushes(self, registry, session, tenant_repo):
        tenant = TenantFactory.build()
        await registry.register(tenant)
        tenant_repo.add.assert_called_once_with(tenant)
        session.flush.assert_awaited_once()

    async def test_register_rejects_unsafe_name(self, registry, tenant_repo):
        tenant = TenantFactory.build(schema_name="tenant_x; DROP")
        with pytest.raises(InvalidNamespaceName):
            await registry.register(tenant)
        tenant_repo.add.assert_not_called()

    async def test_set_active(self, registry, tenant_repo):
        tenant = TenantFactory.build()
        tenant_repo.get_by_id.return_value = tenant

        updated = await registry.set_active(tenant.id, False)

        assert updated.is_active is False

    async def test_set_active_unknown(self, registry):
        with pytest.raises(TenantNotFound):
            await registry.set_active(uuid4(), True)

    async def test_remove(self, registry, session, tenant_repo):
        tenant = TenantFactory.build()
        await registry.remove(tenant)
        tenant_repo.delete.assert_awaited_once_with(tenant)
        session.flush.assert_awaited_once()
