"""Records API tests with the tenant gate replaced by a recording gateway."""

from collections.abc import AsyncGenerator
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient

from src.juris.api.dependencies import get_current_principal, get_tenant_gateway
from src.juris.core.exceptions import AccessDenied
from src.juris.core.security import Principal
from src.juris.main import create_app
from src.juris.models.enums import AccountType

pytestmark = pytest.mark.unit


class RecordingGateway:
    """Stands in for TenantQueryGateway; returns canned rows."""

    schema_name = "tenant_0a0b0c"

    def __init__(self):
        self.rows: list[dict] = []
        self.calls: list[tuple[str, dict]] = []

    async def execute(self, template, params=None):
        self.calls.append((template, dict(params or {})))
        return self.rows

    async def fetch_one(self, template, params=None):
        rows = await self.execute(template, params)
        return rows[0] if rows else None


@pytest.fixture
def gateway() -> RecordingGateway:
    return RecordingGateway()


@pytest.fixture
async def client(gateway: RecordingGateway) -> AsyncGenerator[AsyncClient]:
    app = create_app()
    app.dependency_overrides[get_current_principal] = lambda: Principal(
        user_id="user-7", tenant_id=str(uuid4()), account_type=AccountType.COMPOSTA
    )
    app.dependency_overrides[get_tenant_gateway] = lambda: gateway
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


class TestRecordsApi:
    async def test_list(self, client: AsyncClient, gateway: RecordingGateway):
        gateway.rows = [{"id": str(uuid4()), "name": "Acme"}]

        response = await client.get("/api/v1/records/clients", params={"limit": 10})

        assert response.status_code == 200
        body = response.json()
        assert body["items"] == gateway.rows
        assert body["limit"] == 10
        template, params = gateway.calls[0]
        assert template.startswith('SELECT * FROM {schema}."clients"')
        assert params == {"limit": 10, "offset": 0}

    async def test_unknown_table(self, client: AsyncClient, gateway: RecordingGateway):
        response = await client.get("/api/v1/records/tenants")

        assert response.status_code == 404
        assert gateway.calls == []

    async def test_create_sets_created_by(self, client: AsyncClient, gateway: RecordingGateway):
        gateway.rows = [{"id": str(uuid4()), "name": "Acme", "created_by": "user-7"}]

        response = await client.post(
            "/api/v1/records/clients", json={"fields": {"name": "Acme", "tags": ["vip"]}}
        )

        assert response.status_code == 201
        template, params = gateway.calls[0]
        assert '"created_by", "name", "tags"' in template
        assert params["p0"] == "user-7"
        assert params["p2"] == '["vip"]'

    async def test_create_with_unknown_column(self, client: AsyncClient, gateway: RecordingGateway):
        response = await client.post(
            "/api/v1/records/clients", json={"fields": {"nonexistent": 1}}
        )

        assert response.status_code == 422
        assert gateway.calls == []

    async def test_create_with_audit_column(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/records/clients", json={"fields": {"name": "x", "id": str(uuid4())}}
        )
        assert response.status_code == 422

    async def test_get_missing(self, client: AsyncClient):
        response = await client.get(f"/api/v1/records/projects/{uuid4()}")
        assert response.status_code == 404

    async def test_update(self, client: AsyncClient, gateway: RecordingGateway):
        record_id = uuid4()
        gateway.rows = [{"id": str(record_id), "status": "done"}]

        response = await client.patch(
            f"/api/v1/records/tasks/{record_id}", json={"fields": {"status": "done"}}
        )

        assert response.status_code == 200
        assert response.json()["status"] == "done"
        assert gateway.calls[0][1]["record_id"] == record_id

    async def test_soft_delete(self, client: AsyncClient, gateway: RecordingGateway):
        gateway.rows = [{"id": str(uuid4()), "is_active": False}]

        response = await client.delete(f"/api/v1/records/invoices/{uuid4()}")

        assert response.status_code == 204
        assert '"is_active" = false' in gateway.calls[0][0]

    async def test_soft_delete_missing(self, client: AsyncClient):
        response = await client.delete(f"/api/v1/records/invoices/{uuid4()}")
        assert response.status_code == 404


async def test_admin_without_tenant_scope_is_denied():
    """A global context has no gateway, so tenant routes are closed to it."""
    app = create_app()
    app.dependency_overrides[get_current_principal] = lambda: Principal(
        user_id="root", role="admin"
    )

    async def _no_scope():
        raise AccessDenied("no tenant scope")

    app.dependency_overrides[get_tenant_gateway] = _no_scope
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        response = await ac.get("/api/v1/records/clients")

    assert response.status_code == 403
    assert response.json()["detail"] == "Access denied"


def _client_for(principal: Principal, gateway: RecordingGateway) -> AsyncClient:
    app = create_app()
    app.dependency_overrides[get_current_principal] = lambda: principal
    app.dependency_overrides[get_tenant_gateway] = lambda: gateway
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


class TestAccountTiers:
    async def test_simples_cannot_read_invoices(self, gateway: RecordingGateway):
        principal = Principal(
            user_id="user-1", tenant_id=str(uuid4()), account_type=AccountType.SIMPLES
        )
        async with _client_for(principal, gateway) as ac:
            response = await ac.get("/api/v1/records/invoices")

        assert response.status_code == 403
        assert response.json()["detail"] == "Access denied"
        assert gateway.calls == []

    async def test_simples_keeps_open_tables(self, gateway: RecordingGateway):
        principal = Principal(
            user_id="user-1", tenant_id=str(uuid4()), account_type=AccountType.SIMPLES
        )
        async with _client_for(principal, gateway) as ac:
            response = await ac.get("/api/v1/records/clients")

        assert response.status_code == 200

    @pytest.mark.parametrize("account_type", [AccountType.COMPOSTA, AccountType.GERENCIAL])
    async def test_billing_tiers_read_invoices(
        self, gateway: RecordingGateway, account_type: AccountType
    ):
        principal = Principal(user_id="user-1", tenant_id=str(uuid4()), account_type=account_type)
        async with _client_for(principal, gateway) as ac:
            response = await ac.get("/api/v1/records/invoices")

        assert response.status_code == 200

    async def test_unknown_table_is_404_before_tier_check(self, gateway: RecordingGateway):
        principal = Principal(
            user_id="user-1", tenant_id=str(uuid4()), account_type=AccountType.SIMPLES
        )
        async with _client_for(principal, gateway) as ac:
            response = await ac.get("/api/v1/records/tenants")

        assert response.status_code == 404
