"""Tests for the error taxonomy handlers and request_id in error responses."""

from uuid import uuid4

import pytest
from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.juris.core.exceptions import (
    ACCESS_DENIED_DETAIL,
    AccessDenied,
    InvalidNamespaceName,
    QueryExecutionFailure,
    SchemaProvisioningFailure,
    TenantInactive,
    TenantNotFound,
    setup_exception_handlers,
)
from src.juris.main import create_app


@pytest.fixture
def client() -> TestClient:
    """Test client fixture."""
    app = create_app()
    return TestClient(app)


@pytest.fixture
def failing_client() -> TestClient:
    """Small app whose routes raise each tenancy error."""
    app = FastAPI()
    setup_exception_handlers(app)
    app.add_middleware(CorrelationIdMiddleware)
    tenant_id = uuid4()

    errors = {
        "not-found": TenantNotFound(tenant_id),
        "inactive": TenantInactive(tenant_id),
        "denied": AccessDenied("missing tenant"),
        "provisioning": SchemaProvisioningFailure(
            "tenant_abc", "create_table:clients", ConnectionRefusedError("postgresql://u:pw@db")
        ),
        "query": QueryExecutionFailure("tenant_abc", tenant_id, "UndefinedTableError", "42P01"),
        "namespace": InvalidNamespaceName("public", "bad"),
        "unexpected": RuntimeError("boom"),
    }

    @app.get("/raise/{kind}")
    async def _raise(kind: str) -> None:
        raise errors[kind]

    return TestClient(app, raise_server_exceptions=False)


def test_http_exception_includes_request_id(client: TestClient) -> None:
    """Test that HTTPException responses include request_id."""
    response = client.get("/api/v1/nonexistent-endpoint")

    assert response.status_code == 404
    data = response.json()
    assert "request_id" in data, "request_id not found in error response"
    assert "detail" in data, "detail not found in error response"
    assert isinstance(data["request_id"], str), "request_id is not a string"


def test_unauthenticated_includes_request_id(client: TestClient) -> None:
    """Tenant routes without a bearer token get 401 with a request_id."""
    response = client.get("/api/v1/records/clients")

    assert response.status_code == 401
    data = response.json()
    assert data["detail"] == "Missing or invalid authorization header"
    assert data["request_id"]


def test_request_id_echoes_header(client: TestClient) -> None:
    request_id = uuid4().hex
    response = client.get("/api/v1/nonexistent-endpoint", headers={"X-Request-ID": request_id})
    assert response.json()["request_id"] == request_id
    assert response.headers["X-Request-ID"] == request_id


class TestTenancyErrorMapping:
    @pytest.mark.parametrize("kind", ["not-found", "inactive", "denied"])
    def test_access_failures_are_indistinguishable(self, failing_client: TestClient, kind: str):
        response = failing_client.get(f"/raise/{kind}")

        assert response.status_code == 403
        assert response.json()["detail"] == ACCESS_DENIED_DETAIL
        assert response.json()["request_id"]

    def test_provisioning_failure_is_503_without_details(self, failing_client: TestClient):
        response = failing_client.get("/raise/provisioning")

        assert response.status_code == 503
        body = response.text
        assert "pw@db" not in body
        assert "tenant_abc" not in body

    @pytest.mark.parametrize("kind", ["query", "namespace", "unexpected"])
    def test_internal_failures_are_500(self, failing_client: TestClient, kind: str):
        response = failing_client.get(f"/raise/{kind}")

        assert response.status_code == 500
        assert response.json()["detail"] == "Internal server error"
        assert "42P01" not in response.text
