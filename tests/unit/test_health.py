"""Health endpoint tests with database and Redis checks faked."""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from src.juris.core.health import check_health, reset_health_cache
from src.juris.main import create_app

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def _reset_cache():
    reset_health_cache()
    yield
    reset_health_cache()


def _patch_session(monkeypatch: pytest.MonkeyPatch, error: Exception | None = None) -> None:
    @asynccontextmanager
    async def _get_session(engine=None):
        session = MagicMock()
        session.execute = AsyncMock(side_effect=error)
        yield session

    monkeypatch.setattr("src.juris.core.health.get_session", _get_session)


def _patch_redis(monkeypatch: pytest.MonkeyPatch, client) -> None:
    async def _get_redis():
        return client

    monkeypatch.setattr("src.juris.core.health.get_redis", _get_redis)


async def test_healthy(monkeypatch, fake_redis):
    _patch_session(monkeypatch)
    _patch_redis(monkeypatch, fake_redis)

    status = await check_health()

    assert status["status"] == "healthy"
    assert status["database"] == "healthy"
    assert status["redis"] == "healthy"


async def test_redis_not_configured(monkeypatch):
    _patch_session(monkeypatch)
    _patch_redis(monkeypatch, None)

    status = await check_health()

    assert status["status"] == "healthy"
    assert status["redis"] == "not_configured"


async def test_redis_down_degrades(monkeypatch):
    _patch_session(monkeypatch)
    broken = MagicMock()
    broken.ping = AsyncMock(side_effect=ConnectionRefusedError())
    _patch_redis(monkeypatch, broken)

    status = await check_health()

    assert status["status"] == "degraded"
    assert status["redis"] == "unhealthy: ConnectionRefusedError"


async def test_database_down_hides_details(monkeypatch):
    error = OperationalError("SELECT 1", {}, Exception("postgresql://u:secret@db"))
    _patch_session(monkeypatch, error)
    _patch_redis(monkeypatch, None)

    status = await check_health()

    assert status["status"] == "unhealthy"
    assert status["database"] == "unhealthy: OperationalError"
    assert "secret" not in str(status)


def test_endpoint_status_codes_and_cache(monkeypatch):
    error = OperationalError("SELECT 1", {}, Exception("down"))
    _patch_session(monkeypatch, error)
    _patch_redis(monkeypatch, None)
    client = TestClient(create_app())

    first = client.get("/health")
    second = client.get("/health")

    assert first.status_code == 503
    assert first.json()["cached"] is False
    assert second.status_code == 503
    assert second.json()["cached"] is True
