"""Tests for health check endpoints."""

from unittest.mock import AsyncMock

from sqlalchemy.exc import OperationalError

from app.core.database import get_db
from app.main import app


async def test_health_check_returns_ok(client):
    """Liveness endpoint should return status ok without touching the database."""
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": None}


async def test_readiness_reports_connected(client):
    """Readiness should report connected when SELECT 1 succeeds."""
    session = AsyncMock()
    app.dependency_overrides[get_db] = lambda: session

    response = await client.get("/health/ready")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": "connected"}
    session.execute.assert_awaited_once()


async def test_readiness_reports_disconnected(client):
    """Readiness should degrade to unhealthy when the database is unreachable."""
    session = AsyncMock()
    session.execute.side_effect = OperationalError("SELECT 1", {}, Exception("refused"))
    app.dependency_overrides[get_db] = lambda: session

    response = await client.get("/health/ready")

    assert response.status_code == 200
    assert response.json() == {"status": "unhealthy", "database": "disconnected"}
