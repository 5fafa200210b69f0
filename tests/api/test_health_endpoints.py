import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock

from sqlalchemy.exc import OperationalError

from lms.api.main import create_app
from lms.boundary.db import get_async_db


@pytest.fixture
def client():
    app = create_app()
    return TestClient(app)


@pytest.mark.parametrize("path", ["/health", "/healthz", "/api/health"])
def test_health_check(client, path):
    response = client.get(path)
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "message": "Server Healthy"}


def test_health_check_db(client):
    mock_db = AsyncMock()
    client.app.dependency_overrides[get_async_db] = lambda: mock_db

    response = client.get("/api/health/db")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "message": "Database connection OK"}
    mock_db.execute.assert_awaited_once()


def test_health_check_db_unavailable(client):
    mock_db = AsyncMock()
    mock_db.execute.side_effect = OperationalError("SELECT 1", {}, Exception("connection refused"))
    client.app.dependency_overrides[get_async_db] = lambda: mock_db

    response = client.get("/api/health/db")

    assert response.status_code == 503
    assert response.json() == {"status": "unhealthy", "message": "Database unavailable"}


def test_security_and_correlation_headers(client):
    response = client.get("/health", headers={"X-Correlation-ID": "abc-123"})

    assert response.headers["X-Correlation-ID"] == "abc-123"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_correlation_id_generated_when_missing(client):
    response = client.get("/health")

    assert response.headers["X-Correlation-ID"]
