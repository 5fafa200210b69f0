import pytest
from datetime import datetime, timedelta, timezone
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock
from uuid import uuid4

from lms.api.deps.auth import get_current_user
from lms.api.deps.dependencies import get_auth_service
from lms.api.main import create_app
from lms.core.exceptions import AuthenticationError, ConflictError


@pytest.fixture
def client():
    app = create_app()
    return TestClient(app)


@pytest.fixture
def mock_auth_service():
    return AsyncMock()


def _tokens(email="learner@example.com"):
    return {
        "user": {
            "id": str(uuid4()),
            "email": email,
            "first_name": "Ada",
            "last_name": "Lovelace",
            "role": "learner",
            "is_active": True,
            "memberships": [],
        },
        "access_token": "access-token-value",
        "refresh_token": "refresh-token-value",
        "expires_at": datetime.now(timezone.utc) + timedelta(minutes=15),
    }


def test_login_sets_cookies(client, mock_auth_service):
    mock_auth_service.login.return_value = _tokens()
    client.app.dependency_overrides[get_auth_service] = lambda: mock_auth_service

    response = client.post("/api/auth/login", json={"email": "learner@example.com", "password": "pw"})

    assert response.status_code == 200
    data = response.json()
    assert data["access_token"] == "access-token-value"
    assert data["user"]["email"] == "learner@example.com"
    assert response.cookies.get("access_token") == "access-token-value"
    assert response.cookies.get("refresh_token") == "refresh-token-value"
    mock_auth_service.login.assert_awaited_once_with("learner@example.com", "pw")


def test_login_missing_fields(client, mock_auth_service):
    client.app.dependency_overrides[get_auth_service] = lambda: mock_auth_service

    response = client.post("/api/auth/login", json={"email": "learner@example.com"})

    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["error"] == "validation_error"
    assert detail["fields"] == ["password"]
    mock_auth_service.login.assert_not_called()


def test_login_invalid_credentials(client, mock_auth_service):
    mock_auth_service.login.side_effect = AuthenticationError(
        "Invalid credentials", error_code="invalid_credentials"
    )
    client.app.dependency_overrides[get_auth_service] = lambda: mock_auth_service

    response = client.post("/api/auth/login", json={"email": "x@example.com", "password": "bad"})

    assert response.status_code == 401
    assert response.json()["detail"] == {"error": "invalid_credentials", "message": "Invalid credentials"}


def test_register_rejects_malformed_email(client, mock_auth_service):
    client.app.dependency_overrides[get_auth_service] = lambda: mock_auth_service

    response = client.post(
        "/api/auth/register",
        json={"email": "no-at-sign", "password": "pw", "first_name": "A", "last_name": "B"},
    )

    assert response.status_code == 400
    assert response.json()["detail"]["message"] == "Invalid email address"


def test_register_existing_user(client, mock_auth_service):
    mock_auth_service.register.side_effect = ConflictError("User exists", error_code="user_exists")
    client.app.dependency_overrides[get_auth_service] = lambda: mock_auth_service

    response = client.post(
        "/api/auth/register",
        json={"email": "a@example.com", "password": "pw", "first_name": "A", "last_name": "B"},
    )

    assert response.status_code == 409
    assert response.json()["detail"]["error"] == "user_exists"


def test_refresh_requires_token(client, mock_auth_service):
    client.app.dependency_overrides[get_auth_service] = lambda: mock_auth_service

    response = client.post("/api/auth/refresh", json={})

    assert response.status_code == 400
    assert response.json()["detail"]["message"] == "Refresh token is required"


def test_refresh_reads_cookie(client, mock_auth_service):
    mock_auth_service.refresh.return_value = _tokens()
    client.app.dependency_overrides[get_auth_service] = lambda: mock_auth_service
    client.cookies.set("refresh_token", "from-cookie")

    response = client.post("/api/auth/refresh")

    assert response.status_code == 200
    mock_auth_service.refresh.assert_awaited_once_with("from-cookie")


def test_logout_clears_cookies(client, mock_auth_service):
    mock_auth_service.logout.return_value = True
    client.app.dependency_overrides[get_auth_service] = lambda: mock_auth_service

    response = client.post("/api/auth/logout", json={"refresh_token": "tok"})

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Logged out successfully"}
    assert any("access_token=" in value for value in response.headers.get_list("set-cookie"))
    mock_auth_service.logout.assert_awaited_once_with("tok")


def test_me_requires_authentication(client, mock_auth_service):
    client.app.dependency_overrides[get_auth_service] = lambda: mock_auth_service

    response = client.get("/api/auth/me")

    assert response.status_code == 401
    assert response.json()["detail"]["message"] == "Authentication required"


def test_me_returns_user(client, make_user):
    org_id = uuid4()
    user = make_user(memberships=[(org_id, "member")])
    client.app.dependency_overrides[get_current_user] = lambda: user

    response = client.get("/api/auth/me")

    assert response.status_code == 200
    data = response.json()["user"]
    assert data["id"] == str(user.id)
    assert data["organization_id"] == str(org_id)
    assert data["memberships"][0]["role"] == "member"


def test_session_prefers_active_org_cookie(client, make_user):
    first, second = uuid4(), uuid4()
    user = make_user(memberships=[(first, "member"), (second, "admin")])
    client.app.dependency_overrides[get_current_user] = lambda: user
    client.cookies.set("lms_active_org", str(second))

    response = client.get("/api/auth/session")

    assert response.status_code == 200
    assert response.json()["active_org_id"] == str(second)
    assert len(response.json()["memberships"]) == 2


def test_verify(client, make_user):
    user = make_user()
    client.app.dependency_overrides[get_current_user] = lambda: user

    response = client.get("/api/auth/verify")

    assert response.status_code == 200
    assert response.json()["valid"] is True
    assert response.json()["active_org_id"] is None


def test_invalid_bearer_token(client, mock_auth_service):
    client.app.dependency_overrides[get_auth_service] = lambda: mock_auth_service

    response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
    assert response.json()["detail"]["error"] == "invalid_token"
