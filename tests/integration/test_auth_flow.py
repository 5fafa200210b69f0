"""
End-to-end tests for the auth/session layer.

Registration, password login, cookie sessions, refresh-token rotation
with reuse detection, and logout.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import jwt

from lms.boundary.db.CRUD.user_crud import user_crud
from lms.configs import get_settings

REGISTRATION = {
    "email": "Ada@Example.com",
    "password": "analytical-engine",
    "first_name": "Ada",
    "last_name": "Lovelace",
}


async def test_register_then_me_with_cookie(api_client):
    response = await api_client.post("/api/auth/register", json=REGISTRATION)

    assert response.status_code == 201
    user = response.json()["user"]
    assert user["email"] == "ada@example.com"
    assert user["role"] == "learner"
    assert api_client.cookies.get("access_token")

    me = await api_client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json()["user"]["id"] == user["id"]


async def test_register_duplicate_email(api_client):
    await api_client.post("/api/auth/register", json=REGISTRATION)

    response = await api_client.post("/api/auth/register", json={**REGISTRATION, "email": "ada@example.com"})

    assert response.status_code == 409
    assert response.json()["detail"]["error"] == "user_exists"


async def test_register_race_on_email_constraint(api_client, seed):
    await seed.user("ada@example.com")

    # the existence check misses a row committed by a concurrent request
    with patch.object(user_crud, "get_by_email", AsyncMock(return_value=None)):
        response = await api_client.post("/api/auth/register", json=REGISTRATION)

    assert response.status_code == 409
    assert response.json()["detail"]["error"] == "user_exists"


async def test_login_wrong_password(api_client, seed):
    await seed.user("grace@example.com")

    response = await api_client.post("/api/auth/login", json={"email": "grace@example.com", "password": "nope"})

    assert response.status_code == 401
    assert response.json()["detail"]["error"] == "invalid_credentials"


async def test_login_disabled_account(api_client, seed):
    await seed.user("off@example.com", is_active=False)

    response = await api_client.post("/api/auth/login", json={"email": "off@example.com", "password": seed.password})

    assert response.status_code == 403
    assert response.json()["detail"]["error"] == "account_disabled"


async def test_disabled_account_token_rejected(api_client, seed, bearer):
    user = await seed.user("later-off@example.com", is_active=False)

    response = await api_client.get("/api/auth/me", headers=bearer(user))

    assert response.status_code == 403
    assert response.json()["detail"]["message"] == "Account disabled"


async def test_login_is_case_insensitive_and_reports_memberships(api_client, seed):
    user = await seed.user("member@example.com")
    org = await seed.organization("Globex")
    await seed.membership(org.id, user.id, role="editor")

    response = await api_client.post("/api/auth/login", json={"email": "MEMBER@example.com", "password": seed.password})

    assert response.status_code == 200
    body = response.json()
    assert body["user"]["organization_id"] == str(org.id)
    assert body["user"]["last_login_at"] is not None

    session = await api_client.get("/api/auth/session")
    assert session.json()["active_org_id"] == str(org.id)
    assert session.json()["memberships"][0]["role"] == "editor"


async def test_refresh_rotation_and_reuse_detection(api_client, seed):
    await seed.user("rotate@example.com")
    login = await api_client.post("/api/auth/login", json={"email": "rotate@example.com", "password": seed.password})
    first = login.json()["refresh_token"]

    rotated = await api_client.post("/api/auth/refresh", json={"refresh_token": first})
    assert rotated.status_code == 200
    second = rotated.json()["refresh_token"]
    assert second != first

    reused = await api_client.post("/api/auth/refresh", json={"refresh_token": first})
    assert reused.status_code == 401
    assert reused.json()["detail"]["error"] == "token_reused"

    # reuse revoked every outstanding token, including the rotated one
    after = await api_client.post("/api/auth/refresh", json={"refresh_token": second})
    assert after.status_code == 401


async def test_refresh_from_cookie(api_client, seed):
    await seed.user("cookie@example.com")
    await api_client.post("/api/auth/login", json={"email": "cookie@example.com", "password": seed.password})

    response = await api_client.post("/api/auth/refresh")

    assert response.status_code == 200
    assert response.json()["user"]["email"] == "cookie@example.com"


async def test_refresh_rejects_access_token(api_client, seed):
    await seed.user("wrongtype@example.com")
    login = await api_client.post("/api/auth/login", json={"email": "wrongtype@example.com", "password": seed.password})

    response = await api_client.post("/api/auth/refresh", json={"refresh_token": login.json()["access_token"]})

    assert response.status_code == 401
    assert response.json()["detail"]["error"] == "invalid_token"


async def test_logout_revokes_refresh_token(api_client, seed):
    await seed.user("bye@example.com")
    login = await api_client.post("/api/auth/login", json={"email": "bye@example.com", "password": seed.password})
    token = login.json()["refresh_token"]

    response = await api_client.post("/api/auth/logout", json={"refresh_token": token})
    assert response.status_code == 200
    assert api_client.cookies.get("access_token") is None

    refreshed = await api_client.post("/api/auth/refresh", json={"refresh_token": token})
    assert refreshed.status_code == 401

    me = await api_client.get("/api/auth/me")
    assert me.status_code == 401


async def test_logout_without_token_succeeds(api_client):
    response = await api_client.post("/api/auth/logout")

    assert response.status_code == 200


async def test_signed_token_with_non_uuid_subject_is_rejected(api_client):
    auth = get_settings().auth
    token = jwt.encode(
        {
            "sub": "not-a-user-id",
            "jti": "also-not-a-uuid",
            "type": "access",
            "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
            "iss": auth.issuer,
            "aud": auth.audience,
        },
        auth.jwt_secret,
        algorithm=auth.jwt_algorithm,
    )

    response = await api_client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["detail"]["error"] == "invalid_token"
