"""
Unit tests for password hashing and JWT primitives.
"""

import uuid
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from lms.configs.auth import AuthSettings
from lms.core.exceptions import AuthenticationError, ValidationError
from lms.core.security import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    create_access_token,
    create_refresh_token,
    decode_token,
    extract_bearer_token,
    hash_password,
    verify_password,
)


@pytest.fixture
def auth_settings():
    return AuthSettings(jwt_secret="unit-test-secret-value-that-is-long-enough", bcrypt_rounds=4)


class TestPasswords:
    """Test suite for bcrypt helpers."""

    def test_hash_and_verify(self, auth_settings):
        hashed = hash_password("s3cret-pass", auth_settings)

        assert hashed != "s3cret-pass"
        assert verify_password("s3cret-pass", hashed)
        assert not verify_password("wrong", hashed)

    def test_too_long_password_rejected(self, auth_settings):
        with pytest.raises(ValidationError):
            hash_password("x" * 73, auth_settings)

    def test_verify_against_missing_or_garbage_hash(self):
        assert not verify_password("anything", None)
        assert not verify_password("anything", "not-a-bcrypt-hash")


class TestTokens:
    """Test suite for token creation and decoding."""

    def test_access_token_round_trip(self, auth_settings):
        user_id = uuid.uuid4()
        org_id = uuid.uuid4()

        issued = create_access_token(user_id, "a@example.com", "admin", org_id=org_id, settings=auth_settings)
        claims = decode_token(issued.token, ACCESS_TOKEN_TYPE, auth_settings)

        assert claims["sub"] == str(user_id)
        assert claims["email"] == "a@example.com"
        assert claims["role"] == "admin"
        assert claims["org_id"] == str(org_id)
        assert claims["jti"] == issued.jti

    def test_refresh_token_rejected_as_access(self, auth_settings):
        issued = create_refresh_token(uuid.uuid4(), settings=auth_settings)

        with pytest.raises(AuthenticationError) as exc_info:
            decode_token(issued.token, ACCESS_TOKEN_TYPE, auth_settings)

        assert exc_info.value.error_code == "invalid_token"
        assert decode_token(issued.token, REFRESH_TOKEN_TYPE, auth_settings)["jti"] == issued.jti

    def test_expired_token(self, auth_settings):
        past = datetime.now(timezone.utc) - timedelta(hours=1)
        token = jwt.encode(
            {
                "sub": "x",
                "jti": "y",
                "type": ACCESS_TOKEN_TYPE,
                "exp": past,
                "iss": auth_settings.issuer,
                "aud": auth_settings.audience,
            },
            auth_settings.jwt_secret,
            algorithm=auth_settings.jwt_algorithm,
        )

        with pytest.raises(AuthenticationError) as exc_info:
            decode_token(token, ACCESS_TOKEN_TYPE, auth_settings)

        assert exc_info.value.error_code == "token_expired"

    @pytest.mark.parametrize("sub, jti", [("not-a-uuid", str(uuid.uuid4())), (str(uuid.uuid4()), "42")])
    def test_non_uuid_identifiers_rejected(self, auth_settings, sub, jti):
        token = jwt.encode(
            {
                "sub": sub,
                "jti": jti,
                "type": ACCESS_TOKEN_TYPE,
                "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
                "iss": auth_settings.issuer,
                "aud": auth_settings.audience,
            },
            auth_settings.jwt_secret,
            algorithm=auth_settings.jwt_algorithm,
        )

        with pytest.raises(AuthenticationError) as exc_info:
            decode_token(token, ACCESS_TOKEN_TYPE, auth_settings)

        assert exc_info.value.error_code == "invalid_token"

    def test_wrong_secret(self, auth_settings):
        issued = create_access_token(uuid.uuid4(), "a@example.com", "learner", settings=auth_settings)
        other = AuthSettings(jwt_secret="a-completely-different-secret-value-here")

        with pytest.raises(AuthenticationError):
            decode_token(issued.token, ACCESS_TOKEN_TYPE, other)

    def test_unique_jti(self, auth_settings):
        user_id = uuid.uuid4()

        first = create_refresh_token(user_id, settings=auth_settings)
        second = create_refresh_token(user_id, settings=auth_settings)

        assert first.jti != second.jti


@pytest.mark.parametrize(
    "header, expected",
    [
        ("Bearer abc", "abc"),
        ("bearer abc", "abc"),
        ("Basic abc", None),
        ("Bearer", None),
        (None, None),
    ],
)
def test_extract_bearer_token(header, expected):
    assert extract_bearer_token(header) == expected
