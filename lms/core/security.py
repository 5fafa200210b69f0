"""
Password hashing and JWT token primitives.

Access tokens are short lived and carry the caller's identity and role.
Refresh tokens carry only the subject and a unique ``jti`` so they can be
persisted, rotated and revoked server side.

Dependencies: bcrypt, PyJWT, lms.configs
System role: Cryptographic building blocks for the auth/session layer
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt

from lms.configs import get_settings
from lms.configs.auth import AuthSettings
from lms.core.exceptions import AuthenticationError, ValidationError

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

# bcrypt only considers the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


@dataclass(frozen=True)
class IssuedToken:
    """A signed token together with its identifier and expiry."""

    token: str
    jti: str
    expires_at: datetime


def _auth_settings(settings: AuthSettings | None) -> AuthSettings:
    return settings or get_settings().auth


def hash_password(password: str, settings: AuthSettings | None = None) -> str:
    """
    Hash a plaintext password with bcrypt.

    Args:
        password: Plaintext password
        settings: Auth settings (cost factor); defaults to application settings

    Returns:
        str: bcrypt hash (utf-8)

    Raises:
        ValidationError: If the password exceeds bcrypt's 72 byte limit
    """
    raw = password.encode("utf-8")
    if len(raw) > BCRYPT_MAX_BYTES:
        raise ValidationError("Password is too long", field="password")
    rounds = _auth_settings(settings).bcrypt_rounds
    return bcrypt.hashpw(raw, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str | None) -> bool:
    """Check a plaintext password against a stored bcrypt hash."""
    if not password_hash:
        return False
    raw = password.encode("utf-8")
    if len(raw) > BCRYPT_MAX_BYTES:
        return False
    try:
        return bcrypt.checkpw(raw, password_hash.encode("utf-8"))
    except ValueError:
        # stored hash is not a bcrypt hash
        return False


def _encode(claims: dict[str, Any], lifetime: timedelta, settings: AuthSettings) -> IssuedToken:
    now = datetime.now(timezone.utc)
    expires_at = now + lifetime
    jti = str(uuid.uuid4())
    payload = {
        **claims,
        "jti": jti,
        "iat": now,
        "exp": expires_at,
        "iss": settings.issuer,
        "aud": settings.audience,
    }
    token = jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    return IssuedToken(token=token, jti=jti, expires_at=expires_at)


def create_access_token(
    user_id: uuid.UUID | str,
    email: str,
    role: str,
    org_id: uuid.UUID | str | None = None,
    settings: AuthSettings | None = None,
) -> IssuedToken:
    """
    Sign an access token for a user.

    Args:
        user_id: Subject user id
        email: User email
        role: Platform role (admin or learner)
        org_id: Active organization id, if any
        settings: Auth settings; defaults to application settings

    Returns:
        IssuedToken: Signed token with jti and expiry
    """
    settings = _auth_settings(settings)
    claims = {
        "sub": str(user_id),
        "email": email,
        "role": role,
        "org_id": str(org_id) if org_id else None,
        "type": ACCESS_TOKEN_TYPE,
    }
    return _encode(claims, timedelta(minutes=settings.access_token_minutes), settings)


def create_refresh_token(
    user_id: uuid.UUID | str,
    settings: AuthSettings | None = None,
) -> IssuedToken:
    """Sign a refresh token carrying only the subject."""
    settings = _auth_settings(settings)
    claims = {"sub": str(user_id), "type": REFRESH_TOKEN_TYPE}
    return _encode(claims, timedelta(days=settings.refresh_token_days), settings)


def decode_token(
    token: str,
    expected_type: str,
    settings: AuthSettings | None = None,
) -> dict[str, Any]:
    """
    Verify a token's signature, expiry, issuer, audience and type.

    Args:
        token: Encoded JWT
        expected_type: ``access`` or ``refresh``
        settings: Auth settings; defaults to application settings

    Returns:
        dict: Decoded claims

    Raises:
        AuthenticationError: If the token fails any check
    """
    settings = _auth_settings(settings)
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.audience,
            issuer=settings.issuer,
            options={"require": ["exp", "sub", "jti"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise AuthenticationError("Token expired", error_code="token_expired") from e
    except jwt.InvalidTokenError as e:
        raise AuthenticationError("Invalid token", error_code="invalid_token") from e

    if claims.get("type") != expected_type:
        raise AuthenticationError("Invalid token type", error_code="invalid_token")
    try:
        uuid.UUID(str(claims["sub"]))
        uuid.UUID(str(claims["jti"]))
    except ValueError as e:
        raise AuthenticationError("Invalid token subject", error_code="invalid_token") from e
    return claims


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]
