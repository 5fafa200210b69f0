"""
Shared test fixtures and configuration for entire test suite.

Provides: in-memory database sessions, an app wired to that database,
an ASGI HTTP client, user factories and token helpers
Dependencies: pytest, sqlalchemy, aiosqlite, httpx, fastapi
System role: Test infrastructure and fixture management
"""

import os

# Cheap hashes and a fixed secret for the whole suite; read when settings load
os.environ.setdefault("AUTH_BCRYPT_ROUNDS", "4")
os.environ.setdefault("AUTH_JWT_SECRET", "test-secret-key-with-enough-length-for-hs256")
os.environ.setdefault("ENVIRONMENT", "test")

import uuid
from typing import AsyncGenerator

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from lms.boundary.db import Base, get_async_db
from lms.boundary.db.models import MembershipModel, OrganizationModel, UserModel
from lms.core.security import create_access_token, hash_password

DEFAULT_PASSWORD = "correct-horse-battery"


def _memory_engine():
    return create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture
async def test_async_db():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        AsyncSession: Test database session with cleanup
    """
    engine = _memory_engine()

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()

    await engine.dispose()


@pytest.fixture
async def session_factory():
    """
    Session factory over a shared in-memory database.

    Each request of the end-to-end app gets its own session, like in
    production; tests use the factory to seed rows.
    """
    engine = _memory_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

    await engine.dispose()


@pytest.fixture
def app(session_factory):
    """FastAPI app whose get_async_db yields sessions of the test database."""
    from lms.api.main import create_app

    application = create_app()

    async def override_get_async_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_async_db] = override_get_async_db
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def api_client(app):
    """HTTP client driving the app in-process."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


class Seeder:
    """Inserts rows directly into the test database."""

    password = DEFAULT_PASSWORD

    def __init__(self, session_factory) -> None:
        self.session_factory = session_factory

    async def user(
        self,
        email: str,
        role: str = "learner",
        password: str = DEFAULT_PASSWORD,
        is_active: bool = True,
    ) -> UserModel:
        async with self.session_factory() as session:
            user = UserModel(
                email=email.lower(),
                password_hash=hash_password(password),
                first_name="Test",
                last_name="User",
                role=role,
                is_active=is_active,
                memberships=[],
            )
            session.add(user)
            await session.commit()
            return user

    async def organization(self, name: str = "Acme") -> OrganizationModel:
        async with self.session_factory() as session:
            org = OrganizationModel(
                name=name,
                contact_email=f"{name.lower()}@example.com",
                subscription="standard",
                status="active",
                settings={},
            )
            session.add(org)
            await session.commit()
            return org

    async def membership(self, org_id: uuid.UUID, user_id: uuid.UUID, role: str = "member") -> None:
        async with self.session_factory() as session:
            session.add(
                MembershipModel(organization_id=org_id, user_id=user_id, role=role, status="active")
            )
            await session.commit()


@pytest.fixture
def seed(session_factory) -> Seeder:
    return Seeder(session_factory)


@pytest.fixture
def bearer():
    """Build an Authorization header with a freshly signed access token."""

    def _bearer(user: UserModel) -> dict[str, str]:
        token = create_access_token(user.id, user.email, user.role).token
        return {"Authorization": f"Bearer {token}"}

    return _bearer


@pytest.fixture
def make_user():
    """Build a transient user (not persisted) for dependency overrides."""

    def _make_user(
        role: str = "learner",
        memberships: list[tuple[uuid.UUID, str]] | None = None,
    ) -> UserModel:
        user_id = uuid.uuid4()
        return UserModel(
            id=user_id,
            email=f"{user_id.hex[:8]}@example.com",
            password_hash="x",
            first_name="Test",
            last_name="User",
            role=role,
            is_active=True,
            memberships=[
                MembershipModel(
                    id=uuid.uuid4(),
                    organization_id=org_id,
                    user_id=user_id,
                    role=org_role,
                    status="active",
                )
                for org_id, org_role in memberships or []
            ],
        )

    return _make_user
