"""
Create database tables and optionally seed a platform admin.

Tables are created from the ORM metadata. When ADMIN_EMAIL and
ADMIN_PASSWORD are set (environment or .env) an active admin account is
created unless the email is already registered.

Usage:
    python -m lms.scripts.create_tables

Dependencies: sqlalchemy, python-dotenv, lms.boundary.db
System role: Schema bootstrap for new environments
"""

import asyncio
import logging
import os
import sys

from dotenv import load_dotenv
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from lms.boundary.db import Base, get_async_engine, get_async_session_factory
from lms.boundary.db.CRUD.user_crud import user_crud
from lms.boundary.db.models.user_model import ROLE_ADMIN
from lms.core.security import hash_password
from lms.observability import configure_logging

logger = logging.getLogger(__name__)


async def create_tables() -> None:
    """Verify connectivity, then create every table that does not exist yet."""
    engine = get_async_engine()
    async with engine.begin() as conn:
        await conn.execute(text("SELECT 1"))
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Tables created", extra={"tables": sorted(Base.metadata.tables)})


async def seed_admin(email: str, password: str) -> bool:
    """
    Create an active platform admin.

    Returns:
        bool: False if the email is already registered
    """
    SessionFactory = get_async_session_factory()
    async with SessionFactory() as session:
        if await user_crud.get_by_email(session, email) is not None:
            logger.info("Admin already exists", extra={"email": email.lower()})
            return False
        await user_crud.create(
            session,
            email=email.strip().lower(),
            password_hash=hash_password(password),
            first_name="Platform",
            last_name="Admin",
            role=ROLE_ADMIN,
            is_active=True,
            memberships=[],
        )
        await session.commit()
    logger.info("Admin created", extra={"email": email.lower()})
    return True


async def main() -> int:
    load_dotenv()
    configure_logging()
    try:
        await create_tables()
        email, password = os.getenv("ADMIN_EMAIL"), os.getenv("ADMIN_PASSWORD")
        if email and password:
            await seed_admin(email, password)
    except SQLAlchemyError as e:
        logger.error("Database bootstrap failed", extra={"error": str(e)})
        return 1
    finally:
        await get_async_engine().dispose()
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
