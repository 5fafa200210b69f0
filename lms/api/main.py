"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers and middleware and
configures uvicorn server.

Dependencies: fastapi, lms.api.routers, lms.observability, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lms import __version__
from lms.boundary.db import get_async_engine
from lms.configs import get_settings
from lms.observability import configure_logging
from lms.observability.middleware import (
    CorrelationMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)

from .routers import (
    analytics_router,
    auth_router,
    client_router,
    courses_router,
    health_router,
    lessons_router,
    modules_router,
    organizations_router,
    progress_router,
    surveys_router,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events.
    """
    configure_logging()
    logger = logging.getLogger("uvicorn")

    settings = get_settings()
    logger.info("%s starting (environment=%s)", settings.app_name, settings.environment)

    yield

    # Shutdown
    await get_async_engine().dispose()
    logger.info("Database engine disposed")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        description="Learning management backend: courses, organizations, surveys, progress and analytics",
        version=__version__,
        lifespan=lifespan,
    )

    # Added innermost first; CORS ends up outermost
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Correlation-ID"],
    )

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(courses_router)
    app.include_router(modules_router)
    app.include_router(lessons_router)
    app.include_router(organizations_router)
    app.include_router(surveys_router)
    app.include_router(client_router)
    app.include_router(progress_router)
    app.include_router(analytics_router)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "lms.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
