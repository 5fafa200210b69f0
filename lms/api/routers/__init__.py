"""API routers."""

from .analytics import router as analytics_router
from .auth import router as auth_router
from .client import router as client_router
from .courses import router as courses_router  # admin courses package
from .health import router as health_router
from .lessons import router as lessons_router
from .modules import router as modules_router
from .organizations import router as organizations_router
from .progress import router as progress_router
from .surveys import router as surveys_router

__all__ = [
    "analytics_router",
    "auth_router",
    "client_router",
    "courses_router",
    "health_router",
    "lessons_router",
    "modules_router",
    "organizations_router",
    "progress_router",
    "surveys_router",
]
