# This file makes the 'routes' directory a Python package.

from fastapi import APIRouter

from certadmin.core.config import settings
from .auth_routes import router as auth_router
from .certificate_routes import router as certificate_router
from .course_routes import router as course_router
from .notification_routes import router as notification_router
from .health_routes import router as health_router
from .admin_user_routes import router as admin_user_router
from .admin_routes import router as pages_router

# JSON API, everything under /api
api_router = APIRouter(prefix=settings.API_PREFIX)

api_router.include_router(auth_router)
api_router.include_router(certificate_router)
api_router.include_router(course_router)
api_router.include_router(notification_router)
api_router.include_router(admin_user_router)
api_router.include_router(health_router)

__all__ = [
    "api_router",
    "pages_router", # HTML pages, mounted at the root
]
