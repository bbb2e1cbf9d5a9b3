# Import all routes
from .auth import router as auth_router
from .applications import router as applications_router
from .user_applications import router as user_applications_router
from .payments import router as payments_router
from .admin import router as admin_router
from .health import router as health_router

# Routers mounted under API_PREFIX
api_routers = [
    auth_router,
    applications_router,
    user_applications_router,
    payments_router,
    admin_router,
]

__all__ = [
    "auth_router",
    "applications_router",
    "user_applications_router",
    "payments_router",
    "admin_router",
    "health_router",
    "api_routers",
]
