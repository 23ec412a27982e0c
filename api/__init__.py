"""
API Module
FastAPI routers for the DoseTrack application
"""

from api.users import router as users_router
from api.categories import router as categories_router
from api.medications import router as medications_router
from api.dose_logs import router as dose_logs_router
from api.credentials import router as credentials_router

from api.deps import (
    get_db,
    get_now,
    get_current_user_id,
    services,
)


__all__ = [
    # Routers
    "users_router",
    "categories_router",
    "medications_router",
    "dose_logs_router",
    "credentials_router",
    # Dependencies
    "get_db",
    "get_now",
    "get_current_user_id",
    "services",
]


def include_routers(app, prefix: str = "/api/v1"):
    """
    Include all API routers in the FastAPI app

    Usage:
        from api import include_routers
        include_routers(app)
    """
    app.include_router(users_router, prefix=prefix)
    app.include_router(categories_router, prefix=prefix)
    app.include_router(medications_router, prefix=prefix)
    app.include_router(dose_logs_router, prefix=prefix)
    app.include_router(credentials_router, prefix=prefix)
