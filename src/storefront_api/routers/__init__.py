"""API routers."""

from storefront_api.routers.admin_auth import router as admin_auth_router
from storefront_api.routers.auth import router as auth_router

__all__ = [
    "admin_auth_router",
    "auth_router",
]
