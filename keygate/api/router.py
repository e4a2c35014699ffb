"""
API Router Factory
Provides centralized router creation and configuration
"""
from fastapi import APIRouter

from . import admin, invite


def create_router(prefix: str = "/api", include_admin: bool = True) -> APIRouter:
    """
    Create configured API router with all endpoints
    """
    router = APIRouter(prefix=prefix)

    router.include_router(invite.router, tags=["registration"])

    if include_admin:
        router.include_router(admin.router, prefix="/admin", tags=["admin"])

    return router
