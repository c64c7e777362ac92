"""API route definitions.

Uses a factory pattern to avoid import-time settings loading.
This allows tests to import modules without requiring all environment
variables to be configured upfront.
"""

from fastapi import APIRouter

from wishwall.api.routes.auth import router as auth_router
from wishwall.api.routes.health import router as health_router
from wishwall.api.routes.messages import router as messages_router
from wishwall.api.routes.pages import router as pages_router


def create_api_router() -> APIRouter:
    """Create and configure the API router.

    Returns:
        Configured APIRouter with all routes registered.
    """
    api_router = APIRouter()
    api_router.include_router(health_router, tags=["health"])
    api_router.include_router(auth_router, tags=["auth"])
    api_router.include_router(messages_router, tags=["moderation"])
    api_router.include_router(pages_router, tags=["pages"], include_in_schema=False)
    return api_router


__all__ = ["create_api_router"]
