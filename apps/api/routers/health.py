"""Health check router — liveness."""

from fastapi import APIRouter

from apps.api.core.config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_liveness():
    """Liveness probe — returns 200 if the API process is running.

    The engine has no backing services, so there is no separate readiness check.
    """
    return {"status": "healthy", "service": "api", "version": settings.APP_VERSION}
