"""
Version and metadata endpoint
"""
from fastapi import APIRouter

from backoffice.constants import SERVICE_NAME
from backoffice.core.config import settings

router = APIRouter()


@router.get("/version")
async def get_version():
    """
    Get application version and metadata

    Returns:
        Service name, version, environment and the active visibility precedence
    """
    return {
        "service": SERVICE_NAME,
        "version": settings.VERSION or "1.0.0",
        "env": settings.APP_ENV,
        "visibility_precedence": settings.VISIBILITY_PRECEDENCE,
    }
