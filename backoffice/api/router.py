"""
Main API router
"""
from fastapi import APIRouter

from backoffice.api.v1 import (
    health,
    version,
    auth,
    me,
    features,
    projects,
)
from backoffice.api.v1.admin import admin_router

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(version.router, tags=["version"])
api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(me.router, prefix="/me", tags=["me"])
api_router.include_router(features.router, prefix="/features", tags=["features"])
api_router.include_router(projects.router, prefix="/projects", tags=["projects"])
api_router.include_router(admin_router)
