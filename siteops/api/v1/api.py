from fastapi import APIRouter
from siteops.api.v1.endpoints import (
    auth, health, projects, manpower, materials, progress, finance, location
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])

# Resource endpoints
api_router.include_router(projects.router, prefix="/projects", tags=["projects"])
api_router.include_router(manpower.router, prefix="/manpower", tags=["manpower"])
api_router.include_router(materials.router, prefix="/materials", tags=["materials"])
api_router.include_router(progress.router, prefix="/progress", tags=["progress"])
api_router.include_router(finance.router, prefix="/finance", tags=["finance"])
api_router.include_router(location.router, prefix="/location", tags=["location"])
