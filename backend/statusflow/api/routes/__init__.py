from fastapi import APIRouter

from statusflow.api.routes import health, projects

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(projects.router, prefix="/projects", tags=["projects"])
