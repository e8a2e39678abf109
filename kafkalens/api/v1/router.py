"""API v1 router assembly."""

from fastapi import APIRouter

from kafkalens.api.v1.endpoints import auth, clusters, health

api_router = APIRouter()

# Health checks are mounted at the application root, see main.py
api_router.include_router(auth.router, tags=["auth"])
api_router.include_router(clusters.router, prefix="/clusters", tags=["clusters"])

health_router = health.router
