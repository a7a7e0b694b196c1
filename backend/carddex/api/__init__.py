"""
API module for FastAPI routes.
"""
from fastapi import APIRouter

from carddex.api.routes import health, progression

api_router = APIRouter()

# Include all route modules
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(progression.router, tags=["Progression"])
