"""
Segment Compass API package initialization.

This package contains FastAPI router modules for the Segment Compass service:
- proximity: Proximity analysis, evaluation, CSV export and availability
"""

from fastapi import APIRouter

from segment_compass.api.proximity import router as proximity_router

# Create main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(proximity_router)  # proximity router has its own prefix

__all__ = [
    "api_router",
    "proximity_router",
]
