"""
FastAPI application entry point for the Segment Compass API.

This module configures logging and CORS, registers the API routers, and starts
the ASGI server when run directly.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from segment_compass import __version__
from segment_compass.api.proximity import router as proximity_router
from segment_compass.core.config import get_settings

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Lifespan context manager for FastAPI application startup and shutdown events.

    The service is stateless, so startup and shutdown only log.
    """
    # Startup
    logger.info(f"Segment Compass API {__version__} starting")

    yield

    # Shutdown
    logger.info("Segment Compass API shutting down")


# Create FastAPI application
app = FastAPI(
    title="Segment Compass API",
    version=__version__,
    description=(
        "Proximity analytics for customers on a satisfaction/loyalty grid: "
        "lateral, diagonal and special-zone proximity, crossroads customers, "
        "and report-ready risks and opportunities."
    ),
    lifespan=lifespan,
)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register API routers
app.include_router(proximity_router)  # Has its own /proximity prefix


@app.get("/health")
async def health_check():
    """
    Health check endpoint for monitoring and load balancer probes.

    Returns:
        Dict with status 'healthy'
    """
    return {"status": "healthy"}


@app.get("/")
async def root():
    """
    Root endpoint providing API information.

    Returns:
        Dict with API name and version
    """
    return {
        "name": "Segment Compass API",
        "version": __version__,
        "docs": "/docs",
        "openapi": "/openapi.json",
    }


# Run with uvicorn when executed directly
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "segment_compass.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
