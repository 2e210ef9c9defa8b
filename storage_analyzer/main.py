"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storage_analyzer.config import get_settings
from storage_analyzer.errors import InvalidVolumeIdentifier, VolumeUnavailable
from storage_analyzer.models.response import ErrorResponse
from storage_analyzer.routers import health, volumes
from storage_analyzer.services.analyzer import StorageAnalyzer

# Configure logging
settings = get_settings()
logging.basicConfig(
    level=settings.log_level,
    format=settings.log_format
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting Storage Analyzer API")
    logger.info(f"Max workers: {settings.max_workers or 'default'}")

    # One engine, and so one scan cache, per process
    app.state.analyzer = StorageAnalyzer(settings=settings)

    yield

    # Cleanup
    logger.info("Shutting down Storage Analyzer API")
    if hasattr(app.state, "analyzer"):
        app.state.analyzer.close()


# Create FastAPI application
app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    description=settings.api_description,
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(volumes.router, prefix="/api/volumes", tags=["Volumes"])


@app.exception_handler(InvalidVolumeIdentifier)
async def invalid_volume_handler(request: Request, exc: InvalidVolumeIdentifier):
    """Reject malformed or missing volume identifiers."""
    body = ErrorResponse(error="Invalid volume", detail=exc.reason, volume=exc.volume_id)
    return JSONResponse(status_code=400, content=body.model_dump())


@app.exception_handler(VolumeUnavailable)
async def volume_unavailable_handler(request: Request, exc: VolumeUnavailable):
    """Report volumes that cannot be queried right now."""
    logger.warning(f"Volume unavailable: {exc}")
    body = ErrorResponse(error="Volume unavailable", detail=exc.reason, volume=exc.volume_id)
    return JSONResponse(status_code=503, content=body.model_dump())


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": str(exc) if settings.debug else "An unexpected error occurred"
        }
    )


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": settings.api_title,
        "version": settings.api_version,
        "description": settings.api_description,
        "docs": "/docs",
        "health": "/health"
    }
