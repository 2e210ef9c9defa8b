"""Health check router."""

import logging
from fastapi import APIRouter, Request

from storage_analyzer.config import get_settings

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """
    Health check endpoint.

    Returns:
        Health status information
    """
    settings = get_settings()
    analyzer = getattr(request.app.state, "analyzer", None)

    return {
        "status": "healthy" if analyzer is not None else "starting",
        "service": settings.api_title,
        "version": settings.api_version,
        "cached_volumes": len(analyzer.cache) if analyzer is not None else 0,
    }
