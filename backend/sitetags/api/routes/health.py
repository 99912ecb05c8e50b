"""
Health check endpoints
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request

from sitetags import __version__
from sitetags.api.routes.catalog import get_catalog
from sitetags.registry.service import CatalogService

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(request: Request, catalog: CatalogService = Depends(get_catalog)):
    """
    Basic health check endpoint

    Returns:
        dict: Health status and catalog size
    """
    settings = request.app.state.settings
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": settings.app_name,
        "version": __version__,
        "sites": len(catalog.sites),
        "payment_sink": catalog.sink.name,
        "cost_signal": catalog.cost_signal.name,
    }
