"""Health check endpoints."""

from fastapi import APIRouter, Depends

from chainops.api.deps import get_services
from chainops.config import get_settings
from chainops.services.registry import Services

router = APIRouter()


@router.get("/health")
async def health_check():
    """Basic health check endpoint."""
    return {"status": "healthy", "service": "chainops"}


@router.get("/health/detailed")
async def detailed_health(services: Services = Depends(get_services)):
    """Detailed health check with redacted configuration."""
    settings = get_settings()
    return {
        "status": "healthy",
        "service": "chainops",
        "version": "0.1.0",
        "config": settings.get_safe_dict(),
        "connections": services.connections.cached_networks(),
    }
