"""
Health check and API information endpoints.
"""

from fastapi import APIRouter
from typing import Dict, Any
from datetime import datetime, timezone

from api.models import HealthResponse
from sdgame import __version__

router = APIRouter(tags=["health"])


@router.get("/", response_model=Dict[str, Any])
async def root():
    """Root endpoint - API information"""
    return {
        "name": "System Design Game API",
        "version": __version__,
        "status": "running",
        "endpoints": {
            "health": "/health",
            "designs": "/api/v1/designs",
            "evaluate": "/api/v1/designs/{design_id}/evaluate",
            "run": "/api/v1/designs/{design_id}/run",
            "restart": "/api/v1/designs/{design_id}/components/{component_id}/restart",
            "scenarios": "/api/v1/scenarios",
            "blueprints": "/api/v1/components/blueprints",
            "game": "/api/v1/game/{player_id}",
            "advance": "/api/v1/game/{player_id}/advance",
        },
    }


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=__version__,
        message="API is running.",
    )
