"""
Component blueprint endpoints.
"""

from fastapi import APIRouter
from typing import Dict, Any

from sdgame.adapters.outbound.persistence import list_available_components

router = APIRouter(prefix="/api/v1/components", tags=["components"])


@router.get("/blueprints", response_model=Dict[str, Any])
async def get_blueprints():
    """List the components a player can place."""
    blueprints = list_available_components()
    return {
        "success": True,
        "count": len(blueprints),
        "components": [c.to_dict() for c in blueprints],
    }
