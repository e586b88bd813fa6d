"""
Design storage and evaluation endpoints.
"""

from fastapi import APIRouter, Depends, Query
from typing import Dict, Any, Optional
import logging

from api.dependencies import get_design_service, get_evaluation_service, to_http_error
from api.models import DesignRequest
from sdgame.application.ports.inbound import IDesignUseCase, IEvaluationUseCase
from sdgame.domain.errors import SDGameError
from sdgame.domain.models import Design

router = APIRouter(prefix="/api/v1/designs", tags=["designs"])
logger = logging.getLogger(__name__)


@router.post("", response_model=Dict[str, Any])
async def save_design(
    request: DesignRequest,
    service: IDesignUseCase = Depends(get_design_service),
):
    """Validate and store a design."""
    try:
        design = service.save_design(Design.from_dict(request.model_dump()))
    except SDGameError as e:
        raise to_http_error(e)
    return {"success": True, "id": design.id}


@router.get("", response_model=Dict[str, Any])
async def list_designs(
    player_id: Optional[str] = Query(None, description="Only designs owned by this player"),
    service: IDesignUseCase = Depends(get_design_service),
):
    designs = service.list_designs(player_id or "")
    return {
        "success": True,
        "count": len(designs),
        "designs": [d.to_dict() for d in designs],
    }


@router.get("/{design_id}", response_model=Dict[str, Any])
async def get_design(
    design_id: str,
    service: IDesignUseCase = Depends(get_design_service),
):
    try:
        return service.get_design(design_id).to_dict()
    except SDGameError as e:
        raise to_http_error(e)


@router.post("/{design_id}/evaluate", response_model=Dict[str, Any])
async def evaluate_design(
    design_id: str,
    elapsed: float = Query(0, ge=0, description="Seconds into the scenario"),
    service: IEvaluationUseCase = Depends(get_evaluation_service),
):
    """
    Evaluate a stored design at one instant.

    Tick state is read from the design's component properties.
    """
    logger.info("Evaluating design %s at t=%s", design_id, elapsed)
    try:
        result = service.evaluate(design_id, elapsed)
    except SDGameError as e:
        raise to_http_error(e)
    return result.to_dict()


@router.post("/{design_id}/run", response_model=Dict[str, Any])
async def run_design(
    design_id: str,
    start: float = Query(0, ge=0),
    end: float = Query(30, ge=0),
    step: float = Query(1, gt=0),
    service: IEvaluationUseCase = Depends(get_evaluation_service),
):
    """Evaluate consecutive ticks, carrying state from each tick to the next."""
    try:
        results = service.run_ticks(design_id, start, end, step)
    except SDGameError as e:
        raise to_http_error(e)
    return {
        "success": True,
        "count": len(results),
        "results": [r.to_dict() for r in results],
    }


@router.post("/{design_id}/components/{component_id}/restart", response_model=Dict[str, Any])
async def restart_component(
    design_id: str,
    component_id: str,
    at: float = Query(0, ge=0, description="Restart time in scenario seconds"),
    service: IEvaluationUseCase = Depends(get_evaluation_service),
):
    try:
        state = service.restart_component(design_id, component_id, at)
    except SDGameError as e:
        raise to_http_error(e)
    return {"success": True, "state": state.to_dict()}
