"""
Scenario catalog endpoints.
"""

from fastapi import APIRouter, Depends
from typing import Dict, Any

from api.dependencies import get_scenario_service, to_http_error
from sdgame.application.ports.inbound import IScenarioUseCase
from sdgame.domain.errors import SDGameError

router = APIRouter(prefix="/api/v1/scenarios", tags=["scenarios"])


@router.get("", response_model=Dict[str, Any])
async def list_scenarios(service: IScenarioUseCase = Depends(get_scenario_service)):
    scenarios = service.list_scenarios()
    return {
        "success": True,
        "count": len(scenarios),
        "scenarios": [s.to_dict() for s in scenarios],
    }


@router.get("/{scenario_id}", response_model=Dict[str, Any])
async def get_scenario(
    scenario_id: str,
    service: IScenarioUseCase = Depends(get_scenario_service),
):
    try:
        return service.get_scenario(scenario_id).to_dict()
    except SDGameError as e:
        raise to_http_error(e)
