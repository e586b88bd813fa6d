"""
Endless-mode endpoints.
"""

from fastapi import APIRouter, Depends
from typing import Dict, Any
import logging

from api.dependencies import get_game_service, to_http_error
from api.models import AdvanceRequest
from sdgame.application.ports.inbound import IGameUseCase
from sdgame.domain.errors import SDGameError

router = APIRouter(prefix="/api/v1/game", tags=["game"])
logger = logging.getLogger(__name__)


@router.get("/{player_id}", response_model=Dict[str, Any])
async def get_game_state(
    player_id: str,
    service: IGameUseCase = Depends(get_game_service),
):
    return service.get_state(player_id).to_dict()


@router.post("/{player_id}/advance", response_model=Dict[str, Any])
async def advance(
    player_id: str,
    request: AdvanceRequest,
    service: IGameUseCase = Depends(get_game_service),
):
    """Run one tick of the player's design and settle revenue and cost."""
    try:
        state = service.advance(player_id, request.design_id, request.elapsed, request.duration)
    except SDGameError as e:
        raise to_http_error(e)
    return state.to_dict()
