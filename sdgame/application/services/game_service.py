"""
Game Service

Endless mode: each advance evaluates the player's design for one tick, then
updates the player's balance, users and health and charges the running cost.
"""

from __future__ import annotations
import logging

from sdgame.application.ports.inbound import IEvaluationUseCase, IGameUseCase
from sdgame.application.ports.outbound import IGameStateRepository
from sdgame.domain.errors import InvalidInputError
from sdgame.domain.models import GameState


class GameService(IGameUseCase):

    def __init__(self, evaluation: IEvaluationUseCase, repository: IGameStateRepository):
        self.evaluation = evaluation
        self.repository = repository
        self.logger = logging.getLogger(__name__)

    def get_state(self, player_id: str) -> GameState:
        state = self.repository.get_by_player_id(player_id)
        if state is None:
            state = GameState(player_id=player_id)
        return state

    def advance(
        self,
        player_id: str,
        design_id: str,
        elapsed_seconds: float,
        duration_seconds: float = 1,
    ) -> GameState:
        if duration_seconds <= 0:
            raise InvalidInputError(
                f"duration_seconds must be > 0, got {duration_seconds}",
                details={"duration_seconds": duration_seconds},
            )

        result = self.evaluation.evaluate(design_id, elapsed_seconds)
        state = self.get_state(player_id)
        state.update_metrics(result.avg_latency_ms, result.error_rate, result.total_qps)
        state.deduct_cost(result.operational_cost, duration_seconds)
        state.last_tick = elapsed_seconds
        self.repository.save(state)

        if state.is_bankrupt:
            self.logger.warning("Player %s is bankrupt (balance %.2f)", player_id, state.balance)
        return state
