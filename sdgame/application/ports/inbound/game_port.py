"""
Game Use Case Port

Interface for endless mode.
"""

from abc import ABC, abstractmethod

from sdgame.domain.models import GameState


class IGameUseCase(ABC):

    @abstractmethod
    def advance(
        self,
        player_id: str,
        design_id: str,
        elapsed_seconds: float,
        duration_seconds: float = 1,
    ) -> GameState:
        """Evaluate one tick, update the player's state and charge its running cost."""
        pass

    @abstractmethod
    def get_state(self, player_id: str) -> GameState:
        pass
