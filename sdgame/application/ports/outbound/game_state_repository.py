"""
Game State Repository Port

Interface for endless-mode player state.
"""

from abc import ABC, abstractmethod
from typing import Optional

from sdgame.domain.models import GameState


class IGameStateRepository(ABC):

    @abstractmethod
    def save(self, state: GameState) -> None:
        pass

    @abstractmethod
    def get_by_player_id(self, player_id: str) -> Optional[GameState]:
        """Return the player's state, or None for a new player."""
        pass
