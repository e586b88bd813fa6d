"""
Design Repository Port

Interface for design persistence.
"""

from abc import ABC, abstractmethod
from typing import List

from sdgame.domain.models import Design


class IDesignRepository(ABC):
    """
    Outbound port for design storage.

    Implementations must allow concurrent reads; writes are exclusive.
    """

    @abstractmethod
    def save(self, design: Design) -> None:
        """Insert or replace a design by id."""
        pass

    @abstractmethod
    def get_by_id(self, design_id: str) -> Design:
        """
        Retrieve a design.

        Raises:
            NotFoundError: if no design has this id
        """
        pass

    @abstractmethod
    def list_by_player_id(self, player_id: str) -> List[Design]:
        """List a player's designs; an empty player id lists every design."""
        pass
