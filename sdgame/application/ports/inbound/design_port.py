"""
Design Use Case Port

Interface defining the contract for storing and retrieving designs.
"""

from abc import ABC, abstractmethod
from typing import List

from sdgame.domain.models import Design


class IDesignUseCase(ABC):
    """Inbound port for design management."""

    @abstractmethod
    def save_design(self, design: Design) -> Design:
        """
        Validate and store a design.

        Raises:
            InvalidInputError: if the design is malformed
        """
        pass

    @abstractmethod
    def get_design(self, design_id: str) -> Design:
        pass

    @abstractmethod
    def list_designs(self, player_id: str = "") -> List[Design]:
        pass
