"""
Scenario Repository Port
"""

from abc import ABC, abstractmethod
from typing import List

from sdgame.domain.models import Scenario


class IScenarioRepository(ABC):
    """Outbound port for read-only scenario lookup."""

    @abstractmethod
    def get_by_id(self, scenario_id: str) -> Scenario:
        """
        Raises:
            NotFoundError: if no scenario has this id
        """
        pass

    @abstractmethod
    def list_all(self) -> List[Scenario]:
        pass
