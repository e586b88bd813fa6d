"""
Scenario Use Case Port
"""

from abc import ABC, abstractmethod
from typing import List

from sdgame.domain.models import Scenario


class IScenarioUseCase(ABC):
    """Inbound port for browsing game levels."""

    @abstractmethod
    def get_scenario(self, scenario_id: str) -> Scenario:
        pass

    @abstractmethod
    def list_scenarios(self) -> List[Scenario]:
        pass
