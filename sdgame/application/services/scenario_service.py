"""
Scenario Service
"""

from __future__ import annotations
from typing import List

from sdgame.application.ports.inbound import IScenarioUseCase
from sdgame.application.ports.outbound import IScenarioRepository
from sdgame.domain.models import Scenario


class ScenarioService(IScenarioUseCase):
    """Read-only access to the level catalog."""

    def __init__(self, repository: IScenarioRepository):
        self.repository = repository

    def get_scenario(self, scenario_id: str) -> Scenario:
        return self.repository.get_by_id(scenario_id)

    def list_scenarios(self) -> List[Scenario]:
        return self.repository.list_all()
