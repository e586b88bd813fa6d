"""
Outbound Ports (Secondary/Driven Ports)

Interfaces for storage the application depends on.
"""

from .design_repository import IDesignRepository
from .scenario_repository import IScenarioRepository
from .game_state_repository import IGameStateRepository

__all__ = [
    "IDesignRepository",
    "IScenarioRepository",
    "IGameStateRepository",
]
