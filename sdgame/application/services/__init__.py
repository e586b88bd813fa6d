"""
Application Services

Implementations of the inbound ports.
"""

from .design_service import DesignService
from .scenario_service import ScenarioService
from .evaluation_service import EvaluationService
from .game_service import GameService

__all__ = [
    "DesignService",
    "ScenarioService",
    "EvaluationService",
    "GameService",
]
