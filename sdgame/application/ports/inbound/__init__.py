"""
Inbound Ports (Primary/Driving Ports)

Interfaces for use cases that drive the application.
"""

from .design_port import IDesignUseCase
from .scenario_port import IScenarioUseCase
from .evaluation_port import IEvaluationUseCase
from .game_port import IGameUseCase

__all__ = [
    "IDesignUseCase",
    "IScenarioUseCase",
    "IEvaluationUseCase",
    "IGameUseCase",
]
